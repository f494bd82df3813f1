"""
Contas locais do aplicativo.

As senhas ficam em um arquivo YAML como hash bcrypt; nunca em texto puro.
"""

import logging
import os
from typing import Dict, Optional

import bcrypt
import yaml

from client.session_context import SessionContext

logger = logging.getLogger(__name__)

# bcrypt só considera os primeiros 72 bytes
MAX_PASSWORD_BYTES = 72


class AuthError(Exception):
    """Falha de cadastro ou login (mensagem pronta para o usuário)."""


def _prepare_password(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prepare_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_prepare_password(password), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Hash de senha inválido no arquivo de usuários")
        return False


class UserRegistry:
    def __init__(self, path: str, context: SessionContext) -> None:
        self.path = path
        self.context = context

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return dict(data.get("users") or {})

    def _save(self, users: Dict[str, str]) -> None:
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"users": users}, f, allow_unicode=True)

    @staticmethod
    def _check_filled(username: str, password: str) -> None:
        if not username.strip() or not password.strip():
            raise AuthError("Preencha todos os campos.")

    def register(self, username: str, password: str) -> str:
        self._check_filled(username, password)
        users = self._load()
        if username in users:
            raise AuthError("Usuário já existe.")
        users[username] = hash_password(password)
        self._save(users)
        logger.info("Conta criada: %s", username)
        self.context.set_current_user(username)
        return username

    def login(self, username: str, password: str) -> str:
        self._check_filled(username, password)
        hashed = self._load().get(username)
        if hashed is None or not verify_password(password, hashed):
            raise AuthError("Usuário ou senha inválidos.")
        self.context.set_current_user(username)
        return username

    def logout(self) -> None:
        self.context.set_current_user(None)

    @property
    def current_user(self) -> Optional[str]:
        return self.context.current_user
