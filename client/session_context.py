import logging
import os
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Estado local do cliente: usuário conectado e último plano escolhido
    por usuário. Cada setter grava o arquivo YAML na hora.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self.current_user: Optional[str] = None
        self.last_plans: Dict[str, str] = {}

    @classmethod
    def load(cls, path: str) -> "SessionContext":
        ctx = cls(path)
        if not os.path.exists(path):
            return ctx
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        ctx.current_user = data.get("current_user")
        ctx.last_plans = dict(data.get("last_plans") or {})
        return ctx

    def save(self) -> None:
        if not self.path:
            return
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        data = {"current_user": self.current_user, "last_plans": self.last_plans}
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)

    def set_current_user(self, username: Optional[str]) -> None:
        self.current_user = username
        self.save()
        logger.info("Usuário atual: %s", username or "-")

    def last_plan_id(self, username: Optional[str] = None) -> Optional[str]:
        user = username or self.current_user
        if user is None:
            return None
        return self.last_plans.get(user)

    def set_last_plan_id(self, plan_id: Optional[str], username: Optional[str] = None) -> None:
        user = username or self.current_user
        if user is None:
            return
        if plan_id is None:
            self.last_plans.pop(user, None)
        else:
            self.last_plans[user] = plan_id
        self.save()
