import pytest
import yaml

from client.auth import AuthError, UserRegistry, hash_password, verify_password
from client.session_context import SessionContext


@pytest.fixture
def registry(tmp_path):
    context = SessionContext.load(str(tmp_path / "session.yaml"))
    return UserRegistry(str(tmp_path / "users.yaml"), context)


def test_password_hashing():
    hashed = hash_password("segredo")
    assert hashed != "segredo"
    assert verify_password("segredo", hashed)
    assert not verify_password("outra", hashed)
    assert not verify_password("segredo", "lixo")


def test_register_stores_only_hashes(registry, tmp_path):
    assert registry.register("ana", "segredo") == "ana"
    assert registry.current_user == "ana"

    with open(tmp_path / "users.yaml", encoding="utf-8") as f:
        users = yaml.safe_load(f)["users"]
    assert users["ana"] != "segredo"
    assert users["ana"].startswith("$2")


def test_register_rejects_duplicates_and_blanks(registry):
    registry.register("ana", "segredo")
    with pytest.raises(AuthError, match="Usuário já existe."):
        registry.register("ana", "outra")
    with pytest.raises(AuthError, match="Preencha todos os campos."):
        registry.register("  ", "x")


def test_login_and_logout(registry):
    registry.register("ana", "segredo")
    registry.logout()
    assert registry.current_user is None

    with pytest.raises(AuthError, match="Usuário ou senha inválidos."):
        registry.login("ana", "errada")
    with pytest.raises(AuthError):
        registry.login("bia", "segredo")

    assert registry.login("ana", "segredo") == "ana"
    assert registry.current_user == "ana"


def test_session_context_persists(tmp_path):
    path = str(tmp_path / "nested" / "session.yaml")
    context = SessionContext.load(path)
    context.set_current_user("ana")
    context.set_last_plan_id("plan-1")
    context.set_last_plan_id("plan-9", "bia")

    reloaded = SessionContext.load(path)
    assert reloaded.current_user == "ana"
    assert reloaded.last_plan_id() == "plan-1"
    assert reloaded.last_plan_id("bia") == "plan-9"

    reloaded.set_last_plan_id(None)
    assert SessionContext.load(path).last_plan_id("ana") is None


def test_last_plan_needs_a_user():
    context = SessionContext()
    context.set_last_plan_id("plan-1")
    assert context.last_plan_id() is None
