import sys
from pathlib import Path

# Garante que os pacotes "app" e "client" estejam no sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from app.core.config import get_settings  # type: ignore
from client.auth import UserRegistry  # type: ignore
from client.dashboard import DashboardController  # type: ignore
from client.gateway import ApiGateway  # type: ignore
from client.session_context import SessionContext  # type: ignore


settings = get_settings()


def build_context():
    return SessionContext.load(settings.SESSION_FILE)


def build_registry(context):
    return UserRegistry(settings.USERS_FILE, context)


def build_controller(user_id, context, scheduler, notifier, on_cue):
    """
    Monta o controlador do painel para o usuário conectado.
    O scheduler é o Clock do Kivy.
    """
    controller = DashboardController(
        user_id,
        ApiGateway(settings.API_BASE_URL),
        context,
        scheduler,
        notifier=notifier,
        on_cue=on_cue,
        success_seconds=settings.SUCCESS_MESSAGE_SECONDS,
    )
    controller.load()
    return controller
