from functools import lru_cache
from dotenv import load_dotenv
import os

# Carrega variáveis do .env
load_dotenv()

class Settings:
    def __init__(self):
        self.APP_NAME = os.getenv("APP_NAME", "Pump Diário")
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.DB_PATH = os.getenv("DUCKDB_PATH", "app/db/data/pump_diario.duckdb")

        # Lado cliente (gateway, contexto de sessão, contas locais)
        self.API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
        self.HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
        self.SESSION_FILE = os.getenv(
            "SESSION_FILE", os.path.expanduser("~/.pump_diario/session.yaml")
        )
        self.USERS_FILE = os.getenv(
            "USERS_FILE", os.path.expanduser("~/.pump_diario/users.yaml")
        )
        self.SUCCESS_MESSAGE_SECONDS = float(os.getenv("SUCCESS_MESSAGE_SECONDS", "2"))


@lru_cache
def get_settings() -> Settings:
    """
    Retorna uma única instância de Settings (singleton).
    As variáveis do .env já ficam carregadas.
    """
    return Settings()
