from contextlib import contextmanager
from pathlib import Path
import logging

import duckdb

from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# DuckDB recebe caminho como string, mas criamos pasta via Path
_db_path = Path(settings.DB_PATH).resolve()

# Conexão global (um por processo)
_connection = None


def _ensure_parent(path: Path) -> None:
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)


def set_db_path(path) -> None:
    """
    Aponta o armazenamento para outro arquivo (ex: testes).
    Fecha a conexão atual; a próxima chamada abre o novo arquivo.
    """
    global _db_path
    close_connection()
    _db_path = Path(path).resolve()


def init_db():
    conn = get_connection()
    cursor = conn.cursor()

    # SEQUENCES (ordem de inserção, desempate do created_at)
    cursor.execute("CREATE SEQUENCE IF NOT EXISTS workout_plans_seq START 1;")
    cursor.execute("CREATE SEQUENCE IF NOT EXISTS workout_logs_seq START 1;")

    # Planos de treino (exercícios e cardio guardados como JSON)
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS workout_plans (
            id TEXT PRIMARY KEY,
            seq BIGINT NOT NULL,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            exercises TEXT NOT NULL,
            cardio TEXT,
            created_at TIMESTAMP DEFAULT current_timestamp
        );
        """
    )

    # Registros de treino: snapshot do plano no momento do registro.
    # exercises pode ser NULL em registros antigos (sem snapshot).
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS workout_logs (
            id TEXT PRIMARY KEY,
            seq BIGINT NOT NULL,
            user_id TEXT NOT NULL,
            plan_id TEXT NOT NULL,
            plan_name TEXT NOT NULL,
            date TEXT NOT NULL,
            exercises TEXT,
            cardio TEXT,
            completed_exercise_ids TEXT,
            cardio_completed BOOLEAN,
            comments TEXT,
            rating TEXT,
            created_at TIMESTAMP DEFAULT current_timestamp
        );
        """
    )

    conn.commit()
    cursor.close()
    logger.info("Banco inicializado em %s", _db_path)


def get_connection() -> duckdb.DuckDBPyConnection:
    """
    Retorna uma conexão global com o DuckDB.
    Garante que só abrimos o arquivo uma vez por processo.
    """
    global _connection
    if _connection is None:
        _ensure_parent(_db_path)
        _connection = duckdb.connect(str(_db_path))
    return _connection


def close_connection() -> None:
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None


@contextmanager
def get_cursor():
    """
    Context manager que fornece um cursor a partir da conexão global.

    Uso:
        with get_cursor() as cursor:
            cursor.execute("...")
    """
    conn = get_connection()
    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    finally:
        cursor.close()
