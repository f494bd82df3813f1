# app/services/logs_service.py

import json
import logging
from typing import List, Optional

from app.models.log import WorkoutLog, WorkoutLogCreate, WorkoutLogUpdate
from app.services.plans_service import (
    dump_cardio,
    dump_exercises,
    load_cardio,
    load_exercises,
)

logger = logging.getLogger(__name__)

_LOG_COLUMNS = """
    id, plan_id, plan_name, date, exercises, cardio,
    completed_exercise_ids, cardio_completed, comments, rating
"""


def _row_to_log(row) -> WorkoutLog:
    return WorkoutLog(
        id=row[0],
        plan_id=row[1],
        plan_name=row[2],
        date=row[3],
        exercises=load_exercises(row[4]),
        cardio=load_cardio(row[5]),
        completed_exercise_ids=json.loads(row[6]) if row[6] else [],
        cardio_completed=row[7],
        comments=row[8],
        rating=row[9],
    )


def list_logs(cursor, user_id: str) -> List[WorkoutLog]:
    """
    Registros do usuário: data da sessão decrescente,
    depois ordem de criação decrescente.
    """
    cursor.execute(
        f"""
        SELECT {_LOG_COLUMNS}
        FROM workout_logs
        WHERE user_id = ?
        ORDER BY date DESC, created_at DESC, seq DESC;
        """,
        [user_id],
    )
    rows = cursor.fetchall()
    return [_row_to_log(row) for row in rows]


def get_log(cursor, log_id: str) -> Optional[WorkoutLog]:
    cursor.execute(
        f"""
        SELECT {_LOG_COLUMNS}
        FROM workout_logs
        WHERE id = ?;
        """,
        [log_id],
    )
    row = cursor.fetchone()
    if not row:
        return None
    return _row_to_log(row)


def create_log(cursor, log: WorkoutLogCreate) -> WorkoutLog:
    cursor.execute(
        """
        INSERT INTO workout_logs (
            id, seq, user_id, plan_id, plan_name, date, exercises, cardio,
            completed_exercise_ids, cardio_completed, comments, rating
        )
        VALUES (?, nextval('workout_logs_seq'), ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
        """,
        [
            log.id,
            log.user_id,
            log.plan_id,
            log.plan_name,
            log.date,
            dump_exercises(log.exercises) if log.exercises is not None else None,
            dump_cardio(log.cardio),
            json.dumps(log.completed_exercise_ids),
            log.cardio_completed,
            log.comments,
            log.rating,
        ],
    )
    logger.info("Registro %s criado (plano %s)", log.id, log.plan_id)
    return WorkoutLog(**log.model_dump(exclude={"user_id"}))


def update_log(cursor, log_id: str, updates: WorkoutLogUpdate) -> Optional[WorkoutLog]:
    """
    Atualiza só observações e/ou avaliação.
    Campos ausentes no corpo não são tocados.
    Retorna None se o registro não existir.
    """
    current = get_log(cursor, log_id)
    if current is None:
        return None

    fields = updates.model_dump(exclude_unset=True)
    if not fields:
        return current

    assignments = ", ".join(f"{column} = ?" for column in fields)
    cursor.execute(
        f"UPDATE workout_logs SET {assignments} WHERE id = ?;",
        [*fields.values(), log_id],
    )
    logger.info("Registro %s atualizado: %s", log_id, ", ".join(fields))
    return current.model_copy(update=fields)
