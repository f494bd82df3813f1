# app/services/plans_service.py

import json
import logging
from typing import List, Optional

from app.models.plan import Cardio, Exercise, PlanContent, WorkoutPlan, WorkoutPlanCreate

logger = logging.getLogger(__name__)


# ---------- JSON ----------


def dump_exercises(exercises: List[Exercise]) -> str:
    return json.dumps(
        [ex.model_dump(exclude_none=True) for ex in exercises], ensure_ascii=False
    )


def dump_cardio(cardio: Optional[Cardio]) -> Optional[str]:
    if cardio is None:
        return None
    return json.dumps(cardio.model_dump(exclude_none=True), ensure_ascii=False)


def load_exercises(raw: Optional[str]) -> Optional[List[Exercise]]:
    if raw is None:
        return None
    return [Exercise.model_validate(item) for item in json.loads(raw)]


def load_cardio(raw: Optional[str]) -> Optional[Cardio]:
    if not raw:
        return None
    return Cardio.model_validate(json.loads(raw))


def _row_to_plan(row) -> WorkoutPlan:
    return WorkoutPlan(
        id=row[0],
        name=row[1],
        exercises=load_exercises(row[2]),
        cardio=load_cardio(row[3]),
    )


# ---------- PLANOS ----------


def list_plans(cursor, user_id: str) -> List[WorkoutPlan]:
    """
    Planos do usuário, do mais recente para o mais antigo.
    """
    cursor.execute(
        """
        SELECT id, name, exercises, cardio
        FROM workout_plans
        WHERE user_id = ?
        ORDER BY created_at DESC, seq DESC;
        """,
        [user_id],
    )
    rows = cursor.fetchall()
    return [_row_to_plan(row) for row in rows]


def get_plan(cursor, plan_id: str) -> Optional[WorkoutPlan]:
    cursor.execute(
        """
        SELECT id, name, exercises, cardio
        FROM workout_plans
        WHERE id = ?;
        """,
        [plan_id],
    )
    row = cursor.fetchone()
    if not row:
        return None
    return _row_to_plan(row)


def plan_exists(cursor, plan_id: str) -> bool:
    cursor.execute("SELECT id FROM workout_plans WHERE id = ?;", [plan_id])
    return cursor.fetchone() is not None


def create_plan(cursor, plan: WorkoutPlanCreate) -> WorkoutPlan:
    cursor.execute(
        """
        INSERT INTO workout_plans (id, seq, user_id, name, exercises, cardio)
        VALUES (?, nextval('workout_plans_seq'), ?, ?, ?, ?);
        """,
        [
            plan.id,
            plan.user_id,
            plan.name,
            dump_exercises(plan.exercises),
            dump_cardio(plan.cardio),
        ],
    )
    logger.info("Plano %s criado para %s", plan.id, plan.user_id)
    return WorkoutPlan(**plan.model_dump(exclude={"user_id"}))


def update_plan(cursor, plan_id: str, content: PlanContent) -> Optional[WorkoutPlan]:
    """
    Substitui nome, exercícios e cardio do plano.
    Retorna None se o plano não existir.
    """
    if not plan_exists(cursor, plan_id):
        return None

    cursor.execute(
        """
        UPDATE workout_plans
        SET name = ?, exercises = ?, cardio = ?
        WHERE id = ?;
        """,
        [
            content.name,
            dump_exercises(content.exercises),
            dump_cardio(content.cardio),
            plan_id,
        ],
    )
    logger.info("Plano %s atualizado", plan_id)
    return WorkoutPlan(id=plan_id, **content.model_dump())


def delete_plan(cursor, plan_id: str) -> bool:
    """
    Remove o plano. Os registros de treino ficam intactos:
    cada um carrega seu próprio snapshot.
    Retorna False se o plano não existir.
    """
    if not plan_exists(cursor, plan_id):
        return False

    cursor.execute("DELETE FROM workout_plans WHERE id = ?;", [plan_id])
    logger.info("Plano %s removido", plan_id)
    return True
