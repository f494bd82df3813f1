from typing import Optional, Literal, List
from pydantic import Field

from app.models.plan import CamelModel, Exercise, Cardio


RatingType = Literal["😞", "😐", "😊", "😄", "💪"]

RATINGS: List[str] = ["😞", "😐", "😊", "😄", "💪"]
DEFAULT_RATING: RatingType = "😊"


class WorkoutLog(CamelModel):
    id: str
    plan_id: str = Field(..., description="ID do plano de origem")
    plan_name: str = Field(..., description="Snapshot do nome do plano")
    date: str = Field(..., description="Data/hora da sessão em ISO 8601")
    # None apenas em registros antigos, anteriores ao snapshot
    exercises: Optional[List[Exercise]] = None
    cardio: Optional[Cardio] = None
    completed_exercise_ids: List[str] = Field(default_factory=list)
    cardio_completed: Optional[bool] = None
    comments: Optional[str] = None
    rating: Optional[RatingType] = None


class WorkoutLogCreate(WorkoutLog):
    user_id: str = Field(..., min_length=1, description="Dono do registro")


class WorkoutLogUpdate(CamelModel):
    """Atualização parcial: só observações e avaliação."""

    comments: Optional[str] = None
    rating: Optional[RatingType] = None
