from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base dos modelos trafegados na API: atributos em snake_case,
    JSON em camelCase (userId, planId, cardioCompleted...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Exercise(CamelModel):
    id: str = Field(..., description="Identificador gerado pelo cliente")
    muscle: str = Field("", description="Ex: Peito, Costas, Pernas")
    name: str = Field(..., description="Nome do exercício")
    sets: str = Field("3", description="Séries (texto livre)")
    reps: str = Field("10", description="Repetições (texto livre)")
    load: Optional[str] = Field(None, description="Carga usada em kg")
    rest: str = Field("60s", description="Descanso, ex: '60s' ou '2min'")
    method: str = Field("", description="Ex: Drop-set, Bi-set")
    notes: str = ""


class Cardio(CamelModel):
    type: str = Field(..., description="Ex: Corrida na esteira")
    duration: str = Field("", description="Duração (texto livre)")
    distance: Optional[str] = Field(None, description="Distância em km")
    calories: Optional[str] = None


class PlanContent(CamelModel):
    """Campos editáveis de um plano (corpo do PUT)."""

    name: str = Field(..., min_length=1, description="Nome do plano de treino")
    exercises: List[Exercise]
    cardio: Optional[Cardio] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("o nome do plano é obrigatório")
        return value

    @field_validator("exercises")
    @classmethod
    def _exercises_named(cls, value: List[Exercise]) -> List[Exercise]:
        if not value:
            raise ValueError("o plano precisa de ao menos um exercício")
        if any(not ex.name.strip() for ex in value):
            raise ValueError("todos os exercícios precisam de nome")
        return value


class WorkoutPlan(PlanContent):
    id: str


class WorkoutPlanCreate(WorkoutPlan):
    user_id: str = Field(..., min_length=1, description="Dono do plano")
