import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.models.plan import Cardio, Exercise, WorkoutPlan

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Por favor, preencha o nome do treino e o nome de todos os exercícios."

EXERCISE_FIELDS = ("muscle", "name", "sets", "reps", "rest", "method", "notes")
CARDIO_FIELDS = ("type", "duration", "distance", "calories")


class PlanValidationError(ValueError):
    """Nome do plano ou de algum exercício em branco."""


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class ExerciseDraft:
    """Linha do formulário. temp_id identifica a linha; id só existe na edição."""

    temp_id: str = field(default_factory=new_id)
    id: Optional[str] = None
    muscle: str = ""
    name: str = ""
    sets: str = "3"
    reps: str = "10"
    rest: str = "60s"
    method: str = ""
    notes: str = ""

    @classmethod
    def from_exercise(cls, ex: Exercise) -> "ExerciseDraft":
        return cls(
            temp_id=ex.id,
            id=ex.id,
            muscle=ex.muscle,
            name=ex.name,
            sets=ex.sets,
            reps=ex.reps,
            rest=ex.rest,
            method=ex.method,
            notes=ex.notes,
        )

    def to_exercise(self) -> Exercise:
        return Exercise(
            id=self.id or new_id(),
            muscle=self.muscle,
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            rest=self.rest,
            method=self.method,
            notes=self.notes,
        )


def _empty_cardio() -> Dict[str, str]:
    return {name: "" for name in CARDIO_FIELDS}


class PlanEditor:
    """Formulário de criação/edição de plano de treino."""

    def __init__(self, controller, plan_to_edit: Optional[WorkoutPlan] = None) -> None:
        self.controller = controller
        self.load(plan_to_edit)

    def load(self, plan: Optional[WorkoutPlan]) -> None:
        self.plan_to_edit = plan
        if plan is None:
            self.name = ""
            self.exercises: List[ExerciseDraft] = [ExerciseDraft()]
            self.cardio = _empty_cardio()
        else:
            self.name = plan.name
            self.exercises = [ExerciseDraft.from_exercise(ex) for ex in plan.exercises]
            self.cardio = _empty_cardio()
            if plan.cardio is not None:
                for name in CARDIO_FIELDS:
                    self.cardio[name] = getattr(plan.cardio, name) or ""

    @property
    def is_editing(self) -> bool:
        return self.plan_to_edit is not None

    # ---------- formulário ----------

    def add_exercise(self) -> ExerciseDraft:
        draft = ExerciseDraft()
        self.exercises.append(draft)
        return draft

    def remove_exercise(self, temp_id: str) -> None:
        # sempre sobra pelo menos uma linha
        if len(self.exercises) > 1:
            self.exercises = [ex for ex in self.exercises if ex.temp_id != temp_id]

    def update_exercise(self, temp_id: str, field_name: str, value: str) -> None:
        if field_name not in EXERCISE_FIELDS:
            raise ValueError(f"campo de exercício inválido: {field_name}")
        for draft in self.exercises:
            if draft.temp_id == temp_id:
                setattr(draft, field_name, value)
                return

    def update_cardio(self, field_name: str, value: str) -> None:
        if field_name not in CARDIO_FIELDS:
            raise ValueError(f"campo de cardio inválido: {field_name}")
        self.cardio[field_name] = value

    # ---------- envio ----------

    def validate(self) -> None:
        if not self.name.strip() or not all(ex.name.strip() for ex in self.exercises):
            raise PlanValidationError(VALIDATION_MESSAGE)

    def build_plan(self) -> WorkoutPlan:
        self.validate()
        cardio = None
        if self.cardio["type"].strip():
            cardio = Cardio(
                type=self.cardio["type"],
                duration=self.cardio["duration"],
                distance=self.cardio["distance"] or None,
                calories=self.cardio["calories"] or None,
            )
        plan_id = self.plan_to_edit.id if self.plan_to_edit else new_id()
        return WorkoutPlan(
            id=plan_id,
            name=self.name,
            exercises=[draft.to_exercise() for draft in self.exercises],
            cardio=cardio,
        )

    def submit(self) -> bool:
        """
        Valida e envia. Em caso de erro de validação avisa o usuário
        e não chama a API.
        """
        try:
            plan = self.build_plan()
        except PlanValidationError as exc:
            self.controller.notifier.alert(str(exc))
            return False

        if self.is_editing:
            return self.controller.update_plan(plan)
        return self.controller.add_plan(plan)
