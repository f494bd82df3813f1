"""
Histórico de treinos.

Cada registro é exibido a partir do próprio snapshot. Só registros antigos
(sem exercícios embutidos) consultam o plano original; se ele foi apagado,
o histórico mostra um aviso em vez de falhar.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Set

from app.models.log import WorkoutLog
from app.models.plan import Cardio, Exercise, WorkoutPlan

PLAN_NOT_FOUND = "Plano de treino não encontrado."
NOTHING_COMPLETED = "Nenhum exercício foi marcado como concluído neste treino."


@dataclass
class PlanDetails:
    name: str
    exercises: List[Exercise]
    cardio: Optional[Cardio] = None


@dataclass
class HistoryEntry:
    log: WorkoutLog
    details: Optional[PlanDetails]
    completed_exercises: List[Exercise] = field(default_factory=list)
    cardio_completed: bool = False

    @property
    def plan_missing(self) -> bool:
        return self.details is None

    @property
    def title(self) -> str:
        return self.log.plan_name

    @property
    def date_label(self) -> str:
        return format_log_date(self.log.date)

    @property
    def nothing_completed(self) -> bool:
        return not self.plan_missing and not self.completed_exercises and not self.cardio_completed

    def exercise_lines(self) -> List[str]:
        return [f"{ex.name}: {describe_exercise(ex)}" for ex in self.completed_exercises]

    def cardio_line(self) -> Optional[str]:
        if not self.cardio_completed or self.details is None or self.details.cardio is None:
            return None
        planned = self.details.cardio
        actual = self.log.cardio
        duration = (actual.duration if actual else None) or planned.duration
        distance = (actual.distance if actual else None) or planned.distance
        calories = (actual.calories if actual else None) or planned.calories
        parts = [f"Duração: {duration}"]
        if distance:
            parts.append(f"Distância: {distance}")
        if calories:
            parts.append(f"Calorias: {calories}")
        return f"{planned.type} - " + " | ".join(parts)


def parse_log_date(value: str) -> datetime:
    # fromisoformat só aceita o sufixo Z a partir do Python 3.11
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def local_log_date(value: str) -> datetime:
    """Data do registro no fuso local (os registros são gravados em UTC)."""
    return parse_log_date(value).astimezone()


def format_log_date(value: str) -> str:
    try:
        return local_log_date(value).strftime("%d/%m/%Y %H:%M")
    except ValueError:
        return value


def describe_exercise(ex: Exercise) -> str:
    text = f"{ex.sets} séries x {ex.reps} reps"
    if ex.load:
        text += f" com {ex.load} kg"
    return f"{text} | {ex.rest} descanso"


def resolve_details(log: WorkoutLog, plans: Iterable[WorkoutPlan]) -> Optional[PlanDetails]:
    if log.exercises is not None:
        return PlanDetails(name=log.plan_name, exercises=log.exercises, cardio=log.cardio)
    plan = next((p for p in plans if p.id == log.plan_id), None)
    if plan is None:
        return None
    return PlanDetails(name=plan.name, exercises=plan.exercises, cardio=plan.cardio)


def build_entry(log: WorkoutLog, plans: Iterable[WorkoutPlan]) -> HistoryEntry:
    details = resolve_details(log, plans)
    if details is None:
        return HistoryEntry(log=log, details=None)
    done = set(log.completed_exercise_ids or [])
    return HistoryEntry(
        log=log,
        details=details,
        completed_exercises=[ex for ex in details.exercises if ex.id in done],
        cardio_completed=bool(details.cardio is not None and log.cardio_completed),
    )


def build_history(logs: Iterable[WorkoutLog], plans: Iterable[WorkoutPlan]) -> List[HistoryEntry]:
    plans = list(plans)
    return [build_entry(log, plans) for log in logs]


class HistoryView:
    """Estado de expansão dos itens; some ao sair da tela."""

    def __init__(self) -> None:
        self.expanded: Set[str] = set()

    def toggle(self, log_id: str) -> None:
        if log_id in self.expanded:
            self.expanded.discard(log_id)
        else:
            self.expanded.add(log_id)

    def is_expanded(self, log_id: str) -> bool:
        return log_id in self.expanded
