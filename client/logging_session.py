"""
Sessão de registro de treino.

Estados: NO_PLAN_SELECTED -> PLAN_SELECTED -> AWAITING_FEEDBACK -> COMPLETED,
e de COMPLETED de volta a PLAN_SELECTED com o mesmo plano após a mensagem de
sucesso. O registro é salvo no "finalizar"; a avaliação e as observações vêm
depois, como atualização parcial.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

from app.models.log import DEFAULT_RATING, WorkoutLog
from app.models.plan import Cardio, Exercise, WorkoutPlan
from client.countdown import RestCountdown, parse_rest_seconds

logger = logging.getLogger(__name__)

CARDIO_FIELDS = ("duration", "distance", "calories")


class SessionState(str, Enum):
    NO_PLAN_SELECTED = "no_plan_selected"
    PLAN_SELECTED = "plan_selected"
    AWAITING_FEEDBACK = "awaiting_feedback"
    COMPLETED = "completed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


class LoggingSession:
    def __init__(
        self,
        controller,
        scheduler,
        on_cue: Optional[Callable[[], None]] = None,
        success_seconds: float = 2.0,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.controller = controller
        self.scheduler = scheduler
        self.on_cue = on_cue
        self.success_seconds = success_seconds
        self.now = now

        self.state = SessionState.NO_PLAN_SELECTED
        self.selected_plan_id: Optional[str] = None
        self.active_countdown: Optional[RestCountdown] = None
        self._success_event = None
        self._reset_fields()

    # ---------- estado da sessão ----------

    def _reset_fields(self) -> None:
        if self.active_countdown is not None:
            self.active_countdown.dismiss()
        if self._success_event is not None:
            self._success_event.cancel()
            self._success_event = None
        self._completed: List[str] = []
        self.loads: Dict[str, str] = {}
        self.cardio_completed = False
        self.cardio_actuals: Dict[str, str] = {field: "" for field in CARDIO_FIELDS}
        self.active_countdown = None
        self.sets_done: Dict[str, int] = {}
        self.current_log_id: Optional[str] = None

    @property
    def selected_plan(self) -> Optional[WorkoutPlan]:
        if self.selected_plan_id is None:
            return None
        return self.controller.find_plan(self.selected_plan_id)

    @property
    def completed_exercise_ids(self) -> List[str]:
        return list(self._completed)

    @property
    def show_success(self) -> bool:
        return self.state == SessionState.COMPLETED

    def restore(self) -> None:
        """Volta ao último plano lembrado, se ele ainda existir."""
        remembered = self.controller.context.last_plan_id(self.controller.user_id)
        if remembered and self.controller.find_plan(remembered) is not None:
            self.select_plan(remembered)
        else:
            self._enter_no_plan()

    def select_plan(self, plan_id: Optional[str]) -> None:
        if plan_id is None or self.controller.find_plan(plan_id) is None:
            self.deselect()
            return
        self.selected_plan_id = plan_id
        self._reset_fields()
        self.state = SessionState.PLAN_SELECTED
        self.controller.context.set_last_plan_id(plan_id, self.controller.user_id)

    def deselect(self) -> None:
        self._enter_no_plan()
        self.controller.context.set_last_plan_id(None, self.controller.user_id)

    def _enter_no_plan(self) -> None:
        self.selected_plan_id = None
        self._reset_fields()
        self.state = SessionState.NO_PLAN_SELECTED

    def on_plan_deleted(self, plan_id: str) -> None:
        if plan_id == self.selected_plan_id:
            self.deselect()

    # ---------- exercícios e cardio ----------

    def toggle_exercise(self, exercise_id: str) -> None:
        if exercise_id in self._completed:
            self._completed.remove(exercise_id)
        else:
            self._completed.append(exercise_id)

    def is_completed(self, exercise_id: str) -> bool:
        return exercise_id in self._completed

    def set_load(self, exercise_id: str, load: str) -> None:
        self.loads[exercise_id] = load

    def toggle_cardio(self) -> None:
        self.cardio_completed = not self.cardio_completed

    def set_cardio_actual(self, field: str, value: str) -> None:
        if field not in CARDIO_FIELDS:
            raise ValueError(f"campo de cardio inválido: {field}")
        self.cardio_actuals[field] = value

    # ---------- descanso ----------

    def find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        plan = self.selected_plan
        if plan is None:
            return None
        return next((ex for ex in plan.exercises if ex.id == exercise_id), None)

    def start_rest(self, exercise_id: str) -> Optional[RestCountdown]:
        """
        Inicia o descanso do exercício. Clicar de novo no mesmo exercício
        cancela; outro exercício substitui o cronômetro atual.
        """
        if self.active_countdown is not None and self.active_countdown.exercise_id == exercise_id:
            self.dismiss_rest()
            return None

        exercise = self.find_exercise(exercise_id)
        seconds = parse_rest_seconds(exercise.rest) if exercise else 0
        if seconds <= 0:
            return self.active_countdown

        self.dismiss_rest()
        countdown = RestCountdown(
            exercise_id,
            seconds,
            self.scheduler,
            on_finish=self._on_rest_finished,
            on_cue=self.on_cue,
        )
        self.active_countdown = countdown
        countdown.start()
        return countdown

    def toggle_rest(self) -> None:
        if self.active_countdown is not None:
            self.active_countdown.toggle()

    def reset_rest(self) -> None:
        if self.active_countdown is not None:
            self.active_countdown.reset()

    def dismiss_rest(self) -> None:
        if self.active_countdown is not None:
            self.active_countdown.dismiss()
            self.active_countdown = None

    def _on_rest_finished(self, exercise_id: str) -> None:
        self.sets_done[exercise_id] = self.sets_done.get(exercise_id, 0) + 1
        self.active_countdown = None

    # ---------- finalização ----------

    def build_log(self) -> WorkoutLog:
        plan = self.selected_plan
        if plan is None:
            raise ValueError("nenhum plano selecionado")

        exercises = [
            ex.model_copy(update={"load": self.loads.get(ex.id) or ""}, deep=True)
            for ex in plan.exercises
        ]
        cardio = None
        if plan.cardio is not None:
            cardio = Cardio(
                type=plan.cardio.type,
                duration=self.cardio_actuals["duration"] or plan.cardio.duration,
                distance=self.cardio_actuals["distance"] or plan.cardio.distance,
                calories=self.cardio_actuals["calories"] or None,
            )

        return WorkoutLog(
            id=str(uuid.uuid4()),
            plan_id=plan.id,
            plan_name=plan.name,
            date=iso_timestamp(self.now()),
            exercises=exercises,
            cardio=cardio,
            completed_exercise_ids=list(self._completed),
            cardio_completed=self.cardio_completed if plan.cardio is not None else None,
        )

    def finish(self) -> Optional[WorkoutLog]:
        """
        Gera o snapshot e salva na hora. Se a gravação falhar,
        a sessão continua como estava e o modal não abre.
        """
        if self.state != SessionState.PLAN_SELECTED or self.selected_plan is None:
            return None
        log = self.build_log()
        if not self.controller.add_log(log):
            return None
        self.current_log_id = log.id
        self.state = SessionState.AWAITING_FEEDBACK
        return log

    def submit_feedback(self, comments: str = "", rating: str = DEFAULT_RATING) -> None:
        if self.state != SessionState.AWAITING_FEEDBACK:
            return
        if self.current_log_id:
            self.controller.update_log(self.current_log_id, comments=comments, rating=rating)
        self._complete()

    def skip_feedback(self) -> None:
        if self.state != SessionState.AWAITING_FEEDBACK:
            return
        self._complete()

    def _complete(self) -> None:
        self.state = SessionState.COMPLETED
        self._success_event = self.scheduler.schedule_once(
            self._after_success, self.success_seconds
        )

    def _after_success(self, dt=None) -> None:
        self._success_event = None
        if self.state != SessionState.COMPLETED:
            return
        if self.selected_plan is not None:
            self.select_plan(self.selected_plan_id)
        else:
            self.deselect()
