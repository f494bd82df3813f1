from typing import List, Optional

from app.models.log import WorkoutLog
from app.models.plan import Cardio, Exercise, WorkoutPlan
from client.dashboard import DashboardController
from client.gateway import GatewayError
from client.session_context import SessionContext


class FakeEvent:
    def __init__(self, callback, delay):
        self.callback = callback
        self.delay = delay
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Relógio manual: nada acontece até o teste chamar tick()/run_once()."""

    def __init__(self):
        self.intervals: List[FakeEvent] = []
        self.once: List[FakeEvent] = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(callback, interval)
        self.intervals.append(event)
        return event

    def schedule_once(self, callback, timeout=0):
        event = FakeEvent(callback, timeout)
        self.once.append(event)
        return event

    @property
    def active_intervals(self):
        return [e for e in self.intervals if not e.cancelled]

    def tick(self, times=1):
        for _ in range(times):
            for event in list(self.active_intervals):
                if not event.cancelled:
                    event.callback(event.delay)

    def run_once(self):
        pending, self.once = self.once, []
        for event in pending:
            if not event.cancelled:
                event.callback(event.delay)


class RecordingNotifier:
    """answer=None deixa a confirmação pendente, como um diálogo aberto."""

    def __init__(self, answer=True):
        self.answer = answer
        self.alerts: List[str] = []
        self.confirms: List[str] = []
        self.pending = []

    def alert(self, message):
        self.alerts.append(message)

    def confirm(self, message, on_confirm):
        self.confirms.append(message)
        if self.answer is None:
            self.pending.append(on_confirm)
        elif self.answer:
            on_confirm()


class FakeGateway:
    """Gateway em memória; nomes em `fail` levantam GatewayError."""

    def __init__(self, plans=None, logs=None):
        self.plans: List[WorkoutPlan] = list(plans or [])
        self.logs: List[WorkoutLog] = list(logs or [])
        self.fail = set()
        self.calls = []

    def _check(self, name, *args):
        self.calls.append((name, args))
        if name in self.fail:
            raise GatewayError(f"{name} failed", status_code=500)

    def called(self, name):
        return [args for call, args in self.calls if call == name]

    def get_plans(self, user_id):
        self._check("get_plans", user_id)
        return list(self.plans)

    def create_plan(self, user_id, plan):
        self._check("create_plan", user_id, plan)
        self.plans.insert(0, plan)

    def update_plan(self, plan):
        self._check("update_plan", plan)
        self.plans = [plan if p.id == plan.id else p for p in self.plans]

    def delete_plan(self, plan_id):
        self._check("delete_plan", plan_id)
        self.plans = [p for p in self.plans if p.id != plan_id]

    def get_logs(self, user_id):
        self._check("get_logs", user_id)
        return list(self.logs)

    def create_log(self, user_id, log):
        self._check("create_log", user_id, log)
        self.logs.insert(0, log)

    def update_log(self, log_id, updates):
        self._check("update_log", log_id, updates)


def make_plan(plan_id="plan-1", name="Treino A", exercises=None, cardio=None) -> WorkoutPlan:
    if exercises is None:
        exercises = [
            Exercise(id="ex-1", muscle="Peito", name="Supino Reto", rest="90"),
            Exercise(id="ex-2", muscle="Tríceps", name="Tríceps Corda", rest="2min"),
        ]
    return WorkoutPlan(id=plan_id, name=name, exercises=exercises, cardio=cardio)


def make_cardio(duration="30", distance="5", calories=None) -> Cardio:
    return Cardio(type="Esteira", duration=duration, distance=distance, calories=calories)


def make_log(
    log_id="log-1",
    date="2024-01-15T10:00:00.000Z",
    plan_id="plan-1",
    exercises=None,
    cardio=None,
    cardio_completed=None,
    completed=None,
    comments=None,
    rating=None,
) -> WorkoutLog:
    return WorkoutLog(
        id=log_id,
        plan_id=plan_id,
        plan_name="Treino A",
        date=date,
        exercises=exercises,
        cardio=cardio,
        completed_exercise_ids=completed or [],
        cardio_completed=cardio_completed,
        comments=comments,
        rating=rating,
    )


def make_controller(
    gateway,
    scheduler=None,
    notifier=None,
    context: Optional[SessionContext] = None,
    on_cue=None,
) -> DashboardController:
    controller = DashboardController(
        "ana",
        gateway,
        context or SessionContext(),
        scheduler or ManualScheduler(),
        notifier=notifier or RecordingNotifier(),
        on_cue=on_cue,
        success_seconds=2,
    )
    controller.load()
    return controller
