"""
Controlador do painel do usuário.

Guarda as cópias em memória de planos e registros, roteia entre as quatro
telas e faz todas as mutações. Cada mutação é uma operação só: chama a API;
se der certo aplica a mudança local; se falhar avisa o usuário e deixa o
estado como estava.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from app.core.config import get_settings
from app.models.log import WorkoutLog, WorkoutLogUpdate
from app.models.plan import WorkoutPlan
from client.evolution import EvolutionReport, build_report
from client.gateway import ApiGateway, GatewayError
from client.history import HistoryEntry, HistoryView, build_history
from client.logging_session import LoggingSession
from client.plan_editor import PlanEditor
from client.session_context import SessionContext

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Tem certeza que deseja excluir este plano?"


class View(str, Enum):
    CREATOR = "creator"
    LOGGER = "logger"
    HISTORY = "history"
    EVOLUTION = "evolution"


class LoggingNotifier:
    """Notificador sem interface: só registra no log e confirma tudo."""

    def alert(self, message: str) -> None:
        logger.warning(message)

    def confirm(self, message: str, on_confirm: Callable[[], None]) -> None:
        logger.info("%s (confirmado)", message)
        on_confirm()


class DashboardController:
    def __init__(
        self,
        user_id: str,
        gateway: ApiGateway,
        context: SessionContext,
        scheduler,
        notifier=None,
        on_cue: Optional[Callable[[], None]] = None,
        success_seconds: Optional[float] = None,
    ) -> None:
        self.user_id = user_id
        self.gateway = gateway
        self.context = context
        self.notifier = notifier or LoggingNotifier()

        self.view = View.LOGGER
        self.editing_plan_id: Optional[str] = None
        self.plans: List[WorkoutPlan] = []
        self.logs: List[WorkoutLog] = []
        self.loading = False

        self._logs_revision = 0
        self._report_cache = None

        if success_seconds is None:
            success_seconds = get_settings().SUCCESS_MESSAGE_SECONDS
        self.session = LoggingSession(
            self, scheduler, on_cue=on_cue, success_seconds=success_seconds
        )
        self.history_view = HistoryView()

    # ---------- carga inicial ----------

    def load(self) -> bool:
        self.loading = True
        try:
            plans = self.gateway.get_plans(self.user_id)
            logs = self.gateway.get_logs(self.user_id)
        except GatewayError:
            logger.exception("Falha ao carregar dados de %s", self.user_id)
            return False
        else:
            self.plans = plans
            self._set_logs(logs)
            self.session.restore()
            return True
        finally:
            self.loading = False

    def find_plan(self, plan_id: str) -> Optional[WorkoutPlan]:
        return next((p for p in self.plans if p.id == plan_id), None)

    def _set_logs(self, logs: List[WorkoutLog]) -> None:
        self.logs = logs
        self._logs_revision += 1

    def _attempt(self, remote: Callable[[], None], error_message: str) -> bool:
        try:
            remote()
        except GatewayError:
            logger.exception(error_message)
            self.notifier.alert(error_message)
            return False
        return True

    # ---------- planos ----------

    def add_plan(self, plan: WorkoutPlan) -> bool:
        ok = self._attempt(
            lambda: self.gateway.create_plan(self.user_id, plan),
            "Erro ao salvar o plano. Tente novamente.",
        )
        if ok:
            self.plans = [plan, *self.plans]
            self.view = View.LOGGER
        return ok

    def update_plan(self, plan: WorkoutPlan) -> bool:
        ok = self._attempt(
            lambda: self.gateway.update_plan(plan),
            "Erro ao atualizar o plano. Tente novamente.",
        )
        if ok:
            self.plans = [plan if p.id == plan.id else p for p in self.plans]
            self.editing_plan_id = None
            self.view = View.LOGGER
        return ok

    def request_delete_plan(
        self, plan_id: str, on_done: Optional[Callable[[bool], None]] = None
    ) -> None:
        """
        Pede confirmação antes de apagar. on_done recebe o resultado
        só depois que a exclusão de fato rodou.
        """

        def _confirmed() -> None:
            ok = self.delete_plan(plan_id)
            if on_done is not None:
                on_done(ok)

        self.notifier.confirm(DELETE_CONFIRMATION, _confirmed)

    def delete_plan(self, plan_id: str) -> bool:
        ok = self._attempt(
            lambda: self.gateway.delete_plan(plan_id),
            "Erro ao excluir o plano. Tente novamente.",
        )
        if ok:
            self.plans = [p for p in self.plans if p.id != plan_id]
            if self.editing_plan_id == plan_id:
                self.editing_plan_id = None
            self.session.on_plan_deleted(plan_id)
        return ok

    # ---------- registros ----------

    def add_log(self, log: WorkoutLog) -> bool:
        ok = self._attempt(
            lambda: self.gateway.create_log(self.user_id, log),
            "Erro ao salvar o treino. Tente novamente.",
        )
        if ok:
            self._set_logs([log, *self.logs])
        return ok

    def update_log(self, log_id: str, comments: Optional[str] = None, rating: Optional[str] = None) -> bool:
        fields = {}
        if comments is not None:
            fields["comments"] = comments
        if rating is not None:
            fields["rating"] = rating
        updates = WorkoutLogUpdate(**fields)
        ok = self._attempt(
            lambda: self.gateway.update_log(log_id, updates),
            "Erro ao atualizar o treino. Tente novamente.",
        )
        if ok:
            self._set_logs(
                [log.model_copy(update=fields) if log.id == log_id else log for log in self.logs]
            )
        return ok

    # ---------- navegação ----------

    def change_view(self, view: View) -> None:
        if view != View.CREATOR:
            self.editing_plan_id = None
        self.view = view

    def edit_plan(self, plan_id: str) -> None:
        self.editing_plan_id = plan_id
        self.view = View.CREATOR

    def new_plan(self) -> None:
        self.editing_plan_id = None
        self.view = View.CREATOR

    @property
    def plan_to_edit(self) -> Optional[WorkoutPlan]:
        if self.editing_plan_id is None:
            return None
        return self.find_plan(self.editing_plan_id)

    def editor(self) -> PlanEditor:
        return PlanEditor(self, self.plan_to_edit)

    # ---------- telas derivadas ----------

    def history(self) -> List[HistoryEntry]:
        return build_history(self.logs, self.plans)

    def evolution(self) -> EvolutionReport:
        # recalcula só quando a coleção de registros muda
        if self._report_cache is None or self._report_cache[0] != self._logs_revision:
            self._report_cache = (self._logs_revision, build_report(self.logs))
        return self._report_cache[1]
