"""
Gateway HTTP do cliente: chamadas tipadas para a API REST.

Qualquer falha (rede, status >= 400, corpo inválido) vira GatewayError.
Não há nova tentativa automática: quem chama decide o que mostrar.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from app.core.config import get_settings
from app.models.log import WorkoutLog, WorkoutLogCreate, WorkoutLogUpdate
from app.models.plan import PlanContent, WorkoutPlan, WorkoutPlanCreate

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Falha de uma chamada à API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiGateway:
    """Cliente REST para planos e registros de treino."""

    def __init__(self, base_url: Optional[str] = None, http=None, timeout: Optional[float] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        # Qualquer objeto com .request(method, url, json=..., timeout=...) serve (ex: TestClient)
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    def _call(self, method: str, path: str, failure: str, payload=None):
        url = f"{self.base_url}{path}"
        kwargs = {"timeout": self.timeout}
        if payload is not None:
            kwargs["json"] = payload
        try:
            resp = self.http.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise GatewayError(failure) from exc

        if resp.status_code >= 400:
            logger.warning("%s %s -> %s", method, path, resp.status_code)
            raise GatewayError(failure, status_code=resp.status_code)
        return resp

    # ---------- PLANOS ----------

    def get_plans(self, user_id: str) -> List[WorkoutPlan]:
        resp = self._call("GET", f"/api/plans/{quote(user_id, safe='')}", "Failed to fetch plans")
        try:
            return [WorkoutPlan.model_validate(item) for item in resp.json()]
        except (ValueError, ValidationError) as exc:
            raise GatewayError("Failed to fetch plans") from exc

    def create_plan(self, user_id: str, plan: WorkoutPlan) -> None:
        body = WorkoutPlanCreate(user_id=user_id, **plan.model_dump())
        self._call(
            "POST",
            "/api/plans",
            "Failed to create plan",
            payload=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def update_plan(self, plan: WorkoutPlan) -> None:
        content = PlanContent(**plan.model_dump(exclude={"id"}))
        self._call(
            "PUT",
            f"/api/plans/{quote(plan.id, safe='')}",
            "Failed to update plan",
            payload=content.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def delete_plan(self, plan_id: str) -> None:
        self._call("DELETE", f"/api/plans/{quote(plan_id, safe='')}", "Failed to delete plan")

    # ---------- REGISTROS ----------

    def get_logs(self, user_id: str) -> List[WorkoutLog]:
        resp = self._call("GET", f"/api/logs/{quote(user_id, safe='')}", "Failed to fetch logs")
        try:
            return [WorkoutLog.model_validate(item) for item in resp.json()]
        except (ValueError, ValidationError) as exc:
            raise GatewayError("Failed to fetch logs") from exc

    def create_log(self, user_id: str, log: WorkoutLog) -> None:
        body = WorkoutLogCreate(user_id=user_id, **log.model_dump())
        self._call(
            "POST",
            "/api/logs",
            "Failed to create log",
            payload=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def update_log(self, log_id: str, updates: WorkoutLogUpdate) -> None:
        self._call(
            "PUT",
            f"/api/logs/{quote(log_id, safe='')}",
            "Failed to update log",
            payload=updates.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
