import pytest
import requests

from app.models.log import WorkoutLogUpdate
from client.gateway import ApiGateway, GatewayError
from helpers import make_cardio, make_log, make_plan


@pytest.fixture
def gateway(api_client):
    return ApiGateway("http://testserver", http=api_client)


def test_plan_round_trip(gateway):
    plan = make_plan("p1", cardio=make_cardio())
    gateway.create_plan("ana", plan)

    plans = gateway.get_plans("ana")
    assert plans == [plan]

    edited = plan.model_copy(update={"name": "Treino A2"})
    gateway.update_plan(edited)
    assert gateway.get_plans("ana")[0].name == "Treino A2"

    gateway.delete_plan("p1")
    assert gateway.get_plans("ana") == []


def test_log_round_trip(gateway):
    log = make_log(completed=["ex-1"], cardio=make_cardio(), cardio_completed=True)
    gateway.create_log("ana", log)

    gateway.update_log("log-1", WorkoutLogUpdate(rating="💪"))
    stored = gateway.get_logs("ana")[0]
    assert stored.rating == "💪"
    assert stored.comments is None
    assert stored.completed_exercise_ids == ["ex-1"]
    assert stored.cardio.type == "Esteira"


def test_http_errors_become_gateway_errors(gateway):
    with pytest.raises(GatewayError) as info:
        gateway.delete_plan("nope")
    assert info.value.status_code == 404

    gateway.create_plan("ana", make_plan("p1"))
    with pytest.raises(GatewayError) as info:
        gateway.create_plan("ana", make_plan("p1"))
    assert info.value.status_code == 409


class BrokenHttp:
    def request(self, method, url, **kwargs):
        raise requests.ConnectionError("sem rede")


def test_network_failure_becomes_gateway_error():
    gateway = ApiGateway("http://localhost:1", http=BrokenHttp())
    with pytest.raises(GatewayError) as info:
        gateway.get_plans("ana")
    assert info.value.status_code is None


class RecordingHttp:
    def __init__(self):
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = requests.Response()
        response.status_code = 204
        return response


def test_timeout_is_sent_to_any_http_object():
    http = RecordingHttp()
    gateway = ApiGateway("http://api.local", http=http, timeout=3.5)
    gateway.delete_plan("p1")

    (method, url, kwargs), = http.calls
    assert method == "DELETE"
    assert url == "http://api.local/api/plans/p1"
    assert kwargs["timeout"] == 3.5
