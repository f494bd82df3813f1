from client.dashboard import DELETE_CONFIRMATION, View
from client.logging_session import SessionState
from helpers import FakeGateway, RecordingNotifier, make_controller, make_log, make_plan


def test_load_fetches_plans_and_logs():
    gateway = FakeGateway(plans=[make_plan()], logs=[make_log()])
    controller = make_controller(gateway)
    assert [p.id for p in controller.plans] == ["plan-1"]
    assert [log.id for log in controller.logs] == ["log-1"]
    assert not controller.loading
    assert controller.view == View.LOGGER


def test_failed_load_leaves_empty_state():
    gateway = FakeGateway(plans=[make_plan()])
    gateway.fail.add("get_logs")
    controller = make_controller(gateway)
    assert controller.plans == []
    assert controller.logs == []
    assert not controller.loading


def test_failed_add_plan_changes_nothing():
    gateway = FakeGateway(plans=[make_plan("plan-1")])
    gateway.fail.add("create_plan")
    notifier = RecordingNotifier()
    controller = make_controller(gateway, notifier=notifier)
    controller.new_plan()

    assert not controller.add_plan(make_plan("plan-2"))
    assert [p.id for p in controller.plans] == ["plan-1"]
    assert controller.view == View.CREATOR
    assert notifier.alerts == ["Erro ao salvar o plano. Tente novamente."]


def test_delete_asks_for_confirmation():
    gateway = FakeGateway(plans=[make_plan("plan-1")])
    notifier = RecordingNotifier(answer=False)
    controller = make_controller(gateway, notifier=notifier)

    controller.request_delete_plan("plan-1")
    assert notifier.confirms == [DELETE_CONFIRMATION]
    assert gateway.called("delete_plan") == []

    notifier.answer = True
    controller.request_delete_plan("plan-1")
    assert controller.plans == []


def test_delete_callback_runs_after_confirmation():
    gateway = FakeGateway(plans=[make_plan("plan-1")])
    notifier = RecordingNotifier(answer=None)
    controller = make_controller(gateway, notifier=notifier)
    controller.session.select_plan("plan-1")
    results = []

    controller.request_delete_plan("plan-1", on_done=results.append)
    assert results == []
    assert controller.session.state == SessionState.PLAN_SELECTED

    notifier.pending.pop()()
    assert results == [True]
    assert controller.plans == []
    assert controller.session.state == SessionState.NO_PLAN_SELECTED


def test_delete_callback_reports_failure():
    gateway = FakeGateway(plans=[make_plan("plan-1")])
    gateway.fail.add("delete_plan")
    controller = make_controller(gateway)
    results = []

    controller.request_delete_plan("plan-1", on_done=results.append)
    assert results == [False]
    assert [p.id for p in controller.plans] == ["plan-1"]


def test_failed_delete_keeps_plan():
    gateway = FakeGateway(plans=[make_plan("plan-1")])
    gateway.fail.add("delete_plan")
    controller = make_controller(gateway)
    assert not controller.delete_plan("plan-1")
    assert [p.id for p in controller.plans] == ["plan-1"]


def test_update_log_merges_fields():
    gateway = FakeGateway(logs=[make_log(comments="antes", rating="😐")])
    controller = make_controller(gateway)

    assert controller.update_log("log-1", rating="💪")
    log = controller.logs[0]
    assert log.rating == "💪"
    assert log.comments == "antes"


def test_leaving_creator_clears_edit_mode():
    controller = make_controller(FakeGateway(plans=[make_plan("plan-1")]))
    controller.edit_plan("plan-1")
    assert controller.plan_to_edit.id == "plan-1"

    controller.change_view(View.HISTORY)
    assert controller.plan_to_edit is None
    assert controller.view == View.HISTORY

    controller.edit_plan("plan-1")
    controller.new_plan()
    assert controller.plan_to_edit is None
    assert controller.view == View.CREATOR


def test_evolution_is_cached_until_logs_change():
    gateway = FakeGateway(plans=[make_plan()], logs=[make_log()])
    controller = make_controller(gateway)

    first = controller.evolution()
    assert controller.evolution() is first

    controller.session.select_plan("plan-1")
    controller.session.finish()
    second = controller.evolution()
    assert second is not first
    assert sum(p.count for p in second.monthly_workouts) == 2


def test_history_uses_current_logs():
    gateway = FakeGateway(plans=[make_plan()], logs=[make_log(completed=["ex-1"])])
    controller = make_controller(gateway)
    entries = controller.history()
    assert len(entries) == 1
    assert not entries[0].plan_missing
    assert [ex.id for ex in entries[0].completed_exercises] == ["ex-1"]
