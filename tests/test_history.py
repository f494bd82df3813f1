import pytest

from app.models.plan import Exercise
from client.history import (
    NOTHING_COMPLETED,
    HistoryView,
    build_entry,
    build_history,
    describe_exercise,
    format_log_date,
)
from helpers import make_cardio, make_log, make_plan


@pytest.fixture(autouse=True)
def utc(local_tz):
    local_tz("UTC")


def snapshot_exercises():
    return [
        Exercise(id="ex-1", name="Supino Reto", sets="4", reps="8", load="60", rest="90s"),
        Exercise(id="ex-2", name="Crucifixo", load=""),
    ]


def test_format_log_date():
    assert format_log_date("2024-01-15T10:05:00.000Z") == "15/01/2024 10:05"
    assert format_log_date("ontem") == "ontem"


def test_format_log_date_uses_local_time(local_tz):
    local_tz("America/Sao_Paulo")
    assert format_log_date("2024-02-01T01:30:00.000Z") == "31/01/2024 22:30"


def test_describe_exercise():
    ex1, ex2 = snapshot_exercises()
    assert describe_exercise(ex1) == "4 séries x 8 reps com 60 kg | 90s descanso"
    assert describe_exercise(ex2) == "3 séries x 10 reps | 60s descanso"


def test_snapshot_wins_over_current_plan():
    log = make_log(exercises=snapshot_exercises(), completed=["ex-1"])
    plan = make_plan(exercises=[Exercise(id="ex-1", name="Outro Nome")])

    entry = build_entry(log, [plan])
    assert not entry.plan_missing
    assert entry.title == "Treino A"
    assert entry.exercise_lines() == ["Supino Reto: 4 séries x 8 reps com 60 kg | 90s descanso"]


def test_snapshot_survives_deleted_plan():
    log = make_log(exercises=snapshot_exercises(), completed=["ex-2"])
    entry = build_entry(log, [])
    assert not entry.plan_missing
    assert [ex.name for ex in entry.completed_exercises] == ["Crucifixo"]


def test_legacy_log_with_deleted_plan():
    entry = build_entry(make_log(completed=["ex-1"]), [])
    assert entry.plan_missing
    assert not entry.nothing_completed
    assert entry.exercise_lines() == []


def test_nothing_completed():
    entry = build_entry(make_log(exercises=snapshot_exercises()), [])
    assert entry.nothing_completed
    assert NOTHING_COMPLETED.startswith("Nenhum exercício")


def test_cardio_line_prefers_actual_values():
    log = make_log(
        exercises=snapshot_exercises(),
        cardio=make_cardio(duration="40", distance="", calories="350"),
        cardio_completed=True,
    )
    entry = build_entry(log, [])
    assert entry.cardio_completed
    assert not entry.nothing_completed
    assert entry.cardio_line() == "Esteira - Duração: 40 | Calorias: 350"


def test_cardio_not_completed_has_no_line():
    log = make_log(exercises=snapshot_exercises(), cardio=make_cardio(), cardio_completed=False)
    assert build_entry(log, []).cardio_line() is None


def test_build_history_keeps_order():
    logs = [make_log("b"), make_log("a")]
    assert [e.log.id for e in build_history(logs, [make_plan()])] == ["b", "a"]


def test_history_view_toggle():
    view = HistoryView()
    view.toggle("log-1")
    assert view.is_expanded("log-1")
    view.toggle("log-1")
    assert not view.is_expanded("log-1")
