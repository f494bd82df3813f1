import pytest

from app.models.plan import Exercise
from client.evolution import (
    build_report,
    format_number,
    format_workouts,
    month_label,
    parse_decimal,
)
from helpers import make_cardio, make_log


@pytest.fixture(autouse=True)
def utc(local_tz):
    local_tz("UTC")


@pytest.mark.parametrize(
    "text, value",
    [("45,5", 45.5), ("30 min", 30.0), ("5.2km", 5.2), ("", 0.0), (None, 0.0), ("abc", 0.0)],
)
def test_parse_decimal(text, value):
    assert parse_decimal(text) == value


def test_month_label():
    assert month_label("2024-01") == "jan 24"
    assert month_label("2023-12") == "dez 23"


def test_format_helpers():
    assert format_number(75.5) == "75,5"
    assert format_number(3.0) == "3"
    assert format_workouts(1) == "1 treino"
    assert format_workouts(4) == "4 treinos"


def test_empty_logs_give_empty_report():
    report = build_report([])
    assert report.is_empty
    assert report.muscle_groups == []


def test_monthly_workouts_sorted_by_month():
    logs = [
        make_log("a", date="2024-03-02T10:00:00.000Z"),
        make_log("b", date="2024-01-10T10:00:00.000Z"),
        make_log("c", date="2024-03-20T10:00:00.000Z"),
        make_log("d", date="2023-12-31T22:00:00.000Z"),
    ]
    points = build_report(logs).monthly_workouts
    assert [(p.name, p.count) for p in points] == [("dez 23", 1), ("jan 24", 1), ("mar 24", 2)]


def test_invalid_dates_are_skipped():
    logs = [make_log("a"), make_log("b", date="não é data")]
    assert sum(p.count for p in build_report(logs).monthly_workouts) == 1


def test_muscle_groups_count_planned_exercises():
    push = [
        Exercise(id="1", muscle="Peito", name="Supino"),
        Exercise(id="2", muscle="Tríceps", name="Corda"),
        Exercise(id="3", muscle="Peito", name="Crucifixo"),
    ]
    pull = [
        Exercise(id="4", muscle="Costas", name="Remada"),
        Exercise(id="5", muscle="", name="Alongamento"),
    ]
    logs = [make_log("a", exercises=push), make_log("b", exercises=pull), make_log("legacy")]

    points = build_report(logs).muscle_groups
    assert [(p.name, p.count) for p in points] == [("Peito", 2), ("Tríceps", 1), ("Costas", 1)]


def test_cardio_totals_only_completed_sessions():
    logs = [
        make_log("a", date="2024-01-05T10:00:00.000Z", cardio=make_cardio("30", "5"), cardio_completed=True),
        make_log("b", date="2024-01-20T10:00:00.000Z", cardio=make_cardio("25,5", "4,5"), cardio_completed=True),
        make_log("c", date="2024-01-25T10:00:00.000Z", cardio=make_cardio("60", "10"), cardio_completed=False),
        make_log("d", date="2024-02-01T10:00:00.000Z", cardio=make_cardio("20", ""), cardio_completed=True),
    ]
    report = build_report(logs)
    assert [(p.name, p.count) for p in report.cardio_duration] == [("jan 24", 55.5), ("fev 24", 20.0)]
    assert [(p.name, p.count) for p in report.cardio_distance] == [("jan 24", 9.5)]


def test_months_follow_local_time(local_tz):
    local_tz("America/Sao_Paulo")
    # 31/01/2024 22:30 em São Paulo
    logs = [make_log("late", date="2024-02-01T01:30:00.000Z")]
    points = build_report(logs).monthly_workouts
    assert [(p.key, p.name) for p in points] == [("2024-01", "jan 24")]
