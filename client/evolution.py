"""
Séries dos gráficos de evolução, derivadas só dos registros em memória.
"""

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from app.models.log import WorkoutLog
from client.history import local_log_date

logger = logging.getLogger(__name__)

MONTHS_PT = ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"]

_DECIMAL_PREFIX_RE = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)")


@dataclass
class ChartPoint:
    name: str
    count: float
    key: str = ""


@dataclass
class EvolutionReport:
    monthly_workouts: List[ChartPoint] = field(default_factory=list)
    muscle_groups: List[ChartPoint] = field(default_factory=list)
    cardio_duration: List[ChartPoint] = field(default_factory=list)
    cardio_distance: List[ChartPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.monthly_workouts


def parse_decimal(value: Optional[str]) -> float:
    """
    Lê o número no início do texto, aceitando vírgula ou ponto decimal.
    "45,5" -> 45.5, "30 min" -> 30.0, "" / "abc" / None -> 0.0
    """
    if not value:
        return 0.0
    match = _DECIMAL_PREFIX_RE.match(value.replace(",", ".", 1))
    if not match:
        return 0.0
    return float(match.group(0))


def month_key(log: WorkoutLog) -> Optional[str]:
    try:
        moment = local_log_date(log.date)
    except ValueError:
        logger.warning("Registro %s com data inválida: %r", log.id, log.date)
        return None
    return f"{moment.year}-{moment.month:02d}"


def month_label(key: str) -> str:
    """'2024-01' -> 'jan 24'"""
    year, month = key.split("-")
    return f"{MONTHS_PT[int(month) - 1]} {year[-2:]}"


def monthly_workouts(logs: Iterable[WorkoutLog]) -> List[ChartPoint]:
    counts: Dict[str, int] = {}
    for log in logs:
        key = month_key(log)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
    return [
        ChartPoint(name=month_label(key), count=counts[key], key=key)
        for key in sorted(counts)
    ]


def muscle_groups(logs: Iterable[WorkoutLog]) -> List[ChartPoint]:
    counts: "OrderedDict[str, int]" = OrderedDict()
    for log in logs:
        for ex in log.exercises or []:
            muscle = (ex.muscle or "").strip()
            if not muscle:
                continue
            counts[muscle] = counts.get(muscle, 0) + 1
    points = [ChartPoint(name=name, count=count, key=name) for name, count in counts.items()]
    return sorted(points, key=lambda p: p.count, reverse=True)


def _monthly_cardio(logs: Iterable[WorkoutLog]) -> Dict[str, Dict[str, float]]:
    totals: Dict[str, Dict[str, float]] = {}
    for log in logs:
        if log.cardio is None or not log.cardio_completed:
            continue
        key = month_key(log)
        if key is None:
            continue
        bucket = totals.setdefault(key, {"duration": 0.0, "distance": 0.0})
        bucket["duration"] += parse_decimal(log.cardio.duration)
        bucket["distance"] += parse_decimal(log.cardio.distance)
    return totals


def cardio_duration_by_month(logs: Iterable[WorkoutLog]) -> List[ChartPoint]:
    totals = _monthly_cardio(logs)
    return [
        ChartPoint(name=month_label(key), count=totals[key]["duration"], key=key)
        for key in sorted(totals)
    ]


def cardio_distance_by_month(logs: Iterable[WorkoutLog]) -> List[ChartPoint]:
    totals = _monthly_cardio(logs)
    return [
        ChartPoint(name=month_label(key), count=totals[key]["distance"], key=key)
        for key in sorted(totals)
        if totals[key]["distance"] > 0
    ]


def build_report(logs: Iterable[WorkoutLog]) -> EvolutionReport:
    logs = list(logs)
    if not logs:
        return EvolutionReport()
    return EvolutionReport(
        monthly_workouts=monthly_workouts(logs),
        muscle_groups=muscle_groups(logs),
        cardio_duration=cardio_duration_by_month(logs),
        cardio_distance=cardio_distance_by_month(logs),
    )


def format_number(value: float) -> str:
    """Formato pt-BR com até uma casa decimal: 75.5 -> '75,5', 3.0 -> '3'."""
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return text.replace(".", ",")


def format_workouts(count: float) -> str:
    n = int(count)
    return f"{n} treino" if n == 1 else f"{n} treinos"
