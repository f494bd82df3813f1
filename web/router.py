from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.services.plans_service import list_plans
from app.services.logs_service import list_logs

from client.evolution import ChartPoint, build_report, format_number, format_workouts
from client.history import build_history, describe_exercise

router = APIRouter(prefix="/web", tags=["web"])

# Caminho para os templates:
# pump_diario/web/templates/...
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

CHART_HEIGHT = 200
BAR_WIDTH = 40
BAR_MARGIN = 20


def get_db_cursor():
    from app.core.db import get_cursor as _get_cursor
    # Reuso do contextmanager do backend
    with _get_cursor() as cursor:
        yield cursor


def chart_bars(points: List[ChartPoint], formatter=format_number) -> dict:
    """
    Geometria das barras do SVG: a maior barra ocupa a altura toda.
    """
    max_count = max([p.count for p in points] + [1])
    bars = []
    for index, point in enumerate(points):
        height = point.count / max_count * CHART_HEIGHT
        x = index * (BAR_WIDTH + BAR_MARGIN)
        bars.append(
            {
                "x": x,
                "y": CHART_HEIGHT - height,
                "height": height,
                "center": x + BAR_WIDTH / 2,
                "name": point.name,
                "label": formatter(point.count) if point.count > 0 else "",
            }
        )
    return {
        "bars": bars,
        "width": max(len(points) * (BAR_WIDTH + BAR_MARGIN), BAR_WIDTH),
        "height": CHART_HEIGHT,
        "bar_width": BAR_WIDTH,
    }


# ---------- PÁGINA INICIAL DO USUÁRIO ----------


@router.get("/{user_id}", response_class=HTMLResponse)
def web_home(
    request: Request,
    user_id: str,
    cursor=Depends(get_db_cursor),
):
    """
    Planos do usuário com resumo de exercícios e cardio.
    """
    plans = list_plans(cursor, user_id)
    logs = list_logs(cursor, user_id)

    context = {
        "titulo": "Pump Diário",
        "user_id": user_id,
        "planos": plans,
        "total_planos": len(plans),
        "total_treinos": len(logs),
        "describe_exercise": describe_exercise,
    }
    return templates.TemplateResponse(request, "home.html", context)


# ---------- HISTÓRICO ----------


@router.get("/{user_id}/historico", response_class=HTMLResponse)
def web_historico(
    request: Request,
    user_id: str,
    cursor=Depends(get_db_cursor),
):
    """
    Histórico a partir dos snapshots; registros antigos usam o plano atual.
    """
    plans = list_plans(cursor, user_id)
    logs = list_logs(cursor, user_id)

    context = {
        "titulo": "Histórico",
        "user_id": user_id,
        "entradas": build_history(logs, plans),
    }
    return templates.TemplateResponse(request, "historico.html", context)


# ---------- EVOLUÇÃO ----------


@router.get("/{user_id}/evolucao", response_class=HTMLResponse)
def web_evolucao(
    request: Request,
    user_id: str,
    cursor=Depends(get_db_cursor),
):
    report = build_report(list_logs(cursor, user_id))

    graficos = []
    if not report.is_empty:
        graficos = [
            ("Treinos por Mês", chart_bars(report.monthly_workouts, format_workouts), "#0ea5e9"),
            ("Exercícios por Grupo Muscular", chart_bars(report.muscle_groups), "#f59e0b"),
            ("Duração Total de Cardio (minutos)", chart_bars(report.cardio_duration), "#f43f5e"),
            ("Distância Total de Cardio (km)", chart_bars(report.cardio_distance), "#6366f1"),
        ]
        # gráfico sem dados não aparece
        graficos = [g for g in graficos if g[1]["bars"]]

    context = {
        "titulo": "Evolução",
        "user_id": user_id,
        "graficos": graficos,
    }
    return templates.TemplateResponse(request, "evolucao.html", context)
