from typing import List

import duckdb
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.db import get_cursor
from app.models.plan import PlanContent, WorkoutPlan, WorkoutPlanCreate

from app.services.plans_service import (
    list_plans,
    plan_exists,
    create_plan,
    update_plan,
    delete_plan,
)

router = APIRouter(prefix="/api/plans", tags=["plans"])


def get_db_cursor():
    with get_cursor() as cursor:
        yield cursor


@router.get("/{user_id}", response_model=List[WorkoutPlan])
def listar_planos(user_id: str, cursor=Depends(get_db_cursor)):
    return list_plans(cursor, user_id)


@router.post("", response_model=WorkoutPlan, status_code=status.HTTP_201_CREATED)
def criar_plano(plan: WorkoutPlanCreate, cursor=Depends(get_db_cursor)):
    if plan_exists(cursor, plan.id):
        raise HTTPException(status_code=409, detail="Já existe um plano com este ID")
    try:
        return create_plan(cursor, plan)
    except duckdb.ConstraintException:
        raise HTTPException(status_code=409, detail="Já existe um plano com este ID")


@router.put("/{plan_id}", response_model=WorkoutPlan)
def atualizar_plano(
    plan_id: str,
    content: PlanContent,
    cursor=Depends(get_db_cursor),
):
    atualizado = update_plan(cursor, plan_id, content)
    if not atualizado:
        raise HTTPException(status_code=404, detail="Plano não encontrado")
    return atualizado


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_plano(plan_id: str, cursor=Depends(get_db_cursor)):
    ok = delete_plan(cursor, plan_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Plano não encontrado")
    return
