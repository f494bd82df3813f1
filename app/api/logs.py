from typing import List

import duckdb
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.db import get_cursor
from app.models.log import WorkoutLog, WorkoutLogCreate, WorkoutLogUpdate

from app.services.logs_service import (
    list_logs,
    get_log,
    create_log,
    update_log,
)

router = APIRouter(prefix="/api/logs", tags=["logs"])


def get_db_cursor():
    with get_cursor() as cursor:
        yield cursor


@router.get("/{user_id}", response_model=List[WorkoutLog])
def listar_registros(user_id: str, cursor=Depends(get_db_cursor)):
    return list_logs(cursor, user_id)


@router.post("", response_model=WorkoutLog, status_code=status.HTTP_201_CREATED)
def criar_registro(log: WorkoutLogCreate, cursor=Depends(get_db_cursor)):
    if get_log(cursor, log.id) is not None:
        raise HTTPException(status_code=409, detail="Já existe um registro com este ID")
    try:
        return create_log(cursor, log)
    except duckdb.ConstraintException:
        raise HTTPException(status_code=409, detail="Já existe um registro com este ID")


@router.put("/{log_id}", response_model=WorkoutLog)
def atualizar_registro(
    log_id: str,
    updates: WorkoutLogUpdate,
    cursor=Depends(get_db_cursor),
):
    """
    Atualização parcial (observações/avaliação) após o treino.
    O snapshot de exercícios e cardio nunca é alterado.
    """
    atualizado = update_log(cursor, log_id, updates)
    if not atualizado:
        raise HTTPException(status_code=404, detail="Registro não encontrado")
    return atualizado
