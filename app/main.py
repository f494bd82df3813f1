import logging

import duckdb
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.db import init_db
from app.api import plans as plans_router
from app.api import logs as logs_router

from web.router import router as web_router
settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s iniciado (%s)", settings.APP_NAME, settings.ENVIRONMENT)


@app.exception_handler(duckdb.Error)
def duckdb_error_handler(request: Request, exc: duckdb.Error):
    logger.exception("Erro no banco em %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Erro ao acessar o banco de dados"},
    )


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "app": settings.APP_NAME,
    }


app.include_router(plans_router.router)
app.include_router(logs_router.router)

app.include_router(web_router)
