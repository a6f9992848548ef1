# fpams/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fpams.api.v1.endpoints import (
    activities,
    analytics,
    audit_logs,
    categories,
    feedback,
    health,
    notifications,
    teaching_scores,
    users,
    validations,
)
from fpams.core.config import settings
from fpams.core.exceptions import WorkflowError
from fpams.core.logging_config import setup_logging
from fpams.db.init_db import init_db

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "code": exc.code, "message": exc.message},
    )


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info(f"{settings.PROJECT_NAME} started")


API_PREFIX = "/api/v1"

for module in (
    health,
    users,
    activities,
    teaching_scores,
    validations,
    audit_logs,
    analytics,
    categories,
    feedback,
    notifications,
):
    app.include_router(module.router, prefix=API_PREFIX)
