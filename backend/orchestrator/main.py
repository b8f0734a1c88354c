"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from orchestrator.api.v1 import pipelines
from orchestrator.core.config import settings
from orchestrator.core.logging import get_logger, setup_logging
from orchestrator.db.session import make_session
from orchestrator.pipeline.errors import DefinitionNotFoundError
from orchestrator.pipeline.scheduler import CeleryTaskScheduler
from orchestrator.pipeline.service import build_service
from orchestrator.tasks import celery_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.LOG_LEVEL, json_output=settings.APP_ENV != "development")
    logger = get_logger("startup")

    session_factory, engine = make_session()
    app.state.pipeline_service = build_service(session_factory, CeleryTaskScheduler(celery_app))
    logger.info(
        "Application starting",
        env=settings.APP_ENV,
        pipelines=len(app.state.pipeline_service.catalog),
        agents=sorted(a.value for a in settings.agent_endpoints),
    )
    yield
    logger.info("Application shutting down")
    await engine.dispose()


app = FastAPI(
    title="Agent Pipeline Orchestrator",
    description="Runs multi-step maintenance pipelines across worker agents",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


API_PREFIX = "/api/v1"
TRIGGER_PATH = f"{API_PREFIX}/pipelines/run"


@app.exception_handler(DefinitionNotFoundError)
async def definition_not_found_handler(request: Request, exc: DefinitionNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed trigger bodies get the same 400 as a missing id.
    if request.method == "POST" and request.url.path == TRIGGER_PATH:
        return JSONResponse(status_code=400, content={"error": "pipelineId required"})
    return await request_validation_exception_handler(request, exc)


app.include_router(pipelines.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
