"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow services.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bpa_backend_starter import __version__
from bpa_backend_starter.bpa.client import BusinessProcessAutomationClient
from bpa_backend_starter.bpa.errors import (
    ActionBlockedError,
    BpaConnectionError,
    BpaRequestError,
    BpaResponseError,
)
from bpa_backend_starter.bpa.models import TaskAction, WorkflowDto
from bpa_backend_starter.config import BpaSettings
from bpa_backend_starter.feature.service import Feature, FeatureService
from bpa_backend_starter.security import bound_request_token, set_service_token
from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.listener import FeatureWorkflowEventListener
from bpa_backend_starter.workflow.service import WorkflowService

logger = logging.getLogger(__name__)


def create_app(
    settings: BpaSettings | None = None,
    *,
    client: BusinessProcessAutomationClient | None = None,
    event_bus: ApplicationEventBus | None = None,
    listener: FeatureWorkflowEventListener | None = None,
) -> FastAPI:
    settings = settings or BpaSettings()
    set_service_token(settings.service_token)

    bus = event_bus or ApplicationEventBus(max_workers=settings.event_workers)
    (listener or FeatureWorkflowEventListener()).register(bus)

    bpa_client = client or BusinessProcessAutomationClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.timeout_seconds,
        event_bus=bus,
    )
    workflow_service = WorkflowService(client=bpa_client, module_name=settings.module_name)
    feature_service = FeatureService(workflow_service=workflow_service)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("BPA starter ready", extra={"bpa_base_url": settings.api_base_url})
        yield
        bus.shutdown(wait=True)
        bpa_client.close()

    app = FastAPI(
        title="BPA Backend Starter",
        version=__version__,
        description="Forwards workflow actions to a business-process-automation engine.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.workflow_service = workflow_service
    app.state.event_bus = bus

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _register_error_handlers(app)

    @app.get("/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/v1/workflow/perform")
    def perform(
        dto: WorkflowDto, authorization: str | None = Header(default=None)
    ) -> Response:
        with bound_request_token(authorization):
            status = workflow_service.perform_process(dto)
        return Response(status_code=int(status))

    @app.get("/v1/workflow/actions", response_model=TaskAction)
    def actions(key: str, ref: str, authorization: str | None = Header(default=None)) -> TaskAction:
        with bound_request_token(authorization):
            return workflow_service.get_actions(key, ref)

    @app.get("/v1/feature", response_model=Feature)
    def feature(authorization: str | None = Header(default=None)) -> Feature:
        with bound_request_token(authorization):
            return feature_service.get_feature()

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ActionBlockedError)
    async def _blocked(_request: Request, exc: ActionBlockedError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.reason})

    @app.exception_handler(BpaRequestError)
    async def _engine_error(request: Request, exc: BpaRequestError) -> JSONResponse:
        logger.warning(
            "BPA engine rejected request",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(BpaConnectionError)
    async def _engine_unreachable(request: Request, exc: BpaConnectionError) -> JSONResponse:
        logger.error("BPA engine unreachable", extra={"path": request.url.path})
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(BpaResponseError)
    async def _engine_bad_response(request: Request, exc: BpaResponseError) -> JSONResponse:
        logger.warning("BPA engine sent an unexpected body", extra={"path": request.url.path})
        return JSONResponse(status_code=502, content={"detail": str(exc)})
