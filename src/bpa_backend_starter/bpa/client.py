"""HTTP client for the business-process-automation engine.

This wraps `requests` so that engine calls stay out of the coordinator and the
HTTP layer, and so tests can inject a mocked session.

Around every `perform` call the client publishes workflow lifecycle events:
Before (inline, may block the transition), then After with the engine's answer,
or Abort when the call failed.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from bpa_backend_starter.bpa.errors import (
    ActionBlockedError,
    BpaConnectionError,
    BpaRequestError,
    BpaResponseError,
)
from bpa_backend_starter.bpa.models import (
    TaskAction,
    TaskPerformRequest,
    TaskPerformResponse,
    WorkflowDto,
)
from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.events import BeforeDecision, EventType, WorkflowActionEvent

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


class BusinessProcessAutomationClient:
    """Small wrapper around the engine's task REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
        event_bus: ApplicationEventBus | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("BPA base URL is required")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._event_bus = event_bus
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": "bpa-backend-starter",
            }
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        if not token:
            return {}
        if token.lower().startswith("bearer "):
            return {"Authorization": token}
        return {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, path: str, *, token: str, **kwargs: Any) -> Any:
        url = self._url(path)
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._auth_headers(token),
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise BpaConnectionError(f"{method} {url} failed: {e}") from e

        if resp.status_code >= 400:
            message = (resp.text or resp.reason or "").strip()
            raise BpaRequestError(resp.status_code, message[:500])

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise BpaResponseError(f"{method} {url} returned a non-JSON body") from e

    @staticmethod
    def _parse(model: type[_M], data: Any) -> _M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise BpaResponseError(
                f"Unexpected {model.__name__} payload: {e.error_count()} error(s)"
            ) from e

    def perform(
        self, token: str, request: TaskPerformRequest, dto: WorkflowDto
    ) -> TaskPerformResponse:
        """Ask the engine to run `request.action` on the (key, ref) instance."""

        self._check_before(dto)

        logger.info(
            "Performing workflow action",
            extra={"key": request.key, "ref": request.ref, "action": request.action.name},
        )
        try:
            data = self._request(
                "POST", "api/v1/tasks/perform", token=token, json=request.to_payload()
            )
            response = self._parse(TaskPerformResponse, data)
        except Exception as e:
            self._publish(WorkflowActionEvent(type=EventType.ABORT, dto=dto, error=e))
            raise

        self._publish(WorkflowActionEvent(type=EventType.AFTER, dto=dto, source=response))
        return response

    def get_actions(self, token: str, key: str, ref: str) -> TaskAction:
        """Return the actions available on the (key, ref) instance.

        Raises:
            BpaRequestError: 404 when no such instance exists.
        """

        logger.debug("Fetching workflow actions", extra={"key": key, "ref": ref})
        data = self._request(
            "GET", "api/v1/tasks/actions", token=token, params={"key": key, "ref": ref}
        )
        return self._parse(TaskAction, data)

    def close(self) -> None:
        self._session.close()

    def _check_before(self, dto: WorkflowDto) -> None:
        if self._event_bus is None:
            return
        answers = self._event_bus.publish_sync(WorkflowActionEvent(type=EventType.BEFORE, dto=dto))
        for answer in answers:
            if isinstance(answer, BeforeDecision) and not answer.allowed:
                logger.info(
                    "Workflow action blocked before perform",
                    extra={"key": dto.key, "ref": dto.ref, "reason": answer.reason},
                )
                raise ActionBlockedError(answer.reason)

    def _publish(self, event: WorkflowActionEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
