"""Workflow coordination over the BPA engine.

Starting a process is not idempotent on the engine side: starting twice for
the same (key, ref) creates two instances. `initiate_bpa_workflow_event` probes
for an existing instance first and only starts when none is found.

The probe and the start are two separate engine calls with nothing held in
between, so concurrent initiations for the same (key, ref) can both start.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from http import HTTPStatus

from bpa_backend_starter.bpa.client import BusinessProcessAutomationClient
from bpa_backend_starter.bpa.errors import BpaRequestError
from bpa_backend_starter.bpa.models import Action, TaskAction, TaskPerformRequest, WorkflowDto
from bpa_backend_starter.security import get_header_jwt
from bpa_backend_starter.workflow.constants import ACTIVITI_MODULE_NAME, ACTIVITI_PROCESS_START

logger = logging.getLogger(__name__)


class TaskProbe(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class WorkflowService:
    """Forward workflow actions to the engine and start processes at most once."""

    def __init__(
        self,
        *,
        client: BusinessProcessAutomationClient,
        module_name: str = ACTIVITI_MODULE_NAME,
        token_provider: Callable[[], str] = get_header_jwt,
    ) -> None:
        self._client = client
        self._module_name = module_name
        self._token_provider = token_provider

    def perform_process(self, dto: WorkflowDto) -> HTTPStatus:
        """Run `dto.action` on the engine.

        Engine failures propagate unchanged; nothing is retried.
        """

        request = TaskPerformRequest(
            module=self._module_name,
            key=dto.key,
            title=dto.title,
            ref=dto.ref,
            action=Action(name=dto.action),
        )
        if dto.remarks:
            request.remarks = dto.remarks

        self._client.perform(self._token_provider(), request, dto)
        return HTTPStatus.OK

    def probe_task(self, key: str, ref: str) -> TaskProbe:
        """Check whether a process instance exists for (key, ref)."""

        try:
            self._client.get_actions(self._token_provider(), key, ref)
        except BpaRequestError as e:
            if e.is_not_found:
                return TaskProbe.NOT_FOUND
            logger.warning(
                "Workflow existence probe failed",
                extra={"key": key, "ref": ref, "status_code": e.status_code, "error": str(e)},
            )
            return TaskProbe.FAILED
        except Exception as e:
            logger.warning(
                "Workflow existence probe failed",
                extra={"key": key, "ref": ref, "error": str(e)},
            )
            return TaskProbe.FAILED
        return TaskProbe.FOUND

    def is_task_exist(self, key: str, ref: str) -> bool:
        """True iff the engine answered the probe; any failure counts as absent."""

        return self.probe_task(key, ref) is TaskProbe.FOUND

    def initiate_bpa_workflow_event(
        self, activity_key: str, ref_id: str, title: str, reference_id: str
    ) -> None:
        self._initiate(activity_key, ref_id, title, reference_id, remarks=None)

    def initiate_bpa_workflow_event_with_remarks(
        self, activity_key: str, ref_id: str, title: str, reference_id: str, remarks: str
    ) -> None:
        self._initiate(activity_key, ref_id, title, reference_id, remarks=remarks)

    def get_actions(self, key: str, ref: str) -> TaskAction:
        return self._client.get_actions(self._token_provider(), key, ref)

    def _initiate(
        self,
        activity_key: str,
        ref_id: str,
        title: str,
        reference_id: str,
        *,
        remarks: str | None,
    ) -> None:
        if self.is_task_exist(activity_key, ref_id):
            logger.debug(
                "Workflow already exists; skipping start",
                extra={"key": activity_key, "ref": ref_id},
            )
            return

        dto = WorkflowDto(
            key=activity_key,
            ref=ref_id,
            title=title,
            action=ACTIVITI_PROCESS_START,
            remarks=remarks,
        )
        self.perform_process(dto)
        logger.info(
            "Workflow started",
            extra={"key": activity_key, "ref": ref_id, "initiated_by": reference_id},
        )
