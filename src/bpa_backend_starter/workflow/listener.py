"""Reaction to workflow lifecycle events for the feature process.

Dispatch is keyed by (phase, action name):

- Before: `before` may veto the transition.
- After: the engine's action name selects one of the `on_*` hooks; unknown names
  go to `on_unknown_action` and are otherwise ignored.
- Abort: `on_abort` sees the error the engine call raised.

The hooks are extension points. Subclass and override the ones a business
process needs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.events import (
    BeforeDecision,
    EventType,
    KnownAction,
    WorkflowActionEvent,
)

logger = logging.getLogger(__name__)

_NUMERIC_REF = re.compile(r"[+-]?[0-9]+")


def _parse_ref(ref: str) -> int:
    if not _NUMERIC_REF.fullmatch(ref):
        raise ValueError(f"Non-numeric workflow ref: {ref!r}")
    return int(ref)


class FeatureWorkflowEventListener:
    """Stateless dispatcher for `WorkflowActionEvent`."""

    def register(self, bus: ApplicationEventBus) -> None:
        bus.subscribe(WorkflowActionEvent, self.on_application_event)

    def on_application_event(self, event: WorkflowActionEvent) -> BeforeDecision | None:
        if event.type is EventType.AFTER:
            self._dispatch_after(event)
            return None
        if event.type is EventType.BEFORE:
            return self.before(event)
        if event.type is EventType.ABORT:
            self.on_abort(event)
        return None

    def _dispatch_after(self, event: WorkflowActionEvent) -> None:
        response = event.source
        if response is None or response.action is None:
            return

        # Malformed refs raise here and end handling of this event.
        ref_id = _parse_ref(event.dto.ref)

        known = KnownAction.parse(response.action.name)
        if known is None:
            self.on_unknown_action(response.action.name, ref_id, event)
            return

        hooks: dict[KnownAction, Callable[[int, WorkflowActionEvent], None]] = {
            KnownAction.SENT_BACK: self.on_sent_back,
            KnownAction.SENT_FOR_APPROVAL: self.on_sent_for_approval,
            KnownAction.REJECTED: self.on_rejected,
            KnownAction.APPROVED: self.on_approved,
        }
        hooks[known](ref_id, event)

    def before(self, event: WorkflowActionEvent) -> BeforeDecision:
        """Validate a transition before the engine runs it."""

        return BeforeDecision.proceed()

    def on_sent_back(self, ref_id: int, event: WorkflowActionEvent) -> None:
        pass

    def on_sent_for_approval(self, ref_id: int, event: WorkflowActionEvent) -> None:
        pass

    def on_rejected(self, ref_id: int, event: WorkflowActionEvent) -> None:
        pass

    def on_approved(self, ref_id: int, event: WorkflowActionEvent) -> None:
        pass

    def on_unknown_action(self, name: str, ref_id: int, event: WorkflowActionEvent) -> None:
        logger.debug(
            "Ignoring unrecognized workflow action",
            extra={"action": name, "key": event.dto.key, "ref": ref_id},
        )

    def on_abort(self, event: WorkflowActionEvent) -> None:
        logger.warning(
            "Workflow action aborted",
            extra={
                "key": event.dto.key,
                "ref": event.dto.ref,
                "action": event.dto.action,
                "error": str(event.error) if event.error is not None else None,
            },
        )
