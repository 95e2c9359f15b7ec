from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bpa_backend_starter.bpa.models import TaskPerformResponse, WorkflowDto


class EventType(str, Enum):
    """Lifecycle phase of an event relative to an action attempt."""

    BEFORE = "Before"
    AFTER = "After"
    ABORT = "Abort"


class KnownAction(str, Enum):
    """Transitions the listener reacts to in the After phase."""

    SENT_BACK = "sent_back"
    SENT_FOR_APPROVAL = "sent_for_approval"
    REJECTED = "rejected"
    APPROVED = "approved"

    @classmethod
    def parse(cls, name: str) -> KnownAction | None:
        """Resolve an engine action name (any case); None when unrecognized."""

        try:
            return cls(name.lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class WorkflowActionEvent:
    """A workflow lifecycle notification published by the BPA client.

    `source` is the engine's response and is only set for After events.
    `error` is only set for Abort events.
    """

    type: EventType
    dto: WorkflowDto
    source: TaskPerformResponse | None = None
    error: BaseException | None = None


@dataclass(frozen=True, slots=True)
class BeforeDecision:
    """Answer of a Before-phase hook: proceed, or block with a reason."""

    allowed: bool
    reason: str = ""

    @classmethod
    def proceed(cls) -> BeforeDecision:
        return cls(allowed=True)

    @classmethod
    def block(cls, reason: str) -> BeforeDecision:
        return cls(allowed=False, reason=reason)
