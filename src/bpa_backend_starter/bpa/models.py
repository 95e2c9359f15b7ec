"""Wire models exchanged with the business-process-automation engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Action(BaseModel):
    """A named transition a process instance can undergo."""

    model_config = ConfigDict(extra="ignore")

    name: str


class WorkflowDto(BaseModel):
    """A workflow action request as received from callers.

    `key` + `ref` identify at most one live process instance.
    """

    key: str
    title: str
    ref: str
    action: str
    remarks: str | None = None


class TaskPerformRequest(BaseModel):
    """Outbound body of the engine's perform call."""

    module: str
    key: str
    title: str
    ref: str
    action: Action
    remarks: str | None = Field(default=None)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)


class TaskPerformResponse(BaseModel):
    """Outcome of a transition attempt reported by the engine."""

    model_config = ConfigDict(extra="ignore")

    action: Action | None = None
    status: str | None = None


class TaskAction(BaseModel):
    """Actions currently available on a process instance."""

    model_config = ConfigDict(extra="ignore")

    key: str = Field(default="")
    ref: str = Field(default="")
    actions: list[Action] = Field(default_factory=list)
