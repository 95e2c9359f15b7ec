from __future__ import annotations


class BpaClientError(Exception):
    """Base class for failures talking to the BPA engine."""


class BpaRequestError(BpaClientError):
    """The engine answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"BPA engine returned {status_code}: {message}")
        self.status_code = status_code
        self.message = message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class BpaConnectionError(BpaClientError):
    """The engine could not be reached (DNS, refused connection, timeout)."""


class ActionBlockedError(BpaClientError):
    """A Before-phase listener refused the transition."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Workflow action blocked: {reason}")
        self.reason = reason


class BpaResponseError(BpaClientError):
    """The engine answered with a body that is not the expected JSON shape."""
