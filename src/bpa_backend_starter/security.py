"""Resolution of the bearer token forwarded to the BPA engine.

The HTTP layer binds the inbound `Authorization` header for the duration of a
request; everything else (CLI, event workers) falls back to the configured
service token.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_request_token: ContextVar[str | None] = ContextVar("bpa_request_token", default=None)
_service_token: str = ""


def set_service_token(token: str) -> None:
    global _service_token
    _service_token = token.strip()


@contextmanager
def bound_request_token(authorization: str | None) -> Iterator[None]:
    """Make `authorization` the current token inside the `with` block."""

    reset = _request_token.set((authorization or "").strip() or None)
    try:
        yield
    finally:
        _request_token.reset(reset)


def get_header_jwt() -> str:
    """Return the token to forward to the engine ("" when none is configured)."""

    token = _request_token.get()
    if token:
        return token
    return _service_token
