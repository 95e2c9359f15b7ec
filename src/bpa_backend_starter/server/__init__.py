"""FastAPI server adapter for bpa-backend-starter.

Design intent:
- Keep workflow logic in `bpa_backend_starter.workflow.*`
- Keep server-specific concerns (routing, CORS, error mapping) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from bpa_backend_starter.server.app import create_app
