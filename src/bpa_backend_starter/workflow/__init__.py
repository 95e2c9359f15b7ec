"""Workflow coordination and lifecycle event handling.

This package holds:
- the coordinator that forwards actions and starts processes at most once
- lifecycle event types (Before / After / Abort)
- the in-process event bus and the feature event listener
"""

__all__: list[str] = []
