"""BPA backend starter.

A small service showing how to integrate with an external
business-process-automation engine:
- forward workflow actions over HTTP
- start a process for an entity at most once
- react to workflow lifecycle events
"""

__version__ = "0.1.0"

from bpa_backend_starter.config import BpaSettings

__all__ = ["__version__", "BpaSettings"]
