from __future__ import annotations

from enum import Enum

ACTIVITI_MODULE_NAME = "bpa-backend-starter"
ACTIVITI_PROCESS_START = "start"


class ActivitiKey(str, Enum):
    """Process definition keys deployed for this service."""

    KEY1 = "key1"
    KEY2 = "key2"
