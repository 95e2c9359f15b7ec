"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from bpa_backend_starter.bpa.client import BusinessProcessAutomationClient
from bpa_backend_starter.bpa.models import TaskAction
from bpa_backend_starter.config import BpaSettings
from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.service import WorkflowService

_ENV_VARS = (
    "BPA_BASE_URL",
    "BPA_SERVICE_TOKEN",
    "BPA_MODULE_NAME",
    "BPA_TIMEOUT_SECONDS",
    "BPA_EVENT_WORKERS",
    "BPA_CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the developer's shell and `.env` out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> BpaSettings:
    """Provide test settings pointing at a fake engine."""
    return BpaSettings(
        BPA_BASE_URL="http://bpa.test/",
        BPA_SERVICE_TOKEN="service-token",
        BPA_MODULE_NAME="test-module",
        BPA_EVENT_WORKERS=2,
    )


@pytest.fixture
def mock_client() -> Mock:
    """Provide a mocked BPA client whose probe finds nothing by default."""
    client = Mock(spec=BusinessProcessAutomationClient)
    client.get_actions.return_value = TaskAction(key="key1", ref="42", actions=[])
    return client


@pytest.fixture
def workflow_service(mock_client: Mock) -> WorkflowService:
    return WorkflowService(
        client=mock_client,
        module_name="test-module",
        token_provider=lambda: "test-token",
    )


@pytest.fixture
def event_bus() -> Iterator[ApplicationEventBus]:
    bus = ApplicationEventBus(max_workers=2)
    yield bus
    bus.shutdown(wait=True)
