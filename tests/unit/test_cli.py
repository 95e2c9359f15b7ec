"""Unit tests for the CLI entrypoint (mocked engine)."""

from __future__ import annotations

import json
from unittest.mock import Mock

import pytest

import bpa_backend_starter.main as cli
from bpa_backend_starter.bpa.errors import ActionBlockedError, BpaRequestError, BpaResponseError
from bpa_backend_starter.bpa.models import Action, TaskAction


@pytest.fixture
def patched_client(monkeypatch: pytest.MonkeyPatch, mock_client: Mock) -> Mock:
    factory = Mock(return_value=mock_client)
    monkeypatch.setattr(cli, "BusinessProcessAutomationClient", factory)
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)
    monkeypatch.setenv("BPA_BASE_URL", "http://bpa.test")
    monkeypatch.setenv("BPA_MODULE_NAME", "cli-module")
    return mock_client


def test_perform_command(patched_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        ["perform", "--key", "key1", "--ref", "42", "--title", "T", "--action", "approved"]
    )

    assert code == 0
    request = patched_client.perform.call_args.args[1]
    assert request.module == "cli-module"
    assert request.action == Action(name="approved")
    assert capsys.readouterr().out.strip() == "200 OK"
    patched_client.close.assert_called_once()


def test_actions_command_prints_json(
    patched_client: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    patched_client.get_actions.return_value = TaskAction(
        key="key1", ref="42", actions=[Action(name="approved")]
    )

    code = cli.main(["actions", "--key", "key1", "--ref", "42"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "key": "key1",
        "ref": "42",
        "actions": [{"name": "approved"}],
    }


def test_initiate_command_uses_remarks_variant(patched_client: Mock) -> None:
    patched_client.get_actions.side_effect = BpaRequestError(404, "no instance")

    code = cli.main(
        ["initiate", "--key", "key1", "--ref", "42", "--title", "T", "--remarks", "please"]
    )

    assert code == 0
    request = patched_client.perform.call_args.args[1]
    assert request.action.name == "start"
    assert request.remarks == "please"


def test_blocked_action_exit_code(
    patched_client: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    patched_client.perform.side_effect = ActionBlockedError("not allowed")

    code = cli.main(
        ["perform", "--key", "key1", "--ref", "42", "--title", "T", "--action", "approved"]
    )

    assert code == 3
    assert "not allowed" in capsys.readouterr().err


def test_engine_failure_exit_code(patched_client: Mock) -> None:
    patched_client.perform.side_effect = BpaRequestError(500, "boom")

    code = cli.main(
        ["perform", "--key", "key1", "--ref", "42", "--title", "T", "--action", "approved"]
    )

    assert code == 1


def test_unexpected_engine_body_exit_code(patched_client: Mock) -> None:
    patched_client.perform.side_effect = BpaResponseError("Unexpected TaskPerformResponse payload")

    code = cli.main(
        ["perform", "--key", "key1", "--ref", "42", "--title", "T", "--action", "approved"]
    )

    assert code == 1


def test_invalid_configuration_exit_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("BPA_EVENT_WORKERS", "0")

    code = cli.main(["actions", "--key", "key1", "--ref", "42"])

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err
