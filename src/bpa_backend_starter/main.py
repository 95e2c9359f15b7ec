"""CLI entrypoint for the BPA starter.

Commands:
- serve     run the REST server
- perform   forward one workflow action to the engine
- actions   list the actions available on a process instance
- initiate  start a process for (key, ref) unless one already exists
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from bpa_backend_starter import __version__
from bpa_backend_starter.bpa.client import BusinessProcessAutomationClient
from bpa_backend_starter.bpa.errors import ActionBlockedError, BpaClientError
from bpa_backend_starter.bpa.models import WorkflowDto
from bpa_backend_starter.config import BpaSettings
from bpa_backend_starter.logging import configure_logging
from bpa_backend_starter.security import set_service_token
from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.listener import FeatureWorkflowEventListener
from bpa_backend_starter.workflow.service import WorkflowService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bpa-starter",
        description="Business-process-automation starter service",
    )
    parser.add_argument("--version", action="version", version=f"bpa-backend-starter {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST server")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8080, help="Bind port")

    perform = subparsers.add_parser("perform", help="Forward a workflow action to the engine")
    perform.add_argument("--key", required=True, help="Process definition key")
    perform.add_argument("--ref", required=True, help="Business entity reference id")
    perform.add_argument("--title", required=True, help="Process instance title")
    perform.add_argument("--action", required=True, help="Transition name, e.g. 'approved'")
    perform.add_argument("--remarks", default=None, help="Optional remarks")

    actions = subparsers.add_parser("actions", help="List actions available on an instance")
    actions.add_argument("--key", required=True, help="Process definition key")
    actions.add_argument("--ref", required=True, help="Business entity reference id")

    initiate = subparsers.add_parser(
        "initiate", help="Start a process for (key, ref) unless one already exists"
    )
    initiate.add_argument("--key", required=True, help="Process definition key")
    initiate.add_argument("--ref", required=True, help="Business entity reference id")
    initiate.add_argument("--title", required=True, help="Process instance title")
    initiate.add_argument(
        "--reference-id", default="", help="Identifier of the user starting the process"
    )
    initiate.add_argument("--remarks", default=None, help="Optional remarks")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = BpaSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        from bpa_backend_starter.server.app import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)
        return 0

    set_service_token(settings.service_token)
    bus = ApplicationEventBus(max_workers=settings.event_workers)
    FeatureWorkflowEventListener().register(bus)
    client = BusinessProcessAutomationClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.timeout_seconds,
        event_bus=bus,
    )
    service = WorkflowService(client=client, module_name=settings.module_name)

    try:
        if args.command == "perform":
            dto = WorkflowDto(
                key=args.key,
                ref=args.ref,
                title=args.title,
                action=args.action,
                remarks=args.remarks,
            )
            status = service.perform_process(dto)
            print(f"{int(status)} {status.phrase}")
            return 0

        if args.command == "actions":
            task_action = service.get_actions(args.key, args.ref)
            print(json.dumps(task_action.model_dump(mode="json"), indent=2))
            return 0

        if args.command == "initiate":
            if args.remarks:
                service.initiate_bpa_workflow_event_with_remarks(
                    args.key, args.ref, args.title, args.reference_id, args.remarks
                )
            else:
                service.initiate_bpa_workflow_event(
                    args.key, args.ref, args.title, args.reference_id
                )
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except ActionBlockedError as e:
        logger.warning(str(e), extra={"reason": e.reason})
        print(str(e), file=sys.stderr)
        return 3

    except BpaClientError:
        logger.exception("Command failed")
        return 1

    finally:
        bus.shutdown(wait=True)
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
