#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the starter components directly:

* load settings from `.env`
* plug a custom listener into the workflow event bus
* start an approval process for an entity unless one already exists

The entity reference is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from bpa_backend_starter.bpa.client import BusinessProcessAutomationClient
from bpa_backend_starter.config import BpaSettings
from bpa_backend_starter.logging import configure_logging
from bpa_backend_starter.security import set_service_token
from bpa_backend_starter.workflow.constants import ActivitiKey
from bpa_backend_starter.workflow.event_bus import ApplicationEventBus
from bpa_backend_starter.workflow.events import BeforeDecision, WorkflowActionEvent
from bpa_backend_starter.workflow.listener import FeatureWorkflowEventListener
from bpa_backend_starter.workflow.service import WorkflowService

logger = logging.getLogger("basic_usage")


class PrintingListener(FeatureWorkflowEventListener):
    def before(self, event: WorkflowActionEvent) -> BeforeDecision:
        if not event.dto.title.strip():
            return BeforeDecision.block("title must not be empty")
        return BeforeDecision.proceed()

    def on_approved(self, ref_id: int, event: WorkflowActionEvent) -> None:
        print(f"Entity {ref_id} approved ({event.dto.key})")

    def on_rejected(self, ref_id: int, event: WorkflowActionEvent) -> None:
        print(f"Entity {ref_id} rejected ({event.dto.key})")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start an approval workflow (example).")
    parser.add_argument("--ref", required=True, help="Numeric id of the business entity")
    parser.add_argument("--title", required=True, help="Process instance title")
    parser.add_argument("--user", default="example-user", help="Who starts the process")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = BpaSettings()
    configure_logging(settings.log_level)
    set_service_token(settings.service_token)

    bus = ApplicationEventBus(max_workers=settings.event_workers)
    PrintingListener().register(bus)
    client = BusinessProcessAutomationClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.timeout_seconds,
        event_bus=bus,
    )
    service = WorkflowService(client=client, module_name=settings.module_name)

    try:
        service.initiate_bpa_workflow_event(ActivitiKey.KEY1.value, args.ref, args.title, args.user)
        print(f"Available actions: {service.get_actions(ActivitiKey.KEY1.value, args.ref).actions}")
    finally:
        bus.shutdown(wait=True)
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
