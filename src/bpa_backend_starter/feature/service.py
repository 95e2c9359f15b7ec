from __future__ import annotations

import logging

from pydantic import BaseModel

from bpa_backend_starter.workflow.constants import ActivitiKey
from bpa_backend_starter.workflow.service import WorkflowService

logger = logging.getLogger(__name__)


class Feature(BaseModel):
    feature_id: int
    feature_name: str
    feature_description: str


class FeatureService:
    """Sample business service whose records go through an approval workflow."""

    def __init__(self, *, workflow_service: WorkflowService) -> None:
        self._workflow_service = workflow_service

    def get_feature(self) -> Feature:
        feature = Feature(
            feature_id=1,
            feature_name="Feature 1",
            feature_description="Feature 1 Description",
        )
        # Process definitions are keyed by the enum value, not the member name.
        self._workflow_service.initiate_bpa_workflow_event_with_remarks(
            ActivitiKey.KEY1.value,
            str(feature.feature_id),
            "Your Title",
            "ExampleusernameId",
            "Remarks",
        )
        logger.debug("Feature loaded", extra={"feature_id": feature.feature_id})
        return feature
