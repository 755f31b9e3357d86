"""
Automation event schemas.

Events are not stored by the pipeline engine; they are handed to the
automation subsystem as {type, tenant_id, data}.
"""

import enum
from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel, Field


class AutomationEventType(str, enum.Enum):
    CANDIDATE_ADDED = "candidate_added"
    CANDIDATE_UPDATED = "candidate_updated"
    CANDIDATE_STAGE_CHANGED = "candidate_stage_changed"
    CANDIDATE_HIRED = "candidate_hired"
    CANDIDATE_PASSED = "candidate_passed"


class AutomationEvent(BaseModel):
    type: AutomationEventType
    tenant_id: UUID
    data: Dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
