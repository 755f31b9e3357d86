"""
Schemas package.

Import all schemas here for easy access.
"""

from recruiting_crm.schemas.pipeline_entry import (
    BulkMoveRequest,
    BulkMoveResult,
    CandidateSummary,
    MessageResponse,
    PipelineAnalytics,
    PipelineEntryCreate,
    PipelineEntryMove,
    PipelineEntryRead,
    PipelineEntryResponse,
    PipelineEntrySnapshot,
    PipelineEntryUpdate,
    PipelineListResponse,
    PositionSummary,
    StageSummary,
)
from recruiting_crm.schemas.automation import AutomationEvent, AutomationEventType

__all__ = [
    # Pipeline entry
    "PipelineEntryCreate", "PipelineEntryUpdate", "PipelineEntryMove",
    "PipelineEntryRead", "PipelineEntrySnapshot", "PipelineEntryResponse",
    "PipelineListResponse", "PipelineAnalytics",
    "CandidateSummary", "PositionSummary", "StageSummary",
    # Bulk
    "BulkMoveRequest", "BulkMoveResult",
    "MessageResponse",
    # Automation
    "AutomationEvent", "AutomationEventType",
]
