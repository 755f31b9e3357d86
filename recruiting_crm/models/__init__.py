"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from recruiting_crm.models.candidate import Candidate
from recruiting_crm.models.position import Position
from recruiting_crm.models.pipeline_stage import PipelineStage, PipelineType
from recruiting_crm.models.pipeline_entry import PipelineEntry, PipelineStatus
from recruiting_crm.models.automation_log import AutomationLog, AutomationLogStatus

# Export all models
__all__ = [
    "Candidate",
    "Position",
    "PipelineStage",
    "PipelineType",
    "PipelineEntry",
    "PipelineStatus",
    "AutomationLog",
    "AutomationLogStatus",
]
