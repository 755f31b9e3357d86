"""
AutomationLog model.

Append-only audit trail of recruiting pipeline transitions that were
handed to the automation subsystem. The automation subsystem may later
fill in automation_id and move status on; this engine only inserts.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from recruiting_crm.models.base_model import JsonType, TenantScopedModel


class AutomationLogStatus:
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class AutomationLog(TenantScopedModel):
    """
    AutomationLog table - one row per triggering transition.
    """
    
    __tablename__ = "automation_log"
    
    # Resolved later by the automation subsystem
    automation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )
    
    # e.g. "recruiting_candidate_stage_changed"
    trigger_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    
    trigger_data: Mapped[dict[str, Any]] = mapped_column(
        JsonType,
        nullable=False,
    )
    
    conditions_met: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AutomationLogStatus.PENDING,
    )
    
    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
