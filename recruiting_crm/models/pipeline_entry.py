"""
PipelineEntry model.

One candidate's application to one position, tracked through the
tenant's recruiting stages.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Optional, TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruiting_crm.models.base_model import JsonType, TenantScopedModel

if TYPE_CHECKING:
    from recruiting_crm.models.candidate import Candidate
    from recruiting_crm.models.position import Position
    from recruiting_crm.models.pipeline_stage import PipelineStage


class PipelineStatus(str, enum.Enum):
    ACTIVE = "active"
    HIRED = "hired"
    PASSED = "passed"
    WITHDRAWN = "withdrawn"


_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in PipelineStatus)


class PipelineEntry(TenantScopedModel):
    """
    PipelineEntry table - tracks a candidate's application to a position.
    
    hired_at / rejected_at / withdrawn_at are derived by the transition
    engine and are never written from a client patch.
    """
    
    __tablename__ = "pipeline_entry"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_pipeline_entry_status"),
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_pipeline_entry_rating"),
        # At most one active application per (tenant, candidate, position)
        Index(
            "uq_pipeline_entry_active_application",
            "tenant_id",
            "candidate_id",
            "position_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_pipeline_entry_tenant_applied", "tenant_id", "applied_at"),
    )
    
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id"),
        nullable=False,
        index=True,
    )
    
    position_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("position.id"),
        nullable=False,
        index=True,
    )
    
    # Null when the tenant had no recruiting stages at creation time
    stage_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("pipeline_stage.id"),
        nullable=True,
        index=True,
    )
    
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PipelineStatus.ACTIVE.value,
        index=True,
    )
    
    rating: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    
    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    
    interview_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    
    hired_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    
    rejected_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    
    withdrawn_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    
    offer_details: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JsonType,
        nullable=True,
    )
    
    rejection_reason: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    
    custom_fields: Mapped[dict[str, Any]] = mapped_column(
        JsonType,
        nullable=False,
        default=dict,
    )
    
    # Optimistic concurrency counter, bumped by the ORM on every UPDATE
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    # Relationships
    candidate: Mapped["Candidate"] = relationship(
        "Candidate",
        lazy="selectin",
    )
    
    position: Mapped["Position"] = relationship(
        "Position",
        lazy="selectin",
    )
    
    stage: Mapped[Optional["PipelineStage"]] = relationship(
        "PipelineStage",
        lazy="selectin",
    )
