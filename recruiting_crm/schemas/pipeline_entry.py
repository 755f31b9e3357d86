"""
Recruiting pipeline Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from recruiting_crm.models.pipeline_entry import PipelineStatus
from recruiting_crm.schemas.base import TenantScopedRead


class CandidateSummary(BaseModel):
    """Candidate fields shown alongside a pipeline entry."""

    id: UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    current_title: Optional[str] = None
    current_company: Optional[str] = None
    linkedin_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PositionSummary(BaseModel):
    id: UUID
    title: str
    department: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StageSummary(BaseModel):
    id: UUID
    name: str
    color: str
    order_index: int

    model_config = ConfigDict(from_attributes=True)


class PipelineEntryCreate(BaseModel):
    """Schema for adding a candidate to a position's pipeline."""

    candidate_id: UUID
    position_id: UUID
    stage_id: Optional[UUID] = None
    status: PipelineStatus = PipelineStatus.ACTIVE
    rating: Optional[int] = Field(default=None, ge=0, le=5)
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    custom_fields: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", use_enum_values=True)


class PipelineEntryUpdate(BaseModel):
    """
    Patch for a pipeline entry. Only fields the caller sends are applied.

    Derived timestamps (hired_at, rejected_at, withdrawn_at, applied_at) and
    the candidate/position references are not part of the mutable set, so a
    patch carrying them is rejected.
    """

    stage_id: Optional[UUID] = None
    status: Optional[PipelineStatus] = None
    rating: Optional[int] = Field(default=None, ge=0, le=5)
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    offer_details: Optional[Dict[str, Any]] = None
    rejection_reason: Optional[str] = Field(default=None, max_length=500)
    custom_fields: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)


class PipelineEntryMove(BaseModel):
    stage_id: UUID

    model_config = ConfigDict(extra="forbid")


class BulkMoveRequest(BaseModel):
    # Malformed ids are skipped by the move, not rejected with the request
    ids: List[str]
    stage_id: UUID

    model_config = ConfigDict(extra="forbid")


class BulkMoveResult(BaseModel):
    processed_count: int
    failed_ids: List[UUID] = Field(default_factory=list)


class PipelineEntrySnapshot(TenantScopedRead):
    """Flat pipeline entry, without joined display data. Used in audit snapshots."""

    candidate_id: UUID
    position_id: UUID
    stage_id: Optional[UUID] = None
    status: PipelineStatus
    rating: Optional[int] = None
    notes: Optional[str] = None
    applied_at: datetime
    interview_date: Optional[datetime] = None
    hired_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None
    offer_details: Optional[Dict[str, Any]] = None
    rejection_reason: Optional[str] = None
    custom_fields: Dict[str, Any] = Field(default_factory=dict)
    version: int


class PipelineEntryRead(PipelineEntrySnapshot):
    """Denormalized pipeline entry returned by the API."""

    candidate: CandidateSummary
    position: PositionSummary
    stage: Optional[StageSummary] = None


class PipelineEntryResponse(BaseModel):
    entry: PipelineEntryRead


class PipelineAnalytics(BaseModel):
    """Status counts over the whole filtered set (not just the returned page)."""

    total: int = 0
    active: int = 0
    hired: int = 0
    passed: int = 0
    withdrawn: int = 0


class PipelineListResponse(BaseModel):
    entries: List[PipelineEntryRead]
    total: int
    limit: int
    offset: int
    analytics: PipelineAnalytics


class MessageResponse(BaseModel):
    message: str
