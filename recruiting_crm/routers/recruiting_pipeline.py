"""
Recruiting pipeline router - API endpoints for candidate applications.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from recruiting_crm.core.dependencies import (
    get_bulk_move_coordinator,
    get_pipeline_service,
    get_tenant_id,
)
from recruiting_crm.schemas.pipeline_entry import (
    BulkMoveRequest,
    BulkMoveResult,
    MessageResponse,
    PipelineEntryCreate,
    PipelineEntryMove,
    PipelineEntryResponse,
    PipelineEntryUpdate,
    PipelineListResponse,
)
from recruiting_crm.services.bulk_move_service import BulkMoveCoordinator
from recruiting_crm.services.recruiting_pipeline_service import RecruitingPipelineService

router = APIRouter(prefix="/recruiting-pipeline", tags=["recruiting-pipeline"])


@router.get("", response_model=PipelineListResponse)
async def list_pipeline(
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
    position_id: Optional[UUID] = None,
    status: Optional[str] = None,
    stage_id: Optional[UUID] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
):
    """
    List pipeline entries with filters and status analytics.

    Filters: position_id, status, stage_id, search (candidate name, email,
    title or company).
    """
    return await service.list_entries(
        tenant_id,
        position_id=position_id,
        status=status,
        stage_id=stage_id,
        search=search,
        limit=limit,
        offset=offset,
    )


# Declared before /{entry_id} routes so "bulk" is never parsed as an id
@router.put("/bulk/move", response_model=BulkMoveResult)
async def bulk_move(
    body: BulkMoveRequest,
    tenant_id: UUID = Depends(get_tenant_id),
    coordinator: BulkMoveCoordinator = Depends(get_bulk_move_coordinator),
):
    """Move several entries to one stage. Returns the processed count and failed ids."""
    return await coordinator.bulk_move(tenant_id, body.ids, body.stage_id)


@router.get("/{entry_id}", response_model=PipelineEntryResponse)
async def get_pipeline_entry(
    entry_id: UUID,
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
):
    entry = await service.get_entry(tenant_id, entry_id)
    return PipelineEntryResponse(entry=entry)


@router.post("", response_model=PipelineEntryResponse, status_code=status.HTTP_201_CREATED)
async def add_candidate_to_pipeline(
    body: PipelineEntryCreate,
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
):
    """Add a candidate to a position's pipeline (default stage when none is given)."""
    entry = await service.create_entry(tenant_id, body)
    return PipelineEntryResponse(entry=entry)


@router.put("/{entry_id}", response_model=PipelineEntryResponse)
async def update_pipeline_entry(
    entry_id: UUID,
    body: PipelineEntryUpdate,
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
):
    """Update stage, status, rating, notes and related fields."""
    entry = await service.update_entry(tenant_id, entry_id, body)
    return PipelineEntryResponse(entry=entry)


@router.put("/{entry_id}/move", response_model=PipelineEntryResponse)
async def move_pipeline_entry(
    entry_id: UUID,
    body: PipelineEntryMove,
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
):
    """Move an entry to another stage (drag and drop)."""
    entry = await service.move_entry(tenant_id, entry_id, body.stage_id)
    return PipelineEntryResponse(entry=entry)


@router.delete("/{entry_id}", response_model=MessageResponse)
async def remove_pipeline_entry(
    entry_id: UUID,
    tenant_id: UUID = Depends(get_tenant_id),
    service: RecruitingPipelineService = Depends(get_pipeline_service),
):
    await service.delete_entry(tenant_id, entry_id)
    return MessageResponse(message="Candidate removed from pipeline successfully")
