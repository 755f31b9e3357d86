"""
Recruiting pipeline business logic service.

Each state change runs as: read (row locked) -> decide -> write -> commit,
then dispatch automation events, then write audit records. Only the part up
to and including the commit can fail the request.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from recruiting_crm.errors import (
    AppError,
    ConcurrentModification,
    DuplicateApplication,
    NotFound,
    WriteFailed,
)
from recruiting_crm.models.pipeline_entry import PipelineEntry, PipelineStatus
from recruiting_crm.repositories.candidate_repository import CandidateRepository
from recruiting_crm.repositories.pipeline_entry_repository import PipelineEntryRepository
from recruiting_crm.repositories.pipeline_stage_repository import PipelineStageRepository
from recruiting_crm.repositories.position_repository import PositionRepository
from recruiting_crm.schemas.pipeline_entry import (
    PipelineAnalytics,
    PipelineEntryCreate,
    PipelineEntryRead,
    PipelineEntrySnapshot,
    PipelineEntryUpdate,
    PipelineListResponse,
)
from recruiting_crm.services.audit_logger import AuditLogger
from recruiting_crm.services.automation.dispatcher import AutomationDispatcher
from recruiting_crm.services.pipeline_filters import build_pipeline_filter, parse_tenant_id
from recruiting_crm.services.pipeline_transitions import (
    Transition,
    TransitionDecision,
    creation_transition,
    decide_transition,
    initial_status_fields,
)
from recruiting_crm.utils.time import utc_now

logger = logging.getLogger(__name__)

_SNAPSHOT_FIELDS = set(PipelineEntrySnapshot.model_fields)


def _snapshot(entry: Union[PipelineEntry, PipelineEntryRead]) -> Dict[str, Any]:
    """Flat, JSON-ready copy of an entry without joined display data."""
    if isinstance(entry, PipelineEntryRead):
        return entry.model_dump(mode="json", include=_SNAPSHOT_FIELDS)
    return PipelineEntrySnapshot.model_validate(entry).model_dump(mode="json")


class RecruitingPipelineService:
    """Service for recruiting pipeline business logic."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: AutomationDispatcher,
        audit_logger: AuditLogger,
    ):
        self.db = db
        self.repository = PipelineEntryRepository(db)
        self.candidates = CandidateRepository(db)
        self.positions = PositionRepository(db)
        self.stages = PipelineStageRepository(db)
        self.dispatcher = dispatcher
        self.audit_logger = audit_logger

    async def list_entries(
        self,
        tenant_id: Union[str, UUID],
        position_id: Union[str, UUID, None] = None,
        status: Optional[str] = None,
        stage_id: Union[str, UUID, None] = None,
        search: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
    ) -> PipelineListResponse:
        """List entries with filters, the unpaginated total and per-status counts."""
        pipeline_filter = build_pipeline_filter(
            tenant_id,
            position_id=position_id,
            status=status,
            stage_id=stage_id,
            search=search,
            limit=limit,
            offset=offset,
        )
        entries = await self.repository.list(pipeline_filter)
        total = await self.repository.count(pipeline_filter)
        by_status = await self.repository.count_by_status(pipeline_filter)

        analytics = PipelineAnalytics(
            total=total,
            **{s.value: by_status.get(s.value, 0) for s in PipelineStatus},
        )
        return PipelineListResponse(
            entries=[PipelineEntryRead.model_validate(e) for e in entries],
            total=total,
            limit=pipeline_filter.limit,
            offset=pipeline_filter.offset,
            analytics=analytics,
        )

    async def get_entry(self, tenant_id: Union[str, UUID], entry_id: UUID) -> PipelineEntryRead:
        tenant_uuid = parse_tenant_id(tenant_id)
        entry = await self.repository.get_by_id(tenant_uuid, entry_id)
        if entry is None:
            raise NotFound("Candidate application not found", {"id": str(entry_id)})
        return PipelineEntryRead.model_validate(entry)

    async def create_entry(
        self,
        tenant_id: Union[str, UUID],
        data: PipelineEntryCreate,
    ) -> PipelineEntryRead:
        """
        Add a candidate to a position's pipeline.

        Raises:
            NotFound: candidate, position or explicit stage not in the tenant
            DuplicateApplication: an active application already exists
            WriteFailed: the insert failed
        """
        tenant_uuid = parse_tenant_id(tenant_id)

        if await self.candidates.get_by_id(tenant_uuid, data.candidate_id) is None:
            raise NotFound("Candidate not found", {"candidate_id": str(data.candidate_id)})
        if await self.positions.get_by_id(tenant_uuid, data.position_id) is None:
            raise NotFound("Position not found", {"position_id": str(data.position_id)})

        stage_id = data.stage_id
        if stage_id is not None:
            if await self.stages.get_recruiting_stage(tenant_uuid, stage_id) is None:
                raise NotFound("Stage not found", {"stage_id": str(stage_id)})
        else:
            default_stage = await self.stages.get_default_recruiting_stage(tenant_uuid)
            stage_id = default_stage.id if default_stage else None

        now = utc_now()
        fields = initial_status_fields(data.status, now)
        status = fields["status"]

        if status == PipelineStatus.ACTIVE.value:
            existing = await self.repository.find_active_application(
                tenant_uuid, data.candidate_id, data.position_id
            )
            if existing is not None:
                raise DuplicateApplication(
                    "Candidate already applied for this position",
                    {"existing_id": str(existing.id)},
                )

        fields.update(
            rating=data.rating,
            notes=data.notes,
            interview_date=data.interview_date,
            custom_fields=data.custom_fields or {},
        )

        try:
            entry = await self.repository.create(
                tenant_uuid,
                data.candidate_id,
                data.position_id,
                stage_id,
                applied_at=now,
                fields=fields,
            )
            view = await self._read_in_transaction(tenant_uuid, entry.id)
            await self.db.commit()
        except AppError:
            await self.db.rollback()
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            if status == PipelineStatus.ACTIVE.value:
                # Lost the race against a concurrent create; the partial unique index caught it
                raise DuplicateApplication("Candidate already applied for this position") from exc
            raise WriteFailed("Failed to add candidate to pipeline") from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise WriteFailed("Failed to add candidate to pipeline") from exc

        logger.info("Added candidate %s to position %s (entry %s)", data.candidate_id, data.position_id, view.id)
        await self._run_side_effects(
            tenant_uuid,
            [creation_transition(stage_id, status)],
            view,
            previous=None,
        )
        return view

    async def update_entry(
        self,
        tenant_id: Union[str, UUID],
        entry_id: UUID,
        patch: Union[PipelineEntryUpdate, Mapping[str, Any]],
    ) -> PipelineEntryRead:
        """Apply a client patch; only fields the caller set are considered."""
        if isinstance(patch, BaseModel):
            values = patch.model_dump(exclude_unset=True)
        else:
            values = dict(patch)
        return await self._apply_patch(parse_tenant_id(tenant_id), entry_id, values)

    async def move_entry(
        self,
        tenant_id: Union[str, UUID],
        entry_id: UUID,
        stage_id: UUID,
    ) -> PipelineEntryRead:
        """Update restricted to stage_id."""
        return await self._apply_patch(parse_tenant_id(tenant_id), entry_id, {"stage_id": stage_id})

    async def delete_entry(self, tenant_id: Union[str, UUID], entry_id: UUID) -> None:
        """Hard-delete an entry. Candidate and position are left untouched."""
        tenant_uuid = parse_tenant_id(tenant_id)
        entry = await self.repository.get_by_id(tenant_uuid, entry_id)
        if entry is None:
            raise NotFound("Candidate application not found", {"id": str(entry_id)})

        try:
            await self.repository.delete(entry)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise WriteFailed("Failed to remove candidate from pipeline") from exc
        logger.info("Removed pipeline entry %s for tenant %s", entry_id, tenant_uuid)

    async def _apply_patch(
        self,
        tenant_id: UUID,
        entry_id: UUID,
        patch: Dict[str, Any],
    ) -> PipelineEntryRead:
        view, decision, previous = await self._commit_patch(tenant_id, entry_id, patch)
        await self._run_side_effects(
            tenant_id,
            decision.transitions,
            view,
            previous=previous,
            changes=patch,
        )
        return view

    async def _commit_patch(
        self,
        tenant_id: UUID,
        entry_id: UUID,
        patch: Dict[str, Any],
    ) -> Tuple[PipelineEntryRead, TransitionDecision, Dict[str, Any]]:
        """Read-modify-write under a row lock. Nothing is emitted if this raises."""
        try:
            entry = await self.repository.get_by_id(tenant_id, entry_id, for_update=True)
            if entry is None:
                raise NotFound("Candidate application not found", {"id": str(entry_id)})

            previous = _snapshot(entry)
            decision = decide_transition(entry, patch, utc_now())

            new_stage_id = decision.changes.get("stage_id")
            if new_stage_id is not None:
                if await self.stages.get_recruiting_stage(tenant_id, new_stage_id) is None:
                    raise NotFound("Stage not found", {"stage_id": str(new_stage_id)})

            if decision.is_noop:
                view = PipelineEntryRead.model_validate(entry)
            else:
                await self.repository.apply_changes(entry, decision.changes)
                view = await self._read_in_transaction(tenant_id, entry_id)
            # Also ends the transaction (and releases the lock) for a no-op
            await self.db.commit()
        except AppError:
            await self.db.rollback()
            raise
        except StaleDataError as exc:
            await self.db.rollback()
            raise ConcurrentModification(
                "Candidate application was modified concurrently; retry the update",
                {"id": str(entry_id)},
            ) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise WriteFailed("Failed to update candidate in pipeline", {"id": str(entry_id)}) from exc

        return view, decision, previous

    async def _read_in_transaction(self, tenant_id: UUID, entry_id: UUID) -> PipelineEntryRead:
        """
        Re-read a just-written entry before the commit.

        The response view is built while the write can still be rolled back,
        so nothing between the commit and the side effects touches the database.
        """
        entry = await self.repository.get_by_id(tenant_id, entry_id)
        if entry is None:
            raise WriteFailed("Written entry could not be read back", {"id": str(entry_id)})
        return PipelineEntryRead.model_validate(entry)

    async def _run_side_effects(
        self,
        tenant_id: UUID,
        transitions: Sequence[Transition],
        view: PipelineEntryRead,
        previous: Optional[Dict[str, Any]],
        changes: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Automation, then audit. Both swallow their own failures."""
        if not transitions:
            return
        await self.dispatcher.dispatch(tenant_id, transitions, view, changes)
        await self.audit_logger.record(tenant_id, transitions, previous, _snapshot(view))

    async def resolve_entry_ids(self, tenant_id: UUID, entry_ids: Sequence[UUID]) -> List[UUID]:
        return await self.repository.resolve_ids(tenant_id, entry_ids)
