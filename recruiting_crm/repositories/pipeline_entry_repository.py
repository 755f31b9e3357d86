"""
PipelineEntry repository - database operations for the recruiting pipeline.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.models.pipeline_entry import PipelineEntry, PipelineStatus
from recruiting_crm.services.pipeline_filters import PipelineFilter


class PipelineEntryRepository:
    """
    Repository for PipelineEntry database operations.

    Every read takes the tenant id (directly or through a PipelineFilter) and
    filters on it. Writes flush only; the service decides when to commit.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, pipeline_filter: PipelineFilter) -> List[PipelineEntry]:
        """List one page of entries, newest application first."""
        query = pipeline_filter.apply(select(PipelineEntry))
        query = query.order_by(PipelineEntry.applied_at.desc(), PipelineEntry.id.asc())
        query = pipeline_filter.paginate(query)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, pipeline_filter: PipelineFilter) -> int:
        """Count all entries matching the filter, ignoring pagination."""
        query = pipeline_filter.apply(select(func.count(PipelineEntry.id)))
        result = await self.db.execute(query)
        return int(result.scalar_one())

    async def count_by_status(self, pipeline_filter: PipelineFilter) -> Dict[str, int]:
        """Per-status counts over the same predicate as count()."""
        query = pipeline_filter.apply(
            select(PipelineEntry.status, func.count(PipelineEntry.id))
        ).group_by(PipelineEntry.status)
        result = await self.db.execute(query)
        return {status: int(total) for status, total in result.all()}

    async def get_by_id(
        self,
        tenant_id: UUID,
        entry_id: UUID,
        for_update: bool = False,
    ) -> Optional[PipelineEntry]:
        """
        Get an entry by ID for a specific tenant.

        Always re-reads the row (and its joined candidate/position/stage) so
        callers see what was just committed. With for_update the row is
        locked until the current transaction ends.
        """
        query = (
            select(PipelineEntry)
            .where(
                PipelineEntry.id == entry_id,
                PipelineEntry.tenant_id == tenant_id,
            )
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update(of=PipelineEntry)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_active_application(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        position_id: UUID,
    ) -> Optional[PipelineEntry]:
        result = await self.db.execute(
            select(PipelineEntry).where(
                PipelineEntry.tenant_id == tenant_id,
                PipelineEntry.candidate_id == candidate_id,
                PipelineEntry.position_id == position_id,
                PipelineEntry.status == PipelineStatus.ACTIVE.value,
            ).limit(1)
        )
        return result.scalar_one_or_none()

    async def resolve_ids(self, tenant_id: UUID, entry_ids: Sequence[UUID]) -> List[UUID]:
        """Return the subset of ids that exist and belong to the tenant, in request order."""
        if not entry_ids:
            return []
        result = await self.db.execute(
            select(PipelineEntry.id).where(
                PipelineEntry.tenant_id == tenant_id,
                PipelineEntry.id.in_(list(entry_ids)),
            )
        )
        found = set(result.scalars().all())
        ordered: List[UUID] = []
        for entry_id in entry_ids:
            if entry_id in found and entry_id not in ordered:
                ordered.append(entry_id)
        return ordered

    async def create(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        position_id: UUID,
        stage_id: Optional[UUID],
        applied_at: datetime,
        fields: Dict[str, Any],
    ) -> PipelineEntry:
        """Insert a new entry. `fields` holds status, derived timestamps and optional columns."""
        entry = PipelineEntry(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            candidate_id=candidate_id,
            position_id=position_id,
            stage_id=stage_id,
            applied_at=applied_at,
            **fields,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def apply_changes(self, entry: PipelineEntry, changes: Dict[str, Any]) -> PipelineEntry:
        """Write already-decided column changes. The version check runs on flush."""
        for field, value in changes.items():
            setattr(entry, field, value)

        entry.updated_at = func.now()
        await self.db.flush()
        return entry

    async def delete(self, entry: PipelineEntry) -> None:
        await self.db.delete(entry)
        await self.db.flush()
