"""
PipelineStage repository - read-only stage lookups for the recruiting pipeline.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.models.pipeline_stage import PipelineStage, PipelineType


class PipelineStageRepository:
    """Repository for PipelineStage database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_recruiting_stage(self, tenant_id: UUID, stage_id: UUID) -> Optional[PipelineStage]:
        """Get a recruiting stage by ID for a specific tenant."""
        result = await self.db.execute(
            select(PipelineStage).where(
                PipelineStage.id == stage_id,
                PipelineStage.tenant_id == tenant_id,
                PipelineStage.pipeline_type == PipelineType.RECRUITING,
            )
        )
        return result.scalar_one_or_none()
    
    async def get_default_recruiting_stage(self, tenant_id: UUID) -> Optional[PipelineStage]:
        """Lowest-order active recruiting stage, or None if the tenant has none."""
        result = await self.db.execute(
            select(PipelineStage)
            .where(
                PipelineStage.tenant_id == tenant_id,
                PipelineStage.pipeline_type == PipelineType.RECRUITING,
                PipelineStage.is_active.is_(True),
            )
            .order_by(PipelineStage.order_index.asc(), PipelineStage.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
