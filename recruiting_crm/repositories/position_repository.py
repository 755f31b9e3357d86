"""
Position repository - read-only lookups used by the pipeline engine.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.models.position import Position


class PositionRepository:
    """Repository for Position database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_by_id(self, tenant_id: UUID, position_id: UUID) -> Optional[Position]:
        """Get a position by ID for a specific tenant."""
        result = await self.db.execute(
            select(Position).where(
                Position.id == position_id,
                Position.tenant_id == tenant_id
            )
        )
        return result.scalar_one_or_none()
