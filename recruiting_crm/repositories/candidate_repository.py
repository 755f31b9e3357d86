"""
Candidate repository - read-only lookups used by the pipeline engine.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.models.candidate import Candidate


class CandidateRepository:
    """Repository for Candidate database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_by_id(self, tenant_id: UUID, candidate_id: UUID) -> Optional[Candidate]:
        """Get a candidate by ID for a specific tenant."""
        result = await self.db.execute(
            select(Candidate).where(
                Candidate.id == candidate_id,
                Candidate.tenant_id == tenant_id
            )
        )
        return result.scalar_one_or_none()
