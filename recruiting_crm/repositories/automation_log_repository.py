"""
AutomationLog repository - append-only writes of audit records.
"""

from typing import Any, Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.models.automation_log import AutomationLog, AutomationLogStatus


class AutomationLogRepository:
    """Repository for AutomationLog inserts. Rows are never updated from here."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def create(
        self,
        tenant_id: UUID,
        trigger_type: str,
        trigger_data: Dict[str, Any],
    ) -> AutomationLog:
        record = AutomationLog(
            tenant_id=tenant_id,
            automation_id=None,
            trigger_type=trigger_type,
            trigger_data=trigger_data,
            conditions_met=True,
            status=AutomationLogStatus.PENDING,
        )
        self.db.add(record)
        await self.db.flush()
        return record
