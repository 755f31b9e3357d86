"""
Audit logger for recruiting pipeline transitions.

Writes one automation_log row per audited transition in its own session,
after the pipeline change has been committed. A failed audit write is
logged and dropped; it never reaches the caller.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recruiting_crm.errors import AuditWriteFailed
from recruiting_crm.repositories.automation_log_repository import AutomationLogRepository
from recruiting_crm.services.pipeline_transitions import Transition

logger = logging.getLogger(__name__)


def build_audit_snapshot(
    transition: Transition,
    previous: Optional[Dict[str, Any]],
    current: Dict[str, Any],
) -> Dict[str, Any]:
    snapshot: Dict[str, Any] = {"previous": previous, "current": current}
    snapshot.update(transition.details())
    return jsonable_encoder(snapshot)


class AuditLogger:
    """Append audit records for audited transition kinds."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _write(self, tenant_id: UUID, trigger_type: str, snapshot: Dict[str, Any]) -> None:
        try:
            async with self.session_factory() as session:
                repo = AutomationLogRepository(session)
                await repo.create(tenant_id, trigger_type, snapshot)
                await session.commit()
        except Exception as exc:
            raise AuditWriteFailed(f"{trigger_type}: {exc}") from exc

    async def record(
        self,
        tenant_id: UUID,
        transitions: Sequence[Transition],
        previous: Optional[Dict[str, Any]],
        current: Dict[str, Any],
    ) -> List[str]:
        """
        Write one record per audited transition, in order.

        Returns the trigger types that were written.
        """
        written: List[str] = []
        for transition in transitions:
            if not transition.is_audited:
                continue
            snapshot = build_audit_snapshot(transition, previous, current)
            try:
                await self._write(tenant_id, transition.audit_trigger_type, snapshot)
            except AuditWriteFailed as exc:
                logger.error(
                    "Audit write failed for tenant %s: %s",
                    tenant_id,
                    exc,
                    exc_info=True,
                )
                continue
            written.append(transition.audit_trigger_type)
        return written
