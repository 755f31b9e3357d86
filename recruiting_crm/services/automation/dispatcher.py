"""
Automation dispatcher.

Turns committed transitions into automation events and hands them to the
injected AutomationClient. Delivery is best-effort: a failure or timeout is
logged and swallowed so it can never undo or fail the state change that
produced it.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from fastapi.encoders import jsonable_encoder

from recruiting_crm.errors import AutomationDeliveryFailed
from recruiting_crm.schemas.automation import AutomationEvent
from recruiting_crm.schemas.pipeline_entry import PipelineEntryRead
from recruiting_crm.services.automation.base import AutomationClient
from recruiting_crm.services.pipeline_transitions import Transition

logger = logging.getLogger(__name__)


def build_event(
    tenant_id: UUID,
    transition: Transition,
    entry: PipelineEntryRead,
    changes: Optional[Dict[str, Any]] = None,
) -> AutomationEvent:
    view = entry.model_dump(mode="json")
    data: Dict[str, Any] = {
        "pipeline": view,
        "candidate": view.get("candidate"),
        "position": view.get("position"),
        "stage": view.get("stage"),
    }
    data.update(transition.details())
    if changes:
        data["changes"] = jsonable_encoder(changes)
    return AutomationEvent(type=transition.event_type, tenant_id=tenant_id, data=data)


class AutomationDispatcher:
    """Submit one event per transition, in transition order."""

    def __init__(self, client: AutomationClient, timeout_seconds: Optional[float] = None):
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def _deliver(self, event: AutomationEvent) -> None:
        try:
            if self.timeout_seconds:
                await asyncio.wait_for(self.client.process_event(event), timeout=self.timeout_seconds)
            else:
                await self.client.process_event(event)
        except asyncio.TimeoutError as exc:
            raise AutomationDeliveryFailed(
                f"{event.type.value} timed out after {self.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise AutomationDeliveryFailed(f"{event.type.value}: {exc}") from exc

    async def dispatch(
        self,
        tenant_id: UUID,
        transitions: Sequence[Transition],
        entry: PipelineEntryRead,
        changes: Optional[Dict[str, Any]] = None,
    ) -> List[AutomationEvent]:
        """
        Deliver events for the given transitions.

        Returns the events that were delivered successfully.
        """
        delivered: List[AutomationEvent] = []
        for transition in transitions:
            event = build_event(tenant_id, transition, entry, changes)
            try:
                await self._deliver(event)
            except AutomationDeliveryFailed as exc:
                logger.warning(
                    "Automation delivery failed for pipeline entry %s: %s",
                    entry.id,
                    exc,
                    exc_info=True,
                )
                continue
            delivered.append(event)
        return delivered
