"""Automation delivery for recruiting pipeline transitions."""

from recruiting_crm.services.automation.base import AutomationClient, LoggingAutomationClient
from recruiting_crm.services.automation.dispatcher import AutomationDispatcher, build_event
from recruiting_crm.services.automation.webhook_client import WebhookAutomationClient

__all__ = [
    "AutomationClient",
    "AutomationDispatcher",
    "LoggingAutomationClient",
    "WebhookAutomationClient",
    "build_event",
]
