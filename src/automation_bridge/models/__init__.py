"""Request and event models."""

from automation_bridge.models.webhook_event import (
    EventType,
    ExecuteActionPayload,
    InboundFieldValues,
    SubscribePayload,
    UnsubscribePayload,
    WebhookEvent,
)

__all__ = [
    "EventType",
    "WebhookEvent",
    "SubscribePayload",
    "UnsubscribePayload",
    "InboundFieldValues",
    "ExecuteActionPayload",
]
