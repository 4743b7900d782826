"""Pydantic models for platform webhook events."""

from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, Field


class EventType(str, Enum):
    """Webhook event types the service acts on."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    EXECUTE_ACTION = "execute_action"


def _id_to_str(v: Any) -> Any:
    # The platform sends webhook ids as numbers; they are stored as strings
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


WebhookId = Annotated[str, BeforeValidator(_id_to_str)]


class WebhookEvent(BaseModel):
    """Event envelope: ``{"type": ..., "payload": {...}}``."""

    type: str = Field(..., description="Event type")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Event payload")


class SubscribePayload(BaseModel):
    """Payload of a ``subscribe`` event."""

    webhookId: WebhookId = Field(..., description="Webhook (subscription) ID")
    boardId: int = Field(..., description="Board the automation was added to")
    accountId: int = Field(..., description="Installing account ID")


class UnsubscribePayload(BaseModel):
    """Payload of an ``unsubscribe`` event."""

    webhookId: WebhookId = Field(..., description="Webhook (subscription) ID")


class InboundFieldValues(BaseModel):
    """Field values the platform supplies when an automation fires."""

    boardId: int = Field(..., description="Board ID")
    itemId: int = Field(..., description="Item ID")
    columnId: str = Field(..., description="Column to transform")
    webhookId: Optional[WebhookId] = Field(default=None, description="Webhook ID")


class ExecuteActionPayload(BaseModel):
    """Payload of an ``execute_action`` event."""

    inboundFieldValues: InboundFieldValues
    webhookId: Optional[WebhookId] = Field(default=None, description="Webhook ID")

    @property
    def resolved_webhook_id(self) -> Optional[str]:
        """Webhook ID from the field values, falling back to the payload."""
        return self.inboundFieldValues.webhookId or self.webhookId
