"""Webhook endpoint for platform automation events.

Request handling order:

1. **Signature**: the ``authorization`` header must be the HMAC-SHA256 of the
   raw body under the signing secret, otherwise 401. Nothing else is looked at
   before this check, including the handshake.
2. **Handshake**: a body with ``challenge`` is answered by echoing it back.
3. **Events**: ``subscribe``, ``unsubscribe`` and ``execute_action`` are
   applied; anything else is acknowledged. The platform retries on non-200,
   so recognized events answer 200 whatever their outcome, except store
   failures during subscribe/unsubscribe, which answer 500 so the
   registration is retried.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import ValidationError

from automation_bridge.config import Settings, get_settings
from automation_bridge.dependencies import get_automation_service
from automation_bridge.exceptions import APIException, ClientInputError
from automation_bridge.models.webhook_event import WebhookEvent
from automation_bridge.services.automation_service import AutomationService
from automation_bridge.services.signature import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=dict,
    summary="Receive automation webhook events",
    description="Signed endpoint for subscribe, unsubscribe and execute_action events",
)
async def handle_events(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    service: AutomationService = Depends(get_automation_service),
) -> Dict[str, Any]:
    body = await request.body()
    verify_signature(settings.monday.signing_secret, body, authorization)

    try:
        data = json.loads(body)
    except ValueError:
        raise ClientInputError("Request body must be JSON")
    if not isinstance(data, dict):
        raise ClientInputError("Request body must be a JSON object")

    if data.get("challenge") is not None:
        logger.info("Answering webhook challenge")
        return {"challenge": data["challenge"]}

    raw_event = data.get("event")
    if not raw_event:
        return {}

    try:
        event = WebhookEvent.model_validate(raw_event)
    except ValidationError as e:
        logger.warning(f"Malformed webhook event: {e}")
        raise ClientInputError("Invalid event")

    # Picked up by the access log
    request.state.event_type = event.type

    try:
        return await service.handle_event(event)
    except APIException as e:
        if e.status_code < 500:
            raise
        logger.error(f"[HANDLER_ERROR] {event.type}: {e.code}: {e.message}", exc_info=True)
        raise APIException("Internal Server Error", status_code=500, code=e.code) from e
    except Exception as e:
        logger.error(f"[HANDLER_ERROR] {event.type}: {e}", exc_info=True)
        raise APIException("Internal Server Error", status_code=500, code="INTERNAL_ERROR")
