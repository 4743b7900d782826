"""App installation entry point."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from automation_bridge.clients.monday_client import MondayClient
from automation_bridge.dependencies import get_monday_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["installation"])


@router.get(
    "/install",
    status_code=status.HTTP_302_FOUND,
    summary="Start app installation",
    description="Redirect the browser to the platform's OAuth authorization page",
)
async def install(monday: MondayClient = Depends(get_monday_client)) -> RedirectResponse:
    """
    Redirect to the platform's authorization URL.

    Responds 500 ``{"error": ...}`` when no client ID is configured.
    """
    auth_url = monday.authorization_url()
    logger.info("Redirecting to platform authorization page")
    return RedirectResponse(auth_url, status_code=status.HTTP_302_FOUND)
