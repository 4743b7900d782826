"""OAuth callback endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from automation_bridge.config import Settings, get_settings
from automation_bridge.dependencies import get_installation_service
from automation_bridge.exceptions import APIException
from automation_bridge.services.installation_service import InstallationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

SUCCESS_PAGE = """<!DOCTYPE html>
<html>
  <head><title>Installation complete</title></head>
  <body>
    <h1>Installation complete</h1>
    <p>The app is connected to your account. You can close this window.</p>
  </body>
</html>
"""


def resolve_redirect_uri(request: Request, settings: Settings) -> str:
    """Configured redirect URI, or this service's callback URL on the request host."""
    if settings.monday.redirect_uri:
        return settings.monday.redirect_uri
    return str(request.url_for("oauth_callback"))


@router.get(
    "/callback",
    name="oauth_callback",
    status_code=status.HTTP_302_FOUND,
    summary="Handle OAuth callback",
    description="Exchange the authorization code for a token and store it for the account",
)
async def oauth_callback(
    request: Request,
    code: Optional[str] = Query(default=None, description="Authorization code"),
    settings: Settings = Depends(get_settings),
    service: InstallationService = Depends(get_installation_service),
) -> Response:
    """
    Handle the platform's OAuth redirect.

    The browser is redirected to the success page only after the token has
    been stored; any failure along the way is a plain-text 500.
    """
    if not code:
        logger.warning("OAuth callback received without code")
        return PlainTextResponse("Missing code", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        account_id = await service.complete_installation(
            code, resolve_redirect_uri(request, settings)
        )
    except APIException as e:
        logger.error(f"OAuth installation failed ({e.code}): {e.message}")
        return PlainTextResponse(
            "Installation failed. Please try again.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except Exception as e:
        logger.error(f"Unexpected error during OAuth installation: {e}", exc_info=True)
        return PlainTextResponse(
            "Installation failed. Please try again.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(f"Installation completed for account {account_id}")
    return RedirectResponse(settings.success_redirect_url, status_code=status.HTTP_302_FOUND)


@router.get("/success", response_class=HTMLResponse, include_in_schema=False)
async def installation_success() -> str:
    """Static page shown after a successful installation."""
    return SUCCESS_PAGE
