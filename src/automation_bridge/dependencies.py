"""FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from automation_bridge.clients.monday_client import MondayClient
from automation_bridge.config import Settings, get_settings
from automation_bridge.database.session import get_session
from automation_bridge.services.automation_service import AutomationService
from automation_bridge.services.installation_service import InstallationService


def get_monday_client(settings: Settings = Depends(get_settings)) -> MondayClient:
    """Platform client bound to the injected configuration."""
    return MondayClient(settings.monday)


def get_installation_service(
    session: AsyncSession = Depends(get_session),
    monday: MondayClient = Depends(get_monday_client),
) -> InstallationService:
    return InstallationService(session, monday)


def get_automation_service(
    session: AsyncSession = Depends(get_session),
    monday: MondayClient = Depends(get_monday_client),
) -> AutomationService:
    return AutomationService(session, monday)


__all__ = [
    "get_settings",
    "get_session",
    "get_monday_client",
    "get_installation_service",
    "get_automation_service",
]
