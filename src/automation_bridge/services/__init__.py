"""Business logic services."""

from automation_bridge.services.automation_service import (
    AutomationService,
    ExecutionOutcome,
    transform_value,
)
from automation_bridge.services.installation_service import InstallationService
from automation_bridge.services.signature import compute_signature, verify_signature

__all__ = [
    "AutomationService",
    "ExecutionOutcome",
    "InstallationService",
    "transform_value",
    "compute_signature",
    "verify_signature",
]
