"""Clients for external services."""

from automation_bridge.clients.monday_client import MondayClient

__all__ = ["MondayClient"]
