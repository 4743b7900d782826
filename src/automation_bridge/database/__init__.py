"""Database connection and session management."""

from automation_bridge.database.models import Account, AutomationRule, Base, RuleType
from automation_bridge.database.repositories import AccountRepository, AutomationRuleRepository
from automation_bridge.database.session import (
    check_connection,
    close_db,
    get_engine,
    get_session,
    get_session_factory,
)

__all__ = [
    "Base",
    "Account",
    "AutomationRule",
    "RuleType",
    "AccountRepository",
    "AutomationRuleRepository",
    "get_engine",
    "get_session",
    "get_session_factory",
    "check_connection",
    "close_db",
]
