"""Database repositories for accounts and automation rules."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from automation_bridge.database.models import Account, AutomationRule, RuleType
from automation_bridge.exceptions import PersistenceError


class _Repository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self, model):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(model)
        if dialect == "sqlite":
            return sqlite_insert(model)
        raise PersistenceError(f"Upsert is not supported for dialect '{dialect}'")


class AccountRepository(_Repository):
    """Repository for account credential operations."""

    async def get_by_account_id(self, account_id: int) -> Optional[Account]:
        """Get an account by its platform id."""
        try:
            result = await self.session.execute(
                select(Account)
                .where(Account.account_id == account_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load account {account_id}") from e

    async def upsert(self, account_id: int, access_token: str) -> None:
        """Insert an account or overwrite its access token."""
        now = datetime.now(timezone.utc)
        stmt = self._insert(Account).values(
            account_id=account_id,
            access_token=access_token,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Account.account_id],
            set_={
                "access_token": stmt.excluded.access_token,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        try:
            await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to store account {account_id}") from e


class AutomationRuleRepository(_Repository):
    """Repository for automation rule operations."""

    async def get_by_webhook_id(self, webhook_id: str) -> Optional[AutomationRule]:
        """Get the rule registered for a webhook."""
        try:
            result = await self.session.execute(
                select(AutomationRule)
                .where(AutomationRule.webhook_id == webhook_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load rule for webhook {webhook_id}") from e

    async def save(
        self,
        webhook_id: str,
        board_id: int,
        account_id: int,
        rule_type: RuleType = RuleType.TO_UPPERCASE,
    ) -> None:
        """
        Store a rule, replacing any rule already registered for the webhook.

        Re-delivery of the same subscription therefore leaves exactly one row.
        """
        stmt = self._insert(AutomationRule).values(
            webhook_id=webhook_id,
            board_id=board_id,
            account_id=account_id,
            rule_type=rule_type,
            created_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[AutomationRule.webhook_id],
            set_={
                "board_id": stmt.excluded.board_id,
                "account_id": stmt.excluded.account_id,
                "rule_type": stmt.excluded.rule_type,
            },
        )
        try:
            await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to store rule for webhook {webhook_id}") from e

    async def delete_by_webhook_id(self, webhook_id: str) -> bool:
        """Delete the rule for a webhook. Returns False if none existed."""
        try:
            result = await self.session.execute(
                delete(AutomationRule).where(AutomationRule.webhook_id == webhook_id)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete rule for webhook {webhook_id}") from e
        return bool(result.rowcount)
