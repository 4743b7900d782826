"""OAuth installation: code exchange and credential storage."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from automation_bridge.clients.monday_client import MondayClient
from automation_bridge.database.repositories import AccountRepository
from automation_bridge.exceptions import ClientInputError, PersistenceError

logger = logging.getLogger(__name__)


class InstallationService:
    """Completes an app installation started by the platform's OAuth flow."""

    def __init__(self, session: AsyncSession, monday: MondayClient):
        self.session = session
        self.monday = monday
        self.accounts = AccountRepository(session)

    async def complete_installation(self, code: str, redirect_uri: str) -> int:
        """
        Exchange the code, resolve the account and store its token.

        Each step depends on the previous one; the first failure aborts the
        installation and nothing is stored.

        Args:
            code: Authorization code from the OAuth redirect
            redirect_uri: Redirect URI used for the authorization request

        Returns:
            The installed account's id

        Raises:
            ClientInputError: If the code is empty
            UpstreamError: If token exchange or account lookup fails
            PersistenceError: If the credentials cannot be stored
        """
        if not code:
            raise ClientInputError("Missing code")

        access_token = await self.monday.exchange_code(code, redirect_uri)
        account_id = await self.monday.get_account_id(access_token)

        await self.accounts.upsert(account_id, access_token)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to store account {account_id}") from e

        logger.info(f"Stored access token for account {account_id}")
        return account_id
