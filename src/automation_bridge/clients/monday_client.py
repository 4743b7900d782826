"""HTTP client for the monday.com OAuth server and GraphQL API."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from automation_bridge.config import MondaySettings
from automation_bridge.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

SERVICE_NAME = "monday"

ACCOUNT_ID_QUERY = "query { me { account { id } } }"

COLUMN_TEXT_QUERY = (
    "query($itemId: [ID!], $columnId: [String!]) "
    "{ items (ids: $itemId) { column_values (ids: $columnId) { text } } }"
)

CHANGE_COLUMN_VALUE_MUTATION = (
    "mutation($boardId: ID!, $itemId: ID!, $columnId: String!, $value: String!) "
    "{ change_simple_column_value (board_id: $boardId, item_id: $itemId, "
    "column_id: $columnId, value: $value) { id } }"
)


class MondayClient:
    """Client for monday.com OAuth token exchange and GraphQL calls.

    Every call opens a short-lived ``httpx.AsyncClient`` bounded by
    ``request_timeout``; transport failures and timeouts surface as
    ``UpstreamError``.
    """

    def __init__(
        self,
        config: MondaySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.request_timeout, transport=self._transport)

    def authorization_url(self) -> str:
        """Build the URL a browser is sent to for installing the app."""
        if not self.config.client_id:
            raise ConfigurationError("Monday.com Client ID is not configured.")
        return f"{self.config.authorize_url}?{urlencode({'client_id': self.config.client_id})}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """
        Exchange an authorization code for an access token.

        Args:
            code: One-time code from the OAuth redirect
            redirect_uri: Redirect URI registered for the app

        Returns:
            The access token

        Raises:
            ConfigurationError: If client credentials are missing
            UpstreamError: If the token endpoint rejects the exchange
        """
        if not self.config.is_configured:
            raise ConfigurationError("Monday.com client credentials are not configured.")

        try:
            async with self._client() as client:
                response = await client.post(
                    self.config.token_url,
                    data={
                        "code": code,
                        "client_id": self.config.client_id,
                        "client_secret": self.config.client_secret,
                        "redirect_uri": redirect_uri,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Token exchange request failed: {e}")
            raise UpstreamError(SERVICE_NAME, "Token exchange request failed") from e

        if response.status_code != 200:
            logger.error(
                f"Token exchange failed with status {response.status_code}: {response.text}"
            )
            raise UpstreamError(
                SERVICE_NAME,
                "Token exchange failed",
                details={"status_code": response.status_code},
            )

        try:
            access_token = response.json().get("access_token")
        except ValueError as e:
            raise UpstreamError(SERVICE_NAME, "Token endpoint returned invalid JSON") from e
        if not access_token:
            raise UpstreamError(SERVICE_NAME, "Token endpoint returned no access token")

        return access_token

    async def execute(
        self,
        query: str,
        token: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` object."""
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        headers = {"Authorization": token, "Content-Type": "application/json"}
        if self.config.api_version:
            headers["API-Version"] = self.config.api_version

        try:
            async with self._client() as client:
                response = await client.post(self.config.api_url, json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"monday.com API returned {e.response.status_code}: {e.response.text}"
            )
            raise UpstreamError(
                SERVICE_NAME,
                "Failed to call Monday.com API",
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error calling monday.com API: {e}")
            raise UpstreamError(SERVICE_NAME, "Failed to call Monday.com API") from e

        if body.get("errors"):
            logger.error(f"monday.com API errors: {body['errors']}")
            raise UpstreamError(
                SERVICE_NAME,
                "Monday.com API returned errors",
                details={"errors": body["errors"]},
            )

        return body.get("data") or {}

    async def get_account_id(self, token: str) -> int:
        """Resolve the account id of the token's owner."""
        data = await self.execute(ACCOUNT_ID_QUERY, token)
        account_id = ((data.get("me") or {}).get("account") or {}).get("id")
        if account_id is None:
            raise UpstreamError(SERVICE_NAME, "Could not resolve account id")
        try:
            return int(account_id)
        except (TypeError, ValueError) as e:
            raise UpstreamError(SERVICE_NAME, f"Unexpected account id: {account_id!r}") from e

    async def get_column_text(self, token: str, item_id: int, column_id: str) -> Optional[str]:
        """Get the text of one column on one item, or None if it has none."""
        data = await self.execute(
            COLUMN_TEXT_QUERY,
            token,
            variables={"itemId": [item_id], "columnId": [column_id]},
        )
        items = data.get("items") or []
        if not items:
            return None
        column_values = items[0].get("column_values") or []
        if not column_values:
            return None
        return column_values[0].get("text")

    async def change_simple_column_value(
        self,
        token: str,
        board_id: int,
        item_id: int,
        column_id: str,
        value: str,
    ) -> Dict[str, Any]:
        """Write a plain value to a column."""
        return await self.execute(
            CHANGE_COLUMN_VALUE_MUTATION,
            token,
            variables={
                "boardId": board_id,
                "itemId": item_id,
                "columnId": column_id,
                "value": value,
            },
        )
