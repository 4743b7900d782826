"""Automation lifecycle: subscribe, unsubscribe and execute_action events."""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from automation_bridge.clients.monday_client import MondayClient
from automation_bridge.database.models import RuleType
from automation_bridge.database.repositories import AccountRepository, AutomationRuleRepository
from automation_bridge.exceptions import ClientInputError, PersistenceError
from automation_bridge.models.webhook_event import (
    EventType,
    ExecuteActionPayload,
    SubscribePayload,
    UnsubscribePayload,
    WebhookEvent,
)

logger = logging.getLogger(__name__)


class ExecutionOutcome(str, Enum):
    """How an execute_action event ended."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    NO_VALUE = "no_value"
    RULE_NOT_FOUND = "rule_not_found"
    ACCOUNT_NOT_FOUND = "account_not_found"
    FAILED = "failed"


def transform_value(rule_type: RuleType, value: str) -> str:
    """Apply a rule's transform to a column value."""
    if rule_type == RuleType.TO_UPPERCASE:
        return value.upper()
    raise ValueError(f"Unsupported rule type: {rule_type}")


def _parse(model, payload: Dict[str, Any], event_type: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Malformed {event_type} payload: {e}")
        raise ClientInputError(
            f"Invalid {event_type} payload",
            details={"errors": e.errors(include_url=False)},
        ) from e


class AutomationService:
    """Applies webhook events to the rule store and the platform."""

    def __init__(self, session: AsyncSession, monday: MondayClient):
        self.session = session
        self.monday = monday
        self.accounts = AccountRepository(session)
        self.rules = AutomationRuleRepository(session)

    async def handle_event(self, event: WebhookEvent) -> Dict[str, Any]:
        """
        Dispatch an event by type and return the response body.

        Unknown event types are acknowledged without side effects.
        """
        if event.type == EventType.SUBSCRIBE:
            payload = _parse(SubscribePayload, event.payload, event.type)
            await self.subscribe(payload)
            return {"webhookId": payload.webhookId}

        if event.type == EventType.UNSUBSCRIBE:
            payload = _parse(UnsubscribePayload, event.payload, event.type)
            await self.unsubscribe(payload)
            return {}

        if event.type == EventType.EXECUTE_ACTION:
            payload = _parse(ExecuteActionPayload, event.payload, event.type)
            if not payload.resolved_webhook_id:
                raise ClientInputError("Invalid execute_action payload: missing webhookId")
            await self.execute_action(payload)
            return {}

        logger.info(f"Ignoring unhandled event type: {event.type}")
        return {}

    async def subscribe(self, payload: SubscribePayload) -> None:
        """Register the rule for a new automation subscription."""
        logger.info(
            f"SUBSCRIBE event: saving rule for webhook {payload.webhookId} "
            f"(board {payload.boardId}, account {payload.accountId})"
        )
        await self.rules.save(
            webhook_id=payload.webhookId,
            board_id=payload.boardId,
            account_id=payload.accountId,
            rule_type=RuleType.TO_UPPERCASE,
        )
        await self._commit()

    async def unsubscribe(self, payload: UnsubscribePayload) -> None:
        """Remove the rule for a cancelled subscription. Missing rules are fine."""
        deleted = await self.rules.delete_by_webhook_id(payload.webhookId)
        await self._commit()
        if deleted:
            logger.info(f"UNSUBSCRIBE event: removed rule for webhook {payload.webhookId}")
        else:
            logger.info(f"UNSUBSCRIBE event: no rule for webhook {payload.webhookId}")

    async def execute_action(self, payload: ExecuteActionPayload) -> ExecutionOutcome:
        """
        Transform a column value and write it back if it changed.

        Failures are logged and reported as ``ExecutionOutcome.FAILED``; they
        never propagate to the webhook response.
        """
        webhook_id = payload.resolved_webhook_id
        fields = payload.inboundFieldValues
        logger.info(f"EXECUTE event for webhook: {webhook_id}")

        try:
            outcome = await self._run_transform(
                webhook_id=webhook_id,
                board_id=fields.boardId,
                item_id=fields.itemId,
                column_id=fields.columnId,
            )
        except Exception as e:
            logger.error(f"Error executing action for webhook {webhook_id}: {e}", exc_info=True)
            outcome = ExecutionOutcome.FAILED

        logger.info(f"EXECUTE event for webhook {webhook_id} finished: {outcome.value}")
        return outcome

    async def _run_transform(
        self,
        webhook_id: Optional[str],
        board_id: int,
        item_id: int,
        column_id: str,
    ) -> ExecutionOutcome:
        rule = await self.rules.get_by_webhook_id(webhook_id)
        if rule is None:
            logger.warning(f"Rule not found for webhook: {webhook_id}")
            return ExecutionOutcome.RULE_NOT_FOUND

        account = await self.accounts.get_by_account_id(rule.account_id)
        if account is None:
            logger.warning(f"Account not found for ID: {rule.account_id}")
            return ExecutionOutcome.ACCOUNT_NOT_FOUND

        token = account.access_token
        original_text = await self.monday.get_column_text(token, item_id, column_id)
        if original_text is None:
            return ExecutionOutcome.NO_VALUE

        formatted_text = transform_value(rule.rule_type, original_text)
        if formatted_text == original_text:
            return ExecutionOutcome.UNCHANGED

        await self.monday.change_simple_column_value(
            token,
            board_id=board_id,
            item_id=item_id,
            column_id=column_id,
            value=formatted_text,
        )
        logger.info(f"Successfully updated item {item_id}.")
        return ExecutionOutcome.UPDATED

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Failed to commit rule change") from e
