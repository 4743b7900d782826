"""Tests for AutomationService."""

import pytest

from automation_bridge.database.models import RuleType
from automation_bridge.database.repositories import AccountRepository, AutomationRuleRepository
from automation_bridge.exceptions import ClientInputError, UpstreamError
from automation_bridge.models.webhook_event import ExecuteActionPayload, WebhookEvent
from automation_bridge.services.automation_service import (
    AutomationService,
    ExecutionOutcome,
    transform_value,
)


def _execute_payload(webhook_id="555", in_fields=True, **overrides):
    fields = {"boardId": 10, "itemId": 20, "columnId": "text0"}
    payload = {"inboundFieldValues": fields}
    if in_fields:
        fields["webhookId"] = webhook_id
    else:
        payload["webhookId"] = webhook_id
    fields.update(overrides)
    return ExecuteActionPayload.model_validate(payload)


@pytest.fixture
def service(session, monday_client):
    return AutomationService(session, monday_client)


@pytest.fixture
async def rule(session):
    await AccountRepository(session).upsert(1001, "access-token-1")
    await AutomationRuleRepository(session).save("555", board_id=10, account_id=1001)
    await session.commit()


def test_transform_value():
    assert transform_value(RuleType.TO_UPPERCASE, "hello World") == "HELLO WORLD"
    assert transform_value(RuleType.TO_UPPERCASE, "") == ""


class TestExecuteAction:
    @pytest.mark.asyncio
    async def test_updated(self, service, monday_client, rule):
        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.UPDATED
        monday_client.change_simple_column_value.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unchanged(self, service, monday_client, rule):
        monday_client.get_column_text.return_value = "ALREADY 123"

        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.UNCHANGED
        monday_client.change_simple_column_value.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_string_is_unchanged(self, service, monday_client, rule):
        monday_client.get_column_text.return_value = ""

        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.UNCHANGED

    @pytest.mark.asyncio
    async def test_no_value(self, service, monday_client, rule):
        monday_client.get_column_text.return_value = None

        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.NO_VALUE

    @pytest.mark.asyncio
    async def test_rule_not_found(self, service, monday_client):
        outcome = await service.execute_action(_execute_payload(webhook_id="missing"))

        assert outcome == ExecutionOutcome.RULE_NOT_FOUND
        monday_client.get_column_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_account_not_found(self, service, session, monday_client):
        await AutomationRuleRepository(session).save("555", board_id=10, account_id=7)
        await session.commit()

        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.ACCOUNT_NOT_FOUND
        monday_client.get_column_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_failure_is_swallowed(self, service, monday_client, rule):
        monday_client.get_column_text.side_effect = UpstreamError("monday")

        outcome = await service.execute_action(_execute_payload())

        assert outcome == ExecutionOutcome.FAILED

    @pytest.mark.asyncio
    async def test_webhook_id_from_payload(self, service, monday_client, rule):
        outcome = await service.execute_action(_execute_payload(in_fields=False))

        assert outcome == ExecutionOutcome.UPDATED

    @pytest.mark.asyncio
    async def test_uses_rule_accounts_token(self, service, session, monday_client, rule):
        await AccountRepository(session).upsert(2002, "other-token")
        await session.commit()

        await service.execute_action(_execute_payload())

        assert monday_client.get_column_text.await_args.args[0] == "access-token-1"


class TestHandleEvent:
    @pytest.mark.asyncio
    async def test_subscribe_returns_webhook_id(self, service, session):
        event = WebhookEvent(
            type="subscribe",
            payload={"webhookId": 77, "boardId": 1, "accountId": 2, "inputFields": {}},
        )

        result = await service.handle_event(event)

        assert result == {"webhookId": "77"}
        rule = await AutomationRuleRepository(session).get_by_webhook_id("77")
        assert rule.rule_type == RuleType.TO_UPPERCASE

    @pytest.mark.asyncio
    async def test_unknown_type(self, service, monday_client):
        result = await service.handle_event(WebhookEvent(type="something_else"))

        assert result == {}
        monday_client.get_column_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_payload(self, service):
        event = WebhookEvent(type="unsubscribe", payload={})

        with pytest.raises(ClientInputError):
            await service.handle_event(event)

    @pytest.mark.asyncio
    async def test_execute_failure_returns_empty_body(self, service, monday_client, rule):
        monday_client.change_simple_column_value.side_effect = UpstreamError("monday")
        event = WebhookEvent(
            type="execute_action",
            payload={
                "inboundFieldValues": {
                    "webhookId": "555",
                    "boardId": 10,
                    "itemId": 20,
                    "columnId": "text0",
                }
            },
        )

        assert await service.handle_event(event) == {}
