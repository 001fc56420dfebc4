"""Tests for tenant isolation."""

import json
import logging

import pytest

from master_agentes.core.tenant_context import set_tenant_context
from master_agentes.domain.models.chatvolt import ContactData, NewContactData, NewConversationData
from master_agentes.domain.services.tenant_data_gateway import TenantDataGateway
from master_agentes.logging_config import ContextFilter, JSONFormatter
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository


@pytest.mark.asyncio
async def test_tenant_isolation_in_queries(db_session, make_tenant):
    """Test that queries are properly isolated by tenant_id."""
    tenant1 = await make_tenant("Tenant 1")
    tenant2 = await make_tenant("Tenant 2")
    gateway = TenantDataGateway(db_session)

    # Same ChatVolt conversation id under two tenants
    conv1 = await gateway.create_conversation(tenant1.id, NewConversationData(external_id="c1"))
    conv2 = await gateway.create_conversation(tenant2.id, NewConversationData(external_id="c1"))
    assert conv1.id != conv2.id

    conv_repo = ConversationRepository(db_session)
    tenant1_convs = await conv_repo.list(tenant1.id)
    assert [conv.id for conv in tenant1_convs] == [conv1.id]

    tenant2_convs = await conv_repo.list(tenant2.id)
    assert [conv.id for conv in tenant2_convs] == [conv2.id]

    # Verify tenant1 cannot access tenant2's conversation
    assert await conv_repo.get_by_id(tenant1.id, conv2.id) is None

    # Ending the conversation for one tenant leaves the other untouched
    await gateway.end_conversations(tenant1.id, "c1")
    assert (await gateway.get_status(tenant2.id)).conversations.active == 1


@pytest.mark.asyncio
async def test_contact_merge_never_crosses_tenants(db_session, make_tenant):
    tenant1 = await make_tenant()
    tenant2 = await make_tenant()
    gateway = TenantDataGateway(db_session)

    first = await gateway.upsert_contact_by_identity(tenant1.id, ContactData(email="a@x.com", name="A"))
    second = await gateway.upsert_contact_by_identity(tenant2.id, ContactData(email="a@x.com", name="B"))

    assert first.id != second.id
    assert first.name == "A"


@pytest.mark.asyncio
async def test_proxy_reads_only_resolved_tenant(
    client, make_tenant, make_credential, proxy_headers, db_session
):
    mine = await make_tenant()
    other = await make_tenant()
    await make_credential(mine)
    await make_credential(other, api_key="cv-other-api-key-0000", org_id="org-other-002")
    gateway = TenantDataGateway(db_session)
    await gateway.create_contact(other.id, NewContactData(name="Alheio"))

    response = await client.get("/api/chatvolt", params={"route": "contacts"}, headers=proxy_headers)

    assert response.status_code == 200
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"
    generated = await client.get("/health")
    assert generated.headers["X-Request-Id"]


def test_json_log_lines_carry_context_and_extra_fields():
    set_tenant_context(42)
    record = logging.LogRecord(
        "master_agentes.test", logging.INFO, __file__, 1, "Webhook processed", None, None
    )
    record.event_type = "message.received"

    ContextFilter().filter(record)
    line = json.loads(JSONFormatter().format(record))
    set_tenant_context(None)

    assert line["message"] == "Webhook processed"
    assert line["severity"] == "INFO"
    assert line["tenant_id"] == 42
    assert line["event_type"] == "message.received"
    assert "request_id" not in line
