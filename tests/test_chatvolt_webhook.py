"""Tests for the ChatVolt webhook (POST/GET /api/chatvolt/webhook)."""

import json

import pytest

from master_agentes.core.signatures import compute_signature
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.domain.services.webhook_service import WebhookService
from master_agentes.persistence.repositories.contact_repository import ContactRepository
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository

ORG_ID = "org-test-001"


def _body(event_type: str, data: dict) -> bytes:
    return json.dumps({"type": event_type, "data": data}).encode()


async def _post(client, body: bytes, org_id: str | None = ORG_ID, signature: str | None = None):
    headers = {"content-type": "application/json"}
    if org_id is not None:
        headers["x-org-id"] = org_id
    if signature is not None:
        headers["x-chatvolt-signature"] = signature
    return await client.post("/api/chatvolt/webhook", content=body, headers=headers)


@pytest.fixture
async def tenant(make_tenant, make_credential):
    tenant = await make_tenant("Loja")
    await make_credential(tenant)
    return tenant


@pytest.fixture
async def signed_tenant(make_tenant, make_credential):
    tenant = await make_tenant("Loja Assinada")
    await make_credential(tenant, webhook_secret="s")
    return tenant


@pytest.mark.asyncio
async def test_liveness_check(client):
    response = await client.get("/api/chatvolt/webhook")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "online"
    assert body["message"] == "Webhook ChatVolt funcionando"
    assert body["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_missing_org_id_is_401(client, tenant):
    response = await _post(client, _body("conversation.ended", {"conversation_id": "c1"}), org_id=None)

    assert response.status_code == 401
    assert response.json()["error"] == "Organization ID é obrigatório"


@pytest.mark.asyncio
async def test_unknown_org_id_is_403(client, tenant):
    response = await _post(
        client, _body("conversation.ended", {"conversation_id": "c1"}), org_id="org-unknown"
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_message_received_creates_single_conversation(client, db_session, tenant):
    body = _body(
        "message.received",
        {"conversation_id": "c1", "message_text": "hi", "sender_type": "user"},
    )

    response = await _post(client, body)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Mensagem processada com sucesso"}

    conversations = await ConversationRepository(db_session).list(tenant.id)
    assert len(conversations) == 1
    conversation = conversations[0]
    assert conversation.external_id == "c1"
    assert conversation.client_name == "Cliente ChatVolt"
    assert len(conversation.messages) == 1
    assert conversation.messages[0]["text"] == "hi"
    assert conversation.messages[0]["sender"] == "user"
    assert conversation.messages[0]["kind"] == "text"


@pytest.mark.asyncio
async def test_message_received_appends_to_existing_conversation(client, db_session, tenant):
    for text in ("primeira", "segunda"):
        response = await _post(
            client,
            _body(
                "message.received",
                {
                    "conversation_id": "c1",
                    "message_id": f"m-{text}",
                    "message_text": text,
                    "contact": {"name": "Maria"},
                },
            ),
        )
        assert response.status_code == 200

    conversation = await ConversationRepository(db_session).get_by_external_id(tenant.id, "c1")
    assert conversation.client_name == "Maria"
    assert [message["text"] for message in conversation.messages] == ["primeira", "segunda"]


@pytest.mark.asyncio
async def test_conversation_started_is_idempotent(client, db_session, tenant):
    body = _body(
        "conversation.started",
        {
            "conversation_id": "conv_456",
            "contact": {"name": "João Silva", "phone": "+5511999999999", "email": "joao@email.com"},
        },
    )

    first = await _post(client, body)
    second = await _post(client, body)

    assert first.status_code == 200
    assert first.json()["message"] == "Conversa criada com sucesso"
    assert isinstance(first.json()["conversa_id"], int)
    assert second.status_code == 200
    assert second.json() == {"success": True, "message": "Conversa já existe"}

    assert len(await ConversationRepository(db_session).list(tenant.id)) == 1
    contacts = await ContactRepository(db_session).list(tenant.id)
    assert len(contacts) == 1
    assert contacts[0].email == "joao@email.com"
    assert contacts[0].origin == "chatvolt"


@pytest.mark.asyncio
async def test_conversation_ended_updates_status(client, db_session, tenant):
    await _post(client, _body("conversation.started", {"conversation_id": "c1"}))

    response = await _post(client, _body("conversation.ended", {"conversation_id": "c1"}))
    unknown = await _post(client, _body("conversation.ended", {"conversation_id": "nope"}))

    assert response.status_code == 200
    assert response.json()["message"] == "Conversa encerrada com sucesso"
    assert unknown.status_code == 200
    conversation = await ConversationRepository(db_session).get_by_external_id(tenant.id, "c1")
    assert conversation.status == "ended"


@pytest.mark.asyncio
async def test_contact_created_merges_by_identity(client, db_session, tenant):
    await _post(client, _body("contact.created", {"email": "a@x.com", "name": "A"}))
    response = await _post(
        client, _body("contact.created", {"email": "a@x.com", "name": "B", "tags": ["vip"]})
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Contato processado com sucesso"
    contacts = await ContactRepository(db_session).list(tenant.id)
    assert len(contacts) == 1
    assert contacts[0].name == "B"
    assert contacts[0].tags == ["vip"]


@pytest.mark.asyncio
async def test_unknown_event_is_acknowledged(client, db_session, tenant):
    response = await _post(client, _body("bot.trained", {"anything": True}))

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Evento recebido"}


@pytest.mark.asyncio
async def test_invalid_json_is_400(client, tenant):
    response = await _post(client, b"{not json")

    assert response.status_code == 400
    assert response.json()["error"] == "Dados inválidos"


@pytest.mark.asyncio
async def test_event_missing_conversation_id_is_400(client, tenant):
    response = await _post(client, _body("message.received", {"message_text": "hi"}))

    assert response.status_code == 400
    assert response.json()["details"]


@pytest.mark.asyncio
async def test_valid_signature_is_accepted(client, db_session, signed_tenant):
    body = _body("conversation.started", {"conversation_id": "c1"})

    response = await _post(client, body, signature=compute_signature("s", body))

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_mutated_body_with_same_signature_is_401(client, db_session, signed_tenant):
    body = _body("conversation.started", {"conversation_id": "c1"})
    signature = compute_signature("s", body)
    mutated = body.replace(b"c1", b"c2")

    response = await _post(client, mutated, signature=signature)

    assert response.status_code == 401
    assert response.json()["error"] == "Assinatura inválida"
    assert await ConversationRepository(db_session).list(signed_tenant.id) == []


@pytest.mark.asyncio
async def test_unsigned_delivery_is_accepted_when_secret_configured(client, signed_tenant):
    response = await _post(client, _body("conversation.started", {"conversation_id": "c1"}))

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_handler_failure_returns_event_message(client, tenant, monkeypatch):
    async def broken(self, tenant_id, raw):
        raise RuntimeError("boom")

    monkeypatch.setattr(WebhookService, "_handle_conversation_ended", broken)

    response = await _post(client, _body("conversation.ended", {"conversation_id": "c1"}))

    assert response.status_code == 500
    assert response.json() == {"error": "Erro ao encerrar conversa"}


@pytest.mark.asyncio
async def test_inactive_credential_is_403(client, db_session, tenant):
    await CredentialService(db_session).set_active(tenant.id, False)

    response = await _post(client, _body("conversation.ended", {"conversation_id": "c1"}))

    assert response.status_code == 403
    assert response.json()["error"] == "Configuração não encontrada ou inativa"


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [None, [], "texto"])
async def test_unknown_event_with_any_data_is_acknowledged(client, tenant, data):
    body = json.dumps({"type": "bot.typing", "data": data}).encode()

    response = await _post(client, body)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Evento recebido"}


@pytest.mark.asyncio
async def test_known_event_with_null_data_is_400(client, tenant):
    body = json.dumps({"type": "contact.created", "data": None}).encode()

    response = await _post(client, body)

    assert response.status_code == 400
    assert response.json()["error"] == "Dados inválidos"


@pytest.mark.asyncio
async def test_org_lookup_failure_is_json_500(server_error_client, tenant, monkeypatch):
    async def broken(self, org_id):
        raise RuntimeError("database went away")

    monkeypatch.setattr(CredentialService, "resolve_by_org", broken)

    response = await _post(
        server_error_client, _body("conversation.ended", {"conversation_id": "c1"})
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Erro interno do servidor"}
