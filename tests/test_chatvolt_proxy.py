"""Tests for the ChatVolt proxy endpoints (GET/POST /api/chatvolt)."""

import pytest

from master_agentes.domain.models.chatvolt import NewConversationData
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.domain.services.tenant_data_gateway import TenantDataGateway
from master_agentes.persistence.repositories.agent_repository import AgentRepository
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository


@pytest.fixture
async def tenant_with_credential(make_tenant, make_credential):
    tenant = await make_tenant("Loja")
    await make_credential(tenant)
    return tenant


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [{}, {"x-api-key": "cv-test-api-key-1234567890"}, {"x-org-id": "org-test-001"}],
)
async def test_missing_credential_headers_is_401(client, headers):
    response = await client.get("/api/chatvolt", params={"route": "status"}, headers=headers)

    assert response.status_code == 401
    body = response.json()
    assert body["error"] == "API Key e Organization ID são obrigatórios"
    assert "message" in body


@pytest.mark.asyncio
async def test_unknown_or_inactive_credential_is_403(
    client, db_session, tenant_with_credential, proxy_headers
):
    response = await client.get(
        "/api/chatvolt",
        params={"route": "agents"},
        headers={**proxy_headers, "x-api-key": "cv-wrong-key-000000"},
    )
    assert response.status_code == 403
    assert response.json()["error"] == "Configuração não encontrada ou inativa"
    assert "agentes" not in response.json()

    await CredentialService(db_session).set_active(tenant_with_credential.id, False)
    response = await client.post(
        "/api/chatvolt",
        json={"type": "new_contact", "data": {"name": "Ana"}},
        headers=proxy_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_route_lists_available_routes(client, tenant_with_credential, proxy_headers):
    for params in ({"route": "invoices"}, {}):
        response = await client.get("/api/chatvolt", params=params, headers=proxy_headers)

        assert response.status_code == 404
        assert response.json()["available_routes"] == [
            "products", "agents", "contacts", "conversations", "status"
        ]


@pytest.mark.asyncio
async def test_products_route_envelope(client, db_session, tenant_with_credential, proxy_headers):
    await AgentRepository(db_session).create(
        tenant_with_credential.id,
        name="Bot de Vendas",
        kind="sales",
        status="inactive",
        configuration={},
        statistics={},
    )

    response = await client.get("/api/chatvolt", params={"route": "products"}, headers=proxy_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total"] == 1
    assert body["timestamp"].endswith("Z")
    product = body["produtos"][0]
    assert product["nome"] == "Bot de Vendas"
    assert product["preco"] == 0
    assert product["disponivel"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "selector, key",
    [
        ("agents", "agentes"),
        ("agentes", "agentes"),
        ("contacts", "contatos"),
        ("conversations", "conversas"),
    ],
)
async def test_list_routes_envelope(client, tenant_with_credential, proxy_headers, selector, key):
    response = await client.get("/api/chatvolt", params={"route": selector}, headers=proxy_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total"] == 0
    assert body[key] == []


@pytest.mark.asyncio
async def test_legacy_rota_parameter(client, tenant_with_credential, proxy_headers):
    response = await client.get("/api/chatvolt", params={"rota": "produtos"}, headers=proxy_headers)

    assert response.status_code == 200
    assert response.json()["produtos"] == []


@pytest.mark.asyncio
async def test_status_route(client, db_session, tenant_with_credential, proxy_headers):
    await TenantDataGateway(db_session).create_conversation(
        tenant_with_credential.id, NewConversationData(external_id="c1")
    )

    response = await client.get("/api/chatvolt", params={"route": "status"}, headers=proxy_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "online"
    assert body["versao_api"] == "1.0.0"
    assert body["estatisticas"]["conversas"] == {"total": 1, "ativas": 1, "encerradas": 0}
    assert body["estatisticas"]["agentes"] == {"total": 0, "ativos": 0, "inativos": 0}


@pytest.mark.asyncio
async def test_read_failure_returns_resource_message(
    client, tenant_with_credential, proxy_headers, monkeypatch
):
    async def broken(self, tenant_id):
        raise RuntimeError("database went away")

    monkeypatch.setattr(TenantDataGateway, "list_contacts", broken)

    response = await client.get("/api/chatvolt", params={"route": "contacts"}, headers=proxy_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Erro ao buscar contatos"}


@pytest.mark.asyncio
async def test_new_conversation_command(client, db_session, tenant_with_credential, proxy_headers):
    response = await client.post(
        "/api/chatvolt",
        json={
            "tipo": "nova_conversa",
            "dados": {
                "cliente_nome": "Maria",
                "telefone": "+5511988887777",
                "chatvolt_id": "cv-1",
                "mensagens": [{"texto": "Olá", "remetente": "user"}],
            },
        },
        headers=proxy_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Conversa criada com sucesso"

    conversation = await ConversationRepository(db_session).get_by_id(
        tenant_with_credential.id, body["conversa_id"]
    )
    assert conversation.client_name == "Maria"
    assert conversation.origin == "chatvolt"
    assert conversation.external_id == "cv-1"
    assert conversation.messages[0]["text"] == "Olá"


@pytest.mark.asyncio
async def test_new_conversation_with_foreign_agent_is_404(
    client, db_session, make_tenant, tenant_with_credential, proxy_headers
):
    other = await make_tenant()
    agent = await AgentRepository(db_session).create(
        other.id, name="Alheio", kind="support", configuration={}, statistics={}
    )

    response = await client.post(
        "/api/chatvolt",
        json={"type": "new_conversation", "data": {"agent_id": agent.id}},
        headers=proxy_headers,
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Agente não encontrado"


@pytest.mark.asyncio
async def test_update_conversation_command(client, db_session, tenant_with_credential, proxy_headers):
    conversation = await TenantDataGateway(db_session).create_conversation(
        tenant_with_credential.id, NewConversationData()
    )

    response = await client.post(
        "/api/chatvolt",
        json={"type": "update_conversation", "data": {"conversa_id": conversation.id, "status": "ended"}},
        headers=proxy_headers,
    )

    assert response.status_code == 200
    assert response.json()["conversa_id"] == conversation.id

    missing = await client.post(
        "/api/chatvolt",
        json={"type": "update_conversation", "data": {"conversation_id": 999999}},
        headers=proxy_headers,
    )
    assert missing.status_code == 404
    assert missing.json()["error"] == "Conversa não encontrada"


@pytest.mark.asyncio
async def test_new_contact_command(client, tenant_with_credential, proxy_headers):
    response = await client.post(
        "/api/chatvolt",
        json={"type": "new_contact", "data": {"nome": "João", "tags": ["vip"]}},
        headers=proxy_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Contato criado com sucesso"
    assert isinstance(body["contato_id"], int)


@pytest.mark.asyncio
async def test_unknown_command_is_400(client, tenant_with_credential, proxy_headers):
    response = await client.post(
        "/api/chatvolt", json={"type": "delete_everything", "data": {}}, headers=proxy_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Tipo de operação não suportado"


@pytest.mark.asyncio
async def test_malformed_command_data_is_400_with_details(
    client, tenant_with_credential, proxy_headers
):
    response = await client.post(
        "/api/chatvolt",
        json={"type": "update_conversation", "data": {"conversa_id": "not-a-number"}},
        headers=proxy_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Dados inválidos"
    assert body["details"][0]["type"] == "int_parsing"


@pytest.mark.asyncio
async def test_non_json_body_is_400(client, tenant_with_credential, proxy_headers):
    response = await client.post(
        "/api/chatvolt",
        content=b"not json",
        headers={**proxy_headers, "content-type": "application/json"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_credential_lookup_failure_is_json_500(
    server_error_client, tenant_with_credential, proxy_headers, monkeypatch
):
    async def broken(self, api_key, org_id):
        raise RuntimeError("database went away")

    monkeypatch.setattr(CredentialService, "resolve", broken)

    response = await server_error_client.get(
        "/api/chatvolt", params={"route": "status"}, headers=proxy_headers
    )

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Erro interno do servidor"}
