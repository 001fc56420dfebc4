"""ChatVolt proxy endpoints: ChatVolt reads and writes tenant data with an API key."""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.api.deps import get_chatvolt_credential
from master_agentes.api.schemas.chatvolt import ProxyCommandRequest
from master_agentes.core.errors import MasterAgentesError, ValidationFailedError, validation_details
from master_agentes.domain.models.chatvolt import (
    NewContactData,
    NewConversationData,
    ProxyCommand,
    ProxyRoute,
    UpdateConversationData,
    require_exhaustive,
)
from master_agentes.domain.services.tenant_data_gateway import TenantDataGateway
from master_agentes.persistence.database import get_db
from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential
from master_agentes.settings import settings
from master_agentes.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

ReadHandler = Callable[[TenantDataGateway, int], Awaitable[dict[str, Any]]]
WriteHandler = Callable[[TenantDataGateway, int, dict], Awaitable[dict[str, Any]]]


def _error(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


# ============== Read routes ==============

def _listing(key: str, items: list) -> dict[str, Any]:
    return {
        "success": True,
        "total": len(items),
        key: [item.to_wire() for item in items],
        "timestamp": utc_now_iso(),
    }


async def _read_products(gateway: TenantDataGateway, tenant_id: int) -> dict[str, Any]:
    return _listing("produtos", await gateway.list_agents_as_products(tenant_id))


async def _read_agents(gateway: TenantDataGateway, tenant_id: int) -> dict[str, Any]:
    return _listing("agentes", await gateway.list_agents(tenant_id))


async def _read_contacts(gateway: TenantDataGateway, tenant_id: int) -> dict[str, Any]:
    return _listing("contatos", await gateway.list_contacts(tenant_id))


async def _read_conversations(gateway: TenantDataGateway, tenant_id: int) -> dict[str, Any]:
    return _listing("conversas", await gateway.list_conversations(tenant_id))


async def _read_status(gateway: TenantDataGateway, tenant_id: int) -> dict[str, Any]:
    summary = await gateway.get_status(tenant_id)
    return {
        "success": True,
        "status": "online",
        "estatisticas": summary.to_wire(),
        "timestamp": utc_now_iso(),
        "versao_api": settings.api_version,
    }


READ_HANDLERS: dict[ProxyRoute, tuple[ReadHandler, str]] = {
    ProxyRoute.PRODUCTS: (_read_products, "Erro ao buscar produtos"),
    ProxyRoute.AGENTS: (_read_agents, "Erro ao buscar agentes"),
    ProxyRoute.CONTACTS: (_read_contacts, "Erro ao buscar contatos"),
    ProxyRoute.CONVERSATIONS: (_read_conversations, "Erro ao buscar conversas"),
    ProxyRoute.STATUS: (_read_status, "Erro ao buscar status"),
}
require_exhaustive(READ_HANDLERS, ProxyRoute)


# ============== Write commands ==============

async def _new_conversation(
    gateway: TenantDataGateway, tenant_id: int, raw: dict
) -> dict[str, Any]:
    conversation = await gateway.create_conversation(
        tenant_id, NewConversationData.model_validate(raw)
    )
    return {
        "success": True,
        "conversa_id": conversation.id,
        "message": "Conversa criada com sucesso",
    }


async def _update_conversation(
    gateway: TenantDataGateway, tenant_id: int, raw: dict
) -> dict[str, Any]:
    conversation = await gateway.update_conversation(
        tenant_id, UpdateConversationData.model_validate(raw)
    )
    return {
        "success": True,
        "conversa_id": conversation.id,
        "message": "Conversa atualizada com sucesso",
    }


async def _new_contact(gateway: TenantDataGateway, tenant_id: int, raw: dict) -> dict[str, Any]:
    contact = await gateway.create_contact(tenant_id, NewContactData.model_validate(raw))
    return {
        "success": True,
        "contato_id": contact.id,
        "message": "Contato criado com sucesso",
    }


WRITE_HANDLERS: dict[ProxyCommand, tuple[WriteHandler, str]] = {
    ProxyCommand.NEW_CONVERSATION: (_new_conversation, "Erro ao criar conversa"),
    ProxyCommand.UPDATE_CONVERSATION: (_update_conversation, "Erro ao atualizar conversa"),
    ProxyCommand.NEW_CONTACT: (_new_contact, "Erro ao criar contato"),
}
require_exhaustive(WRITE_HANDLERS, ProxyCommand)


# ============== Endpoints ==============

@router.get("")
async def chatvolt_read(
    credential: Annotated[ChatVoltCredential, Depends(get_chatvolt_credential)],
    db: Annotated[AsyncSession, Depends(get_db)],
    route: Annotated[str | None, Query()] = None,
    rota: Annotated[str | None, Query(include_in_schema=False)] = None,
) -> JSONResponse:
    """Serve one read route to ChatVolt.

    Headers ``x-api-key`` and ``x-org-id`` identify the tenant. ``route`` is one
    of products, agents, contacts, conversations, status (``rota`` and the
    Portuguese names are accepted too).
    """
    selected = ProxyRoute.parse(route or rota)
    if selected is None:
        available = [choice.value for choice in ProxyRoute]
        return _error(
            status.HTTP_404_NOT_FOUND,
            {
                "error": "Rota não encontrada",
                "message": "Rotas disponíveis: " + ", ".join(available),
                "available_routes": available,
            },
        )

    handler, failure_message = READ_HANDLERS[selected]
    try:
        body = await handler(TenantDataGateway(db), credential.tenant_id)
    except Exception:
        logger.exception(
            "ChatVolt read failed",
            extra={"route": selected.value, "credential_id": credential.id},
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": failure_message})
    return JSONResponse(content=body)


@router.post("")
async def chatvolt_write(
    request: Request,
    credential: Annotated[ChatVoltCredential, Depends(get_chatvolt_credential)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JSONResponse:
    """Apply one write command sent by ChatVolt.

    Body: ``{"type": "new_conversation" | "update_conversation" | "new_contact",
    "data": {...}}``.
    """
    try:
        payload = ProxyCommandRequest.model_validate(json.loads(await request.body()))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationFailedError("Corpo da requisição não é JSON válido") from e
    except ValidationError as e:
        raise ValidationFailedError(details=validation_details(e)) from e

    command = ProxyCommand.parse(payload.type)
    if command is None:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            {
                "error": "Tipo de operação não suportado",
                "available_types": [choice.value for choice in ProxyCommand],
            },
        )

    handler, failure_message = WRITE_HANDLERS[command]
    # A rolled-back insert expires loaded rows, so keep plain values
    tenant_id, credential_id = credential.tenant_id, credential.id
    try:
        body = await handler(TenantDataGateway(db), tenant_id, payload.data)
    except ValidationError as e:
        raise ValidationFailedError(details=validation_details(e)) from e
    except MasterAgentesError:
        raise
    except Exception:
        logger.exception(
            "ChatVolt write failed",
            extra={"command": command.value, "credential_id": credential_id},
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": failure_message})

    logger.info("ChatVolt write applied", extra={"command": command.value})
    return JSONResponse(content=body)
