"""ChatVolt webhook endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.errors import MasterAgentesError
from master_agentes.domain.models.chatvolt import WebhookEventType
from master_agentes.domain.services.webhook_service import EVENT_FAILURE_MESSAGES, WebhookService
from master_agentes.persistence.database import get_db
from master_agentes.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook")
async def chatvolt_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    x_org_id: Annotated[str | None, Header(alias="x-org-id")] = None,
    x_chatvolt_signature: Annotated[str | None, Header(alias="x-chatvolt-signature")] = None,
) -> JSONResponse:
    """Receive an event pushed by ChatVolt.

    Request body schema:
    {
        "type": "message.received" | "conversation.started"
                | "conversation.ended" | "contact.created",
        "data": { ... event fields ... }
    }

    Headers:
    - x-org-id: ChatVolt organization ID (required)
    - x-chatvolt-signature: ``sha256=<hex HMAC of the raw body>`` (optional)
    """
    body = await request.body()
    service = WebhookService(db)

    credential = await service.authenticate(x_org_id, x_chatvolt_signature, body)
    envelope = service.parse_envelope(body)
    # A rolled-back insert expires loaded rows, so keep plain values
    tenant_id, credential_id = credential.tenant_id, credential.id

    try:
        outcome = await service.handle(tenant_id, envelope)
    except MasterAgentesError:
        raise
    except Exception:
        event_type = WebhookEventType.parse(envelope.type)
        logger.exception(
            "ChatVolt webhook handler failed",
            extra={"event_type": envelope.type, "credential_id": credential_id},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": EVENT_FAILURE_MESSAGES.get(event_type, "Erro interno do servidor")},
        )

    logger.info(
        "ChatVolt webhook processed",
        extra={"event_type": envelope.type, "credential_id": credential_id},
    )
    return JSONResponse(content=outcome.to_body())


@router.get("/webhook")
async def chatvolt_webhook_status() -> dict:
    """Liveness probe ChatVolt calls when the webhook URL is registered."""
    return {
        "status": "online",
        "message": "Webhook ChatVolt funcionando",
        "timestamp": utc_now_iso(),
    }
