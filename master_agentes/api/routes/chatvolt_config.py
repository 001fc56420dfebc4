"""Tenant-facing management of the ChatVolt credential."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.api.deps import require_tenant_context
from master_agentes.api.schemas.chatvolt import (
    ChatVoltConfigRequest,
    ChatVoltConfigResponse,
    ChatVoltConfigToggle,
    IntegrationUrls,
)
from master_agentes.core.errors import CredentialNotFoundError
from master_agentes.core.signatures import mask_api_key
from master_agentes.domain.models.chatvolt import ProxyRoute
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.persistence.database import get_db
from master_agentes.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def integration_urls() -> IntegrationUrls:
    """URLs the tenant pastes into the ChatVolt dashboard."""
    base_url = settings.public_base_url.rstrip("/")
    return IntegrationUrls(
        api_endpoint=f"{base_url}{settings.api_prefix}/chatvolt",
        webhook_url=f"{base_url}{settings.api_prefix}/chatvolt/webhook",
        documentation=f"{base_url}{settings.api_prefix}/docs/chatvolt-integration",
    )


@router.get("/config")
async def get_chatvolt_config(
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Get the tenant's ChatVolt credential with the API key masked."""
    credential = await CredentialService(db).get_for_tenant(tenant_id)
    if credential is None:
        return {
            "configured": False,
            "message": "Configuração do ChatVolt não encontrada",
        }

    config = ChatVoltConfigResponse(
        id=credential.id,
        api_key=mask_api_key(credential.api_key),
        org_id=credential.org_id,
        webhook_secret_configured=bool(credential.webhook_secret),
        is_active=credential.is_active,
        created_at=credential.created_at,
        updated_at=credential.updated_at,
    )
    return {"configured": True, "config": config.model_dump(mode="json")}


@router.post("/config")
async def save_chatvolt_config(
    payload: ChatVoltConfigRequest,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Create or replace the tenant's ChatVolt credential and activate it."""
    credential = await CredentialService(db).upsert(
        tenant_id,
        api_key=payload.api_key,
        org_id=payload.org_id,
        webhook_secret=payload.webhook_secret,
    )

    urls = integration_urls()
    return {
        "success": True,
        "message": "Configuração salva com sucesso",
        "config_id": credential.id,
        "integration_urls": urls.model_dump(),
        "instructions": {
            "api_usage": "Use os headers x-api-key e x-org-id para autenticação",
            "webhook_setup": "Configure o webhook_url no seu painel do ChatVolt",
            "available_routes": [
                f"GET {settings.api_prefix}/chatvolt?route={route.value}" for route in ProxyRoute
            ],
        },
    }


@router.put("/config")
async def toggle_chatvolt_config(
    payload: ChatVoltConfigToggle,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Activate or deactivate the tenant's credential."""
    updated = await CredentialService(db).set_active(tenant_id, payload.is_active)
    if updated == 0:
        raise CredentialNotFoundError()

    logger.info("ChatVolt credential toggled", extra={"is_active": payload.is_active})
    return {
        "success": True,
        "message": f"Configuração {'ativada' if payload.is_active else 'desativada'} com sucesso",
    }


@router.delete("/config")
async def delete_chatvolt_config(
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Remove the tenant's credential; ChatVolt calls are refused afterwards."""
    deleted = await CredentialService(db).delete(tenant_id)
    if deleted == 0:
        raise CredentialNotFoundError()

    logger.info("ChatVolt credential removed")
    return {"success": True, "message": "Configuração removida com sucesso"}
