"""Credential store for the ChatVolt bridge."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential
from master_agentes.persistence.repositories.chatvolt_credential_repository import (
    ChatVoltCredentialRepository,
)

logger = logging.getLogger(__name__)


class CredentialService:
    """Resolves bridge callers to tenants and manages each tenant's credential."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize credential service."""
        self.session = session
        self.credential_repo = ChatVoltCredentialRepository(session)

    async def resolve(self, api_key: str, org_id: str) -> ChatVoltCredential | None:
        """Resolve an API key / org id pair to an active credential.

        A wrong key and a deactivated credential are indistinguishable here.

        Args:
            api_key: Value of the ``x-api-key`` header
            org_id: Value of the ``x-org-id`` header

        Returns:
            Active credential or None
        """
        return await self.credential_repo.get_active_by_key_and_org(api_key, org_id)

    async def resolve_by_org(self, org_id: str) -> ChatVoltCredential | None:
        """Resolve an org id alone to an active credential (webhook path)."""
        return await self.credential_repo.get_active_by_org(org_id)

    async def get_for_tenant(self, tenant_id: int) -> ChatVoltCredential | None:
        return await self.credential_repo.get_by_tenant(tenant_id)

    async def upsert(
        self,
        tenant_id: int,
        api_key: str,
        org_id: str,
        webhook_secret: str | None = None,
    ) -> ChatVoltCredential:
        """Create or replace the tenant's credential and activate it.

        Args:
            tenant_id: Tenant ID
            api_key: ChatVolt API key
            org_id: ChatVolt organization ID
            webhook_secret: Optional shared secret for webhook signatures

        Returns:
            The stored credential
        """
        credential = await self.credential_repo.get_by_tenant(tenant_id)
        if credential is None:
            credential = await self.credential_repo.create(
                tenant_id,
                api_key=api_key,
                org_id=org_id,
                webhook_secret=webhook_secret,
                is_active=True,
            )
            logger.info("ChatVolt credential created", extra={"credential_id": credential.id})
            return credential

        credential = await self.credential_repo.update(
            tenant_id,
            credential.id,
            api_key=api_key,
            org_id=org_id,
            webhook_secret=webhook_secret,
            is_active=True,
        )
        logger.info("ChatVolt credential replaced", extra={"credential_id": credential.id})
        return credential

    async def set_active(self, tenant_id: int, is_active: bool) -> int:
        """Activate or deactivate the tenant's credential.

        Returns:
            Number of credentials updated
        """
        return await self.credential_repo.set_active(tenant_id, is_active)

    async def delete(self, tenant_id: int) -> int:
        """Remove the tenant's credential.

        Returns:
            Number of credentials deleted
        """
        return await self.credential_repo.delete_by_tenant(tenant_id)
