"""ChatVolt credential repository."""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential
from master_agentes.persistence.repositories.base import BaseRepository


class ChatVoltCredentialRepository(BaseRepository[ChatVoltCredential]):
    """Repository for ChatVoltCredential entities."""

    def __init__(self, session: AsyncSession):
        """Initialize credential repository."""
        super().__init__(ChatVoltCredential, session)

    async def get_active_by_key_and_org(
        self, api_key: str, org_id: str
    ) -> ChatVoltCredential | None:
        """Get the active credential for an API key / org id pair.

        The pair is not unique across tenants; the oldest record wins.
        """
        stmt = (
            select(ChatVoltCredential)
            .where(
                ChatVoltCredential.api_key == api_key,
                ChatVoltCredential.org_id == org_id,
                ChatVoltCredential.is_active.is_(True),
            )
            .order_by(ChatVoltCredential.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_by_org(self, org_id: str) -> ChatVoltCredential | None:
        """Get the active credential for an org id (oldest record wins)."""
        stmt = (
            select(ChatVoltCredential)
            .where(
                ChatVoltCredential.org_id == org_id,
                ChatVoltCredential.is_active.is_(True),
            )
            .order_by(ChatVoltCredential.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_tenant(self, tenant_id: int) -> ChatVoltCredential | None:
        """Get the tenant's credential regardless of its active flag."""
        stmt = select(ChatVoltCredential).where(ChatVoltCredential.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_active(self, tenant_id: int, is_active: bool) -> int:
        """Toggle the active flag.

        Returns:
            Number of rows updated
        """
        stmt = (
            update(ChatVoltCredential)
            .where(ChatVoltCredential.tenant_id == tenant_id)
            .values(is_active=is_active, updated_at=datetime.utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def delete_by_tenant(self, tenant_id: int) -> int:
        """Delete the tenant's credential.

        Returns:
            Number of rows deleted
        """
        stmt = delete(ChatVoltCredential).where(ChatVoltCredential.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount
