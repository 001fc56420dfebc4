"""Conversation repository."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from master_agentes.persistence.models.conversation import Conversation
from master_agentes.persistence.repositories.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for Conversation entities."""

    def __init__(self, session: AsyncSession):
        """Initialize conversation repository."""
        super().__init__(Conversation, session)

    async def get_by_external_id(
        self, tenant_id: int, external_id: str
    ) -> Conversation | None:
        """Get conversation by external_id (for idempotency)."""
        stmt = select(Conversation).where(
            Conversation.tenant_id == tenant_id,
            Conversation.external_id == external_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_agents(
        self, tenant_id: int, limit: int = 50
    ) -> list[Conversation]:
        """List newest conversations with their agent eagerly loaded.

        Args:
            tenant_id: Tenant ID
            limit: Maximum number of records to return

        Returns:
            List of conversations
        """
        stmt = (
            select(Conversation)
            .options(selectinload(Conversation.agent))
            .where(Conversation.tenant_id == tenant_id)
            .order_by(Conversation.created_at.desc(), Conversation.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_recently_updated(
        self, tenant_id: int, limit: int = 10
    ) -> list[Conversation]:
        """List the most recently touched conversations with their agent loaded."""
        stmt = (
            select(Conversation)
            .options(selectinload(Conversation.agent))
            .where(Conversation.tenant_id == tenant_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_status_by_external_id(
        self, tenant_id: int, external_id: str, status: str
    ) -> int:
        """Bulk-update the status of every conversation with an external id.

        Returns:
            Number of rows updated (zero is not an error)
        """
        stmt = (
            update(Conversation)
            .where(
                Conversation.tenant_id == tenant_id,
                Conversation.external_id == external_id,
            )
            .values(status=status, updated_at=datetime.utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount
