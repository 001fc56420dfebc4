"""Agent repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.persistence.models.agent import Agent
from master_agentes.persistence.models.conversation import Conversation
from master_agentes.persistence.repositories.base import BaseRepository


class AgentRepository(BaseRepository[Agent]):
    """Repository for Agent entities."""

    def __init__(self, session: AsyncSession):
        """Initialize agent repository."""
        super().__init__(Agent, session)

    async def list_all(self, tenant_id: int) -> list[Agent]:
        """List every agent for a tenant, newest first."""
        stmt = (
            select(Agent)
            .where(Agent.tenant_id == tenant_id)
            .order_by(Agent.created_at.desc(), Agent.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_with_conversation_counts(
        self, tenant_id: int
    ) -> list[tuple[Agent, int]]:
        """List agents with the number of conversations attached to each.

        Args:
            tenant_id: Tenant ID

        Returns:
            (agent, conversation_count) pairs, newest agent first
        """
        conversation_count = func.count(Conversation.id)
        stmt = (
            select(Agent, conversation_count)
            .outerjoin(
                Conversation,
                (Conversation.agent_id == Agent.id)
                & (Conversation.tenant_id == tenant_id),
            )
            .where(Agent.tenant_id == tenant_id)
            .group_by(Agent.id)
            .order_by(Agent.created_at.desc(), Agent.id.desc())
        )
        result = await self.session.execute(stmt)
        return [(agent, count) for agent, count in result.all()]

    async def list_recently_updated(self, tenant_id: int, limit: int = 10) -> list[Agent]:
        """List the most recently updated agents."""
        stmt = (
            select(Agent)
            .where(Agent.tenant_id == tenant_id)
            .order_by(Agent.updated_at.desc(), Agent.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
