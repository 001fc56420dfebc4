"""Agent management for the tenant's own dashboard."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.errors import AgentNotFoundError
from master_agentes.domain.models.agent_profile import AgentConfiguration, AgentStatistics
from master_agentes.persistence.models.agent import Agent, AgentKind, AgentStatus
from master_agentes.persistence.repositories.agent_repository import AgentRepository

logger = logging.getLogger(__name__)


class AgentService:
    """Service for agent management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize agent service."""
        self.session = session
        self.agent_repo = AgentRepository(session)

    async def list_agents(self, tenant_id: int) -> list[tuple[Agent, int]]:
        """List agents with their conversation counts, newest first."""
        return await self.agent_repo.list_with_conversation_counts(tenant_id)

    async def create_agent(
        self,
        tenant_id: int,
        name: str,
        kind: AgentKind,
        configuration: AgentConfiguration | None = None,
    ) -> Agent:
        """Create an active agent with zeroed statistics.

        Args:
            tenant_id: Tenant ID
            name: Display name
            kind: Agent kind
            configuration: Validated behaviour settings

        Returns:
            Created agent
        """
        configuration = configuration or AgentConfiguration()
        agent = await self.agent_repo.create(
            tenant_id,
            name=name,
            kind=kind.value,
            status=AgentStatus.ACTIVE.value,
            configuration=configuration.model_dump(mode="json", exclude_none=True),
            statistics=AgentStatistics().model_dump(mode="json"),
        )
        logger.info("Agent created", extra={"agent_id": agent.id, "kind": agent.kind})
        return agent

    async def update_agent(
        self,
        tenant_id: int,
        agent_id: int,
        name: str | None = None,
        status: AgentStatus | None = None,
        configuration: AgentConfiguration | None = None,
        statistics: AgentStatistics | None = None,
    ) -> Agent:
        """Update the given fields of an agent.

        Raises:
            AgentNotFoundError: If the agent is not the tenant's
        """
        changes: dict = {"updated_at": datetime.utcnow()}
        if name is not None:
            changes["name"] = name
        if status is not None:
            changes["status"] = status.value
        if configuration is not None:
            changes["configuration"] = configuration.model_dump(mode="json", exclude_none=True)
        if statistics is not None:
            changes["statistics"] = statistics.model_dump(mode="json")

        agent = await self.agent_repo.update(tenant_id, agent_id, **changes)
        if agent is None:
            raise AgentNotFoundError()
        return agent

    async def delete_agent(self, tenant_id: int, agent_id: int) -> None:
        """Delete an agent; its conversations keep running without one.

        Raises:
            AgentNotFoundError: If the agent is not the tenant's
        """
        if not await self.agent_repo.delete(tenant_id, agent_id):
            raise AgentNotFoundError()
        logger.info("Agent deleted", extra={"agent_id": agent_id})
