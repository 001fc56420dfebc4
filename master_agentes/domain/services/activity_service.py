"""Recent activity feed built from agent and conversation updates."""

from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.domain.models.views import ActivityView
from master_agentes.persistence.models.agent import Agent, AgentStatus
from master_agentes.persistence.models.conversation import Conversation
from master_agentes.persistence.repositories.agent_repository import AgentRepository
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository


def agent_activity(agent: Agent) -> ActivityView:
    verb = "ativado" if agent.status == AgentStatus.ACTIVE.value else "atualizado"
    return ActivityView(
        kind="agente",
        title=f'Agente "{agent.name}" {verb}',
        description=f"Tipo: {agent.kind}",
        timestamp=agent.updated_at,
        metadata={"agente_id": agent.id, "status": agent.status},
    )


def conversation_activity(conversation: Conversation) -> ActivityView:
    agent_name = conversation.agent.name if conversation.agent else "N/A"
    return ActivityView(
        kind="conversa",
        title=f"Nova conversa com {conversation.client_name}",
        description=f"Via agente: {agent_name}",
        timestamp=conversation.updated_at,
        metadata={"conversa_id": conversation.id, "status": conversation.status},
    )


class ActivityService:
    """Merges recent agent and conversation updates into one feed."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize activity service."""
        self.session = session
        self.agent_repo = AgentRepository(session)
        self.conversation_repo = ConversationRepository(session)

    async def recent_activity(self, tenant_id: int, limit: int = 10) -> list[ActivityView]:
        """Latest agent and conversation updates, newest first.

        Each source contributes at most ``limit`` rows before the merge, so
        the merged feed is exact for the top ``limit`` entries.

        Args:
            tenant_id: Tenant ID
            limit: Maximum number of entries

        Returns:
            Activity entries sorted by timestamp, newest first
        """
        agents = await self.agent_repo.list_recently_updated(tenant_id, limit=limit)
        conversations = await self.conversation_repo.list_recently_updated(tenant_id, limit=limit)

        activities = [agent_activity(agent) for agent in agents]
        activities.extend(conversation_activity(conversation) for conversation in conversations)
        activities.sort(key=lambda activity: activity.timestamp, reverse=True)
        return activities[:limit]
