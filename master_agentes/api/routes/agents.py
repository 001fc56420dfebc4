"""Agents API endpoints."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.api.deps import require_tenant_context
from master_agentes.domain.models.agent_profile import AgentConfiguration, AgentStatistics
from master_agentes.domain.services.agent_service import AgentService
from master_agentes.persistence.database import get_db
from master_agentes.persistence.models.agent import Agent, AgentKind, AgentStatus

router = APIRouter()


# ============== Request/Response Models ==============

class CreateAgentRequest(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    kind: AgentKind
    configuration: AgentConfiguration | None = None


class UpdateAgentRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=50)
    status: AgentStatus | None = None
    configuration: AgentConfiguration | None = None
    statistics: AgentStatistics | None = None


class AgentResponse(BaseModel):
    id: int
    name: str
    kind: str
    status: str
    total_conversations: int = 0
    configuration: dict[str, Any]
    statistics: dict[str, Any]
    created_at: datetime
    updated_at: datetime


def _agent_to_response(agent: Agent, total_conversations: int = 0) -> AgentResponse:
    return AgentResponse(
        id=agent.id,
        name=agent.name,
        kind=agent.kind,
        status=agent.status,
        total_conversations=total_conversations,
        configuration=agent.configuration or {},
        statistics=agent.statistics or {},
        created_at=agent.created_at,
        updated_at=agent.updated_at,
    )


# ============== Endpoints ==============

@router.get("", response_model=list[AgentResponse])
async def list_agents(
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AgentResponse]:
    """List the tenant's agents, newest first."""
    rows = await AgentService(db).list_agents(tenant_id)
    return [_agent_to_response(agent, count) for agent, count in rows]


@router.post("", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
async def create_agent(
    payload: CreateAgentRequest,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AgentResponse:
    """Create an agent."""
    agent = await AgentService(db).create_agent(
        tenant_id,
        name=payload.name,
        kind=payload.kind,
        configuration=payload.configuration,
    )
    return _agent_to_response(agent)


@router.patch("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    agent_id: int,
    payload: UpdateAgentRequest,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AgentResponse:
    """Update an agent's name, status, configuration or statistics."""
    agent = await AgentService(db).update_agent(
        tenant_id,
        agent_id,
        name=payload.name,
        status=payload.status,
        configuration=payload.configuration,
        statistics=payload.statistics,
    )
    return _agent_to_response(agent)


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agent(
    agent_id: int,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete an agent. Its conversations are kept without an agent."""
    await AgentService(db).delete_agent(tenant_id, agent_id)
