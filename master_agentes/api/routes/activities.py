"""Recent activity endpoint."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.api.deps import require_tenant_context
from master_agentes.domain.services.activity_service import ActivityService
from master_agentes.persistence.database import get_db

router = APIRouter()


@router.get("")
async def list_activities(
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[dict[str, Any]]:
    """Latest agent and conversation updates for the tenant."""
    activities = await ActivityService(db).recent_activity(tenant_id, limit=limit)
    return [activity.to_wire() for activity in activities]
