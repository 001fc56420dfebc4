"""Tenant repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.persistence.models.tenant import Tenant
from master_agentes.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entities."""

    def __init__(self, session: AsyncSession):
        """Initialize tenant repository."""
        super().__init__(Tenant, session)
