"""Contact repository."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.persistence.models.contact import Contact
from master_agentes.persistence.repositories.base import BaseRepository


class ContactRepository(BaseRepository[Contact]):
    """Repository for Contact entities."""

    def __init__(self, session: AsyncSession):
        """Initialize contact repository."""
        super().__init__(Contact, session)

    async def get_by_email_or_phone(
        self, tenant_id: int, email: str | None = None, phone: str | None = None
    ) -> Contact | None:
        """Get contact by email or phone.

        Returns the oldest matching contact if several exist.

        Args:
            tenant_id: Tenant ID
            email: Optional email to search
            phone: Optional phone to search

        Returns:
            Contact or None if not found
        """
        if not email and not phone:
            return None

        conditions = []
        if email:
            conditions.append(Contact.email == email)
        if phone:
            conditions.append(Contact.phone == phone)

        stmt = (
            select(Contact)
            .where(Contact.tenant_id == tenant_id, or_(*conditions))
            .order_by(Contact.created_at, Contact.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
