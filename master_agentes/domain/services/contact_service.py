"""Contact service for managing contacts."""

from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.errors import ContactNotFoundError
from master_agentes.persistence.models.contact import DEFAULT_CONTACT_ORIGIN, Contact
from master_agentes.persistence.repositories.contact_repository import ContactRepository


class ContactService:
    """Service for contact management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize contact service."""
        self.session = session
        self.contact_repo = ContactRepository(session)

    async def list_contacts(
        self, tenant_id: int, skip: int = 0, limit: int = 100
    ) -> list[Contact]:
        """List contacts for a tenant.

        Args:
            tenant_id: Tenant ID
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of contacts, newest first
        """
        return await self.contact_repo.list(tenant_id, skip=skip, limit=limit)

    async def create_contact(
        self,
        tenant_id: int,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        origin: str | None = None,
        tags: list[str] | None = None,
    ) -> Contact:
        """Create a new contact.

        Args:
            tenant_id: Tenant ID
            name: Contact name
            email: Optional email
            phone: Optional phone
            origin: Where the contact came from (default 'manual')
            tags: Free-form labels

        Returns:
            Created contact
        """
        return await self.contact_repo.create(
            tenant_id,
            name=name,
            email=email or None,
            phone=phone or None,
            origin=origin or DEFAULT_CONTACT_ORIGIN,
            tags=list(tags or []),
        )

    async def delete_contact(self, tenant_id: int, contact_id: int) -> None:
        if not await self.contact_repo.delete(tenant_id, contact_id):
            raise ContactNotFoundError()
