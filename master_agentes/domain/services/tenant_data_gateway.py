"""Tenant data gateway: every read and write the ChatVolt bridge performs.

All queries are scoped by tenant id; callers obtain the id from a resolved
credential and never from request input.
"""

import logging
from datetime import datetime
from urllib.parse import quote

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.errors import AgentNotFoundError, ConversationNotFoundError
from master_agentes.domain.models.agent_profile import load_statistics
from master_agentes.domain.models.chatvolt import (
    CHATVOLT_ORIGIN,
    DEFAULT_CLIENT_NAME,
    DEFAULT_CONTACT_NAME,
    ChatMessage,
    ContactData,
    MessageReceivedData,
    NewContactData,
    NewConversationData,
    UpdateConversationData,
)
from master_agentes.domain.models.views import (
    AgentCounts,
    AgentSummary,
    AgentView,
    ContactCounts,
    ContactView,
    ConversationCounts,
    ConversationView,
    ProductDetails,
    ProductView,
    StatusSummary,
)
from master_agentes.persistence.models.agent import Agent, AgentStatus
from master_agentes.persistence.models.contact import Contact
from master_agentes.persistence.models.conversation import Conversation, ConversationStatus
from master_agentes.persistence.repositories.agent_repository import AgentRepository
from master_agentes.persistence.repositories.contact_repository import ContactRepository
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository
from master_agentes.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

CONTACTS_PAGE_SIZE = 100
CONVERSATIONS_PAGE_SIZE = 50
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x200/8b5cf6/ffffff?text={text}.jpg"


def product_image_url(name: str) -> str:
    """Placeholder catalogue image labelled with the agent name."""
    # Same escaping as JavaScript's encodeURIComponent
    return PLACEHOLDER_IMAGE_URL.format(text=quote(name, safe="-_.!~*'()"))


def agent_to_product(agent: Agent) -> ProductView:
    statistics = load_statistics(agent.statistics)
    return ProductView(
        id=agent.id,
        name=agent.name,
        category=agent.kind,
        status=agent.status,
        description=f"Agente de {agent.kind} - {agent.name}",
        price=statistics.price or 0,
        available=agent.status == AgentStatus.ACTIVE.value,
        image=product_image_url(agent.name),
        details=ProductDetails(
            configuration=agent.configuration or {},
            statistics=agent.statistics or {},
            created_at=agent.created_at,
            updated_at=agent.updated_at,
        ),
    )


def contact_to_view(contact: Contact) -> ContactView:
    return ContactView(
        id=contact.id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        origin=contact.origin,
        tags=list(contact.tags or []),
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )


def conversation_to_view(conversation: Conversation) -> ConversationView:
    agent = conversation.agent
    return ConversationView(
        id=conversation.id,
        client_name=conversation.client_name,
        phone=conversation.phone,
        email=conversation.email,
        status=conversation.status,
        origin=conversation.origin,
        external_id=conversation.external_id,
        agent=AgentSummary(id=agent.id, name=agent.name, kind=agent.kind) if agent else None,
        messages=list(conversation.messages or []),
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


class TenantDataGateway:
    """Reads and writes agents, contacts and conversations for one tenant at a time."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the gateway."""
        self.session = session
        self.agent_repo = AgentRepository(session)
        self.contact_repo = ContactRepository(session)
        self.conversation_repo = ConversationRepository(session)

    # ------------------------------------------------------------------ reads

    async def list_agents_as_products(self, tenant_id: int) -> list[ProductView]:
        """List agents relabelled as catalogue products, newest first."""
        agents = await self.agent_repo.list_all(tenant_id)
        return [agent_to_product(agent) for agent in agents]

    async def list_agents(self, tenant_id: int) -> list[AgentView]:
        """List agents with their conversation counts, newest first."""
        rows = await self.agent_repo.list_with_conversation_counts(tenant_id)
        return [
            AgentView(
                id=agent.id,
                name=agent.name,
                kind=agent.kind,
                status=agent.status,
                total_conversations=count,
                configuration=agent.configuration or {},
                statistics=agent.statistics or {},
                created_at=agent.created_at,
                updated_at=agent.updated_at,
            )
            for agent, count in rows
        ]

    async def list_contacts(self, tenant_id: int) -> list[ContactView]:
        """List the newest contacts (at most 100)."""
        contacts = await self.contact_repo.list(tenant_id, limit=CONTACTS_PAGE_SIZE)
        return [contact_to_view(contact) for contact in contacts]

    async def list_conversations(self, tenant_id: int) -> list[ConversationView]:
        """List the newest conversations (at most 50) with an agent summary."""
        conversations = await self.conversation_repo.list_with_agents(
            tenant_id, limit=CONVERSATIONS_PAGE_SIZE
        )
        return [conversation_to_view(conversation) for conversation in conversations]

    async def get_status(self, tenant_id: int) -> StatusSummary:
        """Count agents, contacts and conversations for the tenant.

        The five counts are independent scalar subqueries sent as a single
        statement, so they are read from one snapshot. Inactive agents and
        ended conversations are derived, never counted.
        """

        def count(model, *criteria):
            return (
                select(func.count())
                .select_from(model)
                .where(model.tenant_id == tenant_id, *criteria)
                .scalar_subquery()
            )

        stmt = select(
            count(Agent).label("total_agents"),
            count(Agent, Agent.status == AgentStatus.ACTIVE.value).label("active_agents"),
            count(Contact).label("total_contacts"),
            count(Conversation).label("total_conversations"),
            count(
                Conversation, Conversation.status == ConversationStatus.ACTIVE
            ).label("active_conversations"),
        )
        row = (await self.session.execute(stmt)).one()

        return StatusSummary(
            agents=AgentCounts(
                total=row.total_agents,
                active=row.active_agents,
                inactive=row.total_agents - row.active_agents,
            ),
            contacts=ContactCounts(total=row.total_contacts),
            conversations=ConversationCounts(
                total=row.total_conversations,
                active=row.active_conversations,
                ended=row.total_conversations - row.active_conversations,
            ),
        )

    # ----------------------------------------------------------------- writes

    async def create_conversation(
        self, tenant_id: int, data: NewConversationData
    ) -> Conversation:
        """Create a conversation on behalf of ChatVolt.

        A repeated ``external_id`` returns the conversation already stored.

        Raises:
            AgentNotFoundError: If ``agent_id`` is not one of the tenant's agents
        """
        if data.agent_id is not None:
            agent = await self.agent_repo.get_by_id(tenant_id, data.agent_id)
            if agent is None:
                raise AgentNotFoundError()

        if data.external_id:
            existing = await self.conversation_repo.get_by_external_id(
                tenant_id, data.external_id
            )
            if existing is not None:
                return existing

        conversation, _ = await self._insert_conversation(
            tenant_id,
            client_name=data.client_name or DEFAULT_CLIENT_NAME,
            phone=data.phone,
            email=data.email,
            external_id=data.external_id,
            messages=[message.model_dump(mode="json") for message in data.messages or []],
            agent_id=data.agent_id,
        )
        return conversation

    async def update_conversation(
        self, tenant_id: int, data: UpdateConversationData
    ) -> Conversation:
        """Replace a conversation's status and/or messages.

        Raises:
            ConversationNotFoundError: If the conversation is not the tenant's
        """
        conversation = await self.conversation_repo.get_by_id(tenant_id, data.conversation_id)
        if conversation is None:
            raise ConversationNotFoundError()

        if data.status is not None:
            conversation.status = data.status
        if data.messages is not None:
            conversation.messages = [message.model_dump(mode="json") for message in data.messages]
        conversation.updated_at = datetime.utcnow()

        await self.session.commit()
        await self.session.refresh(conversation)
        return conversation

    async def create_contact(self, tenant_id: int, data: NewContactData) -> Contact:
        """Create a contact on behalf of ChatVolt."""
        return await self.contact_repo.create(
            tenant_id,
            name=data.name or DEFAULT_CONTACT_NAME,
            email=data.email,
            phone=data.phone,
            origin=CHATVOLT_ORIGIN,
            tags=list(data.tags or []),
        )

    async def upsert_contact_by_identity(
        self, tenant_id: int, contact: ContactData
    ) -> Contact | None:
        """Merge contact data into the contact matching its email or phone.

        Non-empty incoming values win; missing ones keep what is stored. When
        nothing matches a new contact is created.

        Args:
            tenant_id: Tenant ID
            contact: Identity fields from ChatVolt

        Returns:
            The stored contact, or None when the payload has no name, email
            or phone
        """
        if not contact.has_identity:
            return None

        existing = await self.contact_repo.get_by_email_or_phone(
            tenant_id, email=contact.email, phone=contact.phone
        )
        if existing is None:
            return await self.contact_repo.create(
                tenant_id,
                name=contact.name or DEFAULT_CONTACT_NAME,
                email=contact.email,
                phone=contact.phone,
                origin=CHATVOLT_ORIGIN,
                tags=list(contact.tags or []),
            )

        existing.name = contact.name or existing.name
        existing.email = contact.email or existing.email
        existing.phone = contact.phone or existing.phone
        if contact.tags:
            existing.tags = list(contact.tags)
        existing.updated_at = datetime.utcnow()

        await self.session.commit()
        await self.session.refresh(existing)
        return existing

    async def find_or_create_conversation(
        self,
        tenant_id: int,
        external_id: str,
        contact: ContactData | None = None,
    ) -> tuple[Conversation, bool]:
        """Get the conversation for a ChatVolt id, creating it if missing.

        Returns:
            (conversation, created)
        """
        existing = await self.conversation_repo.get_by_external_id(tenant_id, external_id)
        if existing is not None:
            return existing, False

        contact = contact or ContactData()
        return await self._insert_conversation(
            tenant_id,
            client_name=contact.name or DEFAULT_CLIENT_NAME,
            phone=contact.phone,
            email=contact.email,
            external_id=external_id,
            status=ConversationStatus.ACTIVE,
            messages=[],
        )

    async def append_message(
        self, tenant_id: int, conversation: Conversation, data: MessageReceivedData
    ) -> Conversation:
        """Append a received message to the end of a conversation."""
        if conversation.tenant_id != tenant_id:
            raise ConversationNotFoundError()

        message = ChatMessage(
            id=data.message_id,
            text=data.message_text,
            kind=data.message_type or "text",
            sender=data.sender_type,
            timestamp=utc_now_iso(),
            metadata=data.metadata or {},
        )
        # Reassign so the JSON column is flagged dirty
        conversation.messages = [*(conversation.messages or []), message.model_dump(mode="json")]
        conversation.updated_at = datetime.utcnow()

        await self.session.commit()
        await self.session.refresh(conversation)
        return conversation

    async def end_conversations(self, tenant_id: int, external_id: str) -> int:
        """Mark every conversation with the ChatVolt id as ended.

        Returns:
            Number of conversations updated
        """
        return await self.conversation_repo.set_status_by_external_id(
            tenant_id, external_id, ConversationStatus.ENDED
        )

    async def _insert_conversation(self, tenant_id: int, **fields) -> tuple[Conversation, bool]:
        """Insert a bridge conversation, yielding to a concurrent insert of the same external id."""
        try:
            conversation = await self.conversation_repo.create(
                tenant_id, origin=CHATVOLT_ORIGIN, **fields
            )
        except IntegrityError:
            await self.session.rollback()
            external_id = fields.get("external_id")
            if not external_id:
                raise
            existing = await self.conversation_repo.get_by_external_id(tenant_id, external_id)
            if existing is None:
                raise
            logger.info(
                "Conversation created concurrently, reusing it",
                extra={"external_id": external_id, "conversation_id": existing.id},
            )
            return existing, False
        return conversation, True
