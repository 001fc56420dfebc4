"""Repository implementations."""

from master_agentes.persistence.repositories.agent_repository import AgentRepository
from master_agentes.persistence.repositories.base import BaseRepository
from master_agentes.persistence.repositories.chatvolt_credential_repository import (
    ChatVoltCredentialRepository,
)
from master_agentes.persistence.repositories.contact_repository import ContactRepository
from master_agentes.persistence.repositories.conversation_repository import ConversationRepository
from master_agentes.persistence.repositories.tenant_repository import TenantRepository
from master_agentes.persistence.repositories.user_repository import UserRepository

__all__ = [
    "AgentRepository",
    "BaseRepository",
    "ChatVoltCredentialRepository",
    "ContactRepository",
    "ConversationRepository",
    "TenantRepository",
    "UserRepository",
]
