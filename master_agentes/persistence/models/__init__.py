"""Database models."""

from master_agentes.persistence.models.agent import Agent, AgentKind, AgentStatus
from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential
from master_agentes.persistence.models.contact import Contact
from master_agentes.persistence.models.conversation import Conversation, ConversationStatus
from master_agentes.persistence.models.tenant import Tenant, User

__all__ = [
    "Agent",
    "AgentKind",
    "AgentStatus",
    "ChatVoltCredential",
    "Contact",
    "Conversation",
    "ConversationStatus",
    "Tenant",
    "User",
]
