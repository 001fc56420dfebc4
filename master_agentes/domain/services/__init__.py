"""Domain services."""

from master_agentes.domain.services.activity_service import ActivityService
from master_agentes.domain.services.agent_service import AgentService
from master_agentes.domain.services.contact_service import ContactService
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.domain.services.tenant_data_gateway import TenantDataGateway
from master_agentes.domain.services.webhook_service import WebhookService

__all__ = [
    "ActivityService",
    "AgentService",
    "ContactService",
    "CredentialService",
    "TenantDataGateway",
    "WebhookService",
]
