"""ChatVolt webhook ingestion."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.errors import (
    InvalidCredentialsError,
    InvalidSignatureError,
    OrganizationRequiredError,
    ValidationFailedError,
    validation_details,
)
from master_agentes.core.signatures import verify_signature
from master_agentes.core.tenant_context import set_tenant_context
from master_agentes.domain.models.chatvolt import (
    ContactData,
    ConversationEventData,
    MessageReceivedData,
    WebhookEnvelope,
    WebhookEventType,
    require_exhaustive,
)
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.domain.services.tenant_data_gateway import TenantDataGateway
from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential

logger = logging.getLogger(__name__)

# Response message when a handler fails unexpectedly
EVENT_FAILURE_MESSAGES: dict[WebhookEventType, str] = {
    WebhookEventType.MESSAGE_RECEIVED: "Erro ao processar mensagem",
    WebhookEventType.CONVERSATION_STARTED: "Erro ao iniciar conversa",
    WebhookEventType.CONVERSATION_ENDED: "Erro ao encerrar conversa",
    WebhookEventType.CONTACT_CREATED: "Erro ao processar contato",
}


@dataclass
class WebhookOutcome:
    """What a handled event reports back to ChatVolt."""

    message: str
    conversation_id: int | None = None

    def to_body(self) -> dict:
        body: dict = {"success": True, "message": self.message}
        if self.conversation_id is not None:
            body["conversa_id"] = self.conversation_id
        return body


class WebhookService:
    """Authenticates webhook deliveries and applies their events."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize webhook service."""
        self.session = session
        self.credentials = CredentialService(session)
        self.gateway = TenantDataGateway(session)
        self._handlers: dict[
            WebhookEventType, Callable[[int, Any], Awaitable[WebhookOutcome]]
        ] = {
            WebhookEventType.MESSAGE_RECEIVED: self._handle_message_received,
            WebhookEventType.CONVERSATION_STARTED: self._handle_conversation_started,
            WebhookEventType.CONVERSATION_ENDED: self._handle_conversation_ended,
            WebhookEventType.CONTACT_CREATED: self._handle_contact_created,
        }
        require_exhaustive(self._handlers, WebhookEventType)

    async def authenticate(
        self, org_id: str | None, signature: str | None, body: bytes
    ) -> ChatVoltCredential:
        """Resolve the delivering organization and check the body signature.

        The signature is only checked when the tenant configured a secret and
        the caller sent ``x-chatvolt-signature``; otherwise delivery is
        accepted on org id alone.

        Args:
            org_id: Value of ``x-org-id``
            signature: Value of ``x-chatvolt-signature``
            body: Raw request body

        Returns:
            The active credential for the organization

        Raises:
            OrganizationRequiredError: No org id header
            InvalidCredentialsError: No active credential for the org id
            InvalidSignatureError: Signature present and wrong
        """
        if not org_id:
            raise OrganizationRequiredError()

        credential = await self.credentials.resolve_by_org(org_id)
        if credential is None:
            raise InvalidCredentialsError()
        set_tenant_context(credential.tenant_id)

        if credential.webhook_secret and signature:
            if not verify_signature(credential.webhook_secret, body, signature):
                logger.warning("Webhook signature mismatch")
                raise InvalidSignatureError()
        elif credential.webhook_secret:
            logger.info("Webhook delivered without signature; accepting on org id")

        return credential

    @staticmethod
    def parse_envelope(body: bytes) -> WebhookEnvelope:
        """Parse the raw body as a ``{type, data}`` event envelope.

        Raises:
            ValidationFailedError: Body is not JSON or not an envelope
        """
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationFailedError("Corpo da requisição não é JSON válido") from e
        try:
            return WebhookEnvelope.model_validate(payload)
        except ValidationError as e:
            raise ValidationFailedError(details=validation_details(e)) from e

    async def handle(self, tenant_id: int, envelope: WebhookEnvelope) -> WebhookOutcome:
        """Apply one event for a tenant.

        Unknown event types are acknowledged without doing anything.

        Raises:
            ValidationFailedError: Event data does not match its type
        """
        event_type = WebhookEventType.parse(envelope.type)
        if event_type is None:
            logger.info("Unhandled webhook event", extra={"event_type": envelope.type})
            return WebhookOutcome(message="Evento recebido")

        try:
            return await self._handlers[event_type](tenant_id, envelope.data)
        except ValidationError as e:
            raise ValidationFailedError(details=validation_details(e)) from e

    async def _handle_message_received(self, tenant_id: int, raw: Any) -> WebhookOutcome:
        data = MessageReceivedData.model_validate(raw)
        conversation, created = await self.gateway.find_or_create_conversation(
            tenant_id, data.conversation_id, data.contact
        )
        await self.gateway.append_message(tenant_id, conversation, data)
        logger.info(
            "Webhook message stored",
            extra={"conversation_id": conversation.id, "conversation_created": created},
        )
        return WebhookOutcome(message="Mensagem processada com sucesso")

    async def _handle_conversation_started(self, tenant_id: int, raw: Any) -> WebhookOutcome:
        data = ConversationEventData.model_validate(raw)
        conversation, created = await self.gateway.find_or_create_conversation(
            tenant_id, data.conversation_id, data.contact
        )
        if not created:
            return WebhookOutcome(message="Conversa já existe")

        if data.contact is not None:
            await self.gateway.upsert_contact_by_identity(tenant_id, data.contact)

        return WebhookOutcome(message="Conversa criada com sucesso", conversation_id=conversation.id)

    async def _handle_conversation_ended(self, tenant_id: int, raw: Any) -> WebhookOutcome:
        data = ConversationEventData.model_validate(raw)
        updated = await self.gateway.end_conversations(tenant_id, data.conversation_id)
        logger.info("Webhook conversation ended", extra={"conversations_updated": updated})
        return WebhookOutcome(message="Conversa encerrada com sucesso")

    async def _handle_contact_created(self, tenant_id: int, raw: Any) -> WebhookOutcome:
        contact = ContactData.model_validate(raw)
        await self.gateway.upsert_contact_by_identity(tenant_id, contact)
        return WebhookOutcome(message="Contato processado com sucesso")
