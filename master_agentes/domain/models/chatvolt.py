"""ChatVolt bridge vocabulary: selectors, commands, events and payloads.

Payload fields are English; the Portuguese keys used by the first version
of the integration are accepted as validation aliases.
"""

import enum
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

# Fixed origin tag for everything created through the bridge
CHATVOLT_ORIGIN = "chatvolt"
DEFAULT_CLIENT_NAME = "Cliente ChatVolt"
DEFAULT_CONTACT_NAME = "Contato ChatVolt"


def _stringify_number(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


RemoteId = Annotated[str, BeforeValidator(_stringify_number)]


class ProxyRoute(str, enum.Enum):
    """Read routes served by ``GET /chatvolt``."""

    PRODUCTS = "products"
    AGENTS = "agents"
    CONTACTS = "contacts"
    CONVERSATIONS = "conversations"
    STATUS = "status"

    @classmethod
    def parse(cls, value: str | None) -> "ProxyRoute | None":
        if not value:
            return None
        value = value.strip().lower()
        if value in _ROUTE_ALIASES:
            return _ROUTE_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            return None


_ROUTE_ALIASES = {
    "produtos": ProxyRoute.PRODUCTS,
    "agentes": ProxyRoute.AGENTS,
    "contatos": ProxyRoute.CONTACTS,
    "conversas": ProxyRoute.CONVERSATIONS,
}


class ProxyCommand(str, enum.Enum):
    """Write commands accepted by ``POST /chatvolt``."""

    NEW_CONVERSATION = "new_conversation"
    UPDATE_CONVERSATION = "update_conversation"
    NEW_CONTACT = "new_contact"

    @classmethod
    def parse(cls, value: Any) -> "ProxyCommand | None":
        if not isinstance(value, str):
            return None
        value = value.strip().lower()
        if value in _COMMAND_ALIASES:
            return _COMMAND_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            return None


_COMMAND_ALIASES = {
    "nova_conversa": ProxyCommand.NEW_CONVERSATION,
    "atualizar_conversa": ProxyCommand.UPDATE_CONVERSATION,
    "novo_contato": ProxyCommand.NEW_CONTACT,
}


class WebhookEventType(str, enum.Enum):
    """Events ChatVolt delivers to the webhook."""

    MESSAGE_RECEIVED = "message.received"
    CONVERSATION_STARTED = "conversation.started"
    CONVERSATION_ENDED = "conversation.ended"
    CONTACT_CREATED = "contact.created"

    @classmethod
    def parse(cls, value: Any) -> "WebhookEventType | None":
        try:
            return cls(value)
        except ValueError:
            return None


class ChatMessage(BaseModel):
    """One message embedded in a conversation."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: RemoteId | None = None
    text: str | None = Field(default=None, validation_alias=AliasChoices("text", "texto"))
    kind: str = Field(default="text", validation_alias=AliasChoices("kind", "tipo"))
    sender: str | None = Field(default=None, validation_alias=AliasChoices("sender", "remetente"))
    timestamp: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContactData(BaseModel):
    """Contact identity fields sent by ChatVolt."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "nome"))
    email: str | None = None
    phone: str | None = Field(default=None, validation_alias=AliasChoices("phone", "telefone"))
    tags: list[str] | None = None

    @property
    def has_identity(self) -> bool:
        return bool(self.name or self.email or self.phone)


class NewConversationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_name: str | None = Field(
        default=None, validation_alias=AliasChoices("client_name", "cliente_nome")
    )
    phone: str | None = Field(default=None, validation_alias=AliasChoices("phone", "telefone"))
    email: str | None = None
    external_id: RemoteId | None = Field(
        default=None, validation_alias=AliasChoices("external_id", "chatvolt_id")
    )
    messages: list[ChatMessage] | None = Field(
        default=None, validation_alias=AliasChoices("messages", "mensagens")
    )
    agent_id: int | None = Field(default=None, validation_alias=AliasChoices("agent_id", "agente_id"))


class UpdateConversationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: int = Field(validation_alias=AliasChoices("conversation_id", "conversa_id"))
    status: str | None = None
    messages: list[ChatMessage] | None = Field(
        default=None, validation_alias=AliasChoices("messages", "mensagens")
    )


class NewContactData(ContactData):
    pass


class WebhookEnvelope(BaseModel):
    type: str
    # Shape is checked by the handler of a known event type
    data: Any = Field(default_factory=dict)


class MessageReceivedData(BaseModel):
    conversation_id: RemoteId
    message_id: RemoteId | None = None
    message_text: str | None = None
    message_type: str | None = None
    sender_type: str | None = None
    metadata: dict[str, Any] | None = None
    contact: ContactData | None = None


class ConversationEventData(BaseModel):
    conversation_id: RemoteId
    contact: ContactData | None = None


def require_exhaustive(handlers: Mapping[Any, Any], choices: type[enum.Enum]) -> None:
    """Fail fast when a dispatch table misses a member of its enum."""
    missing = set(choices) - set(handlers)
    if missing:
        names = ", ".join(sorted(member.value for member in missing))
        raise RuntimeError(f"No handler registered for {choices.__name__}: {names}")
