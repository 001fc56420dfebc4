"""Typed agent configuration and statistics.

Both are stored as JSON on the agent row. Known keys are validated;
unknown keys are kept (``extra="allow"``) and surface in ``model_extra``
so newer clients can add fields without a migration.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BusinessHours(BaseModel):
    """Daily service window, HH:MM 24h."""

    start: str = Field(pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
    end: str = Field(pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class ChatVoltAgentLink(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_key: str | None = None
    org_id: str | None = None
    bot_id: str | None = None


class N8nLink(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str | None = Field(default=None, pattern=r"^(https?://\S+)?$")
    token: str | None = None


class AgentIntegrations(BaseModel):
    model_config = ConfigDict(extra="allow")

    chatvolt: ChatVoltAgentLink | None = None
    n8n: N8nLink | None = None


class AgentConfiguration(BaseModel):
    """Behaviour settings for an agent."""

    model_config = ConfigDict(extra="allow")

    welcome_message: str | None = None
    business_hours: BusinessHours | None = None
    integration: AgentIntegrations | None = None


class AgentStatistics(BaseModel):
    """Counters tracked for an agent, plus the price shown to ChatVolt."""

    model_config = ConfigDict(extra="allow")

    total_conversations: int = 0
    total_messages: int = 0
    price: int | float | None = Field(default=0, validation_alias=AliasChoices("price", "preco"))


def load_configuration(raw: dict | None) -> AgentConfiguration:
    return AgentConfiguration.model_validate(raw or {})


def load_statistics(raw: dict | None) -> AgentStatistics:
    return AgentStatistics.model_validate(raw or {})
