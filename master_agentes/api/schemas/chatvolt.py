"""Request and response schemas for the ChatVolt bridge endpoints."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool


class ProxyCommandRequest(BaseModel):
    """``POST /chatvolt`` body; ``tipo``/``dados`` are the legacy keys."""

    type: Any = Field(default=None, validation_alias=AliasChoices("type", "tipo"))
    data: dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("data", "dados"))


class ChatVoltConfigRequest(BaseModel):
    """Create or replace the tenant's ChatVolt credential."""

    api_key: str = Field(min_length=10)
    org_id: str = Field(min_length=5)
    webhook_secret: str | None = None


class ChatVoltConfigToggle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_active: StrictBool = Field(validation_alias=AliasChoices("is_active", "ativo"))


class ChatVoltConfigResponse(BaseModel):
    """Stored credential as shown to its owner; the secret never leaves."""

    id: int
    api_key: str
    org_id: str
    webhook_secret_configured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class IntegrationUrls(BaseModel):
    api_endpoint: str
    webhook_url: str
    documentation: str
