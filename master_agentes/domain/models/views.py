"""Read projections returned by the tenant data gateway.

Attributes are English; serialization aliases carry the JSON keys the
ChatVolt side of the integration consumes. Use :meth:`WireModel.to_wire`
to produce the response body.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class WireModel(BaseModel):
    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProductDetails(WireModel):
    configuration: dict[str, Any] = Field(serialization_alias="configuracoes")
    statistics: dict[str, Any] = Field(serialization_alias="estatisticas")
    created_at: datetime = Field(serialization_alias="data_criacao")
    updated_at: datetime = Field(serialization_alias="ultima_atualizacao")


class ProductView(WireModel):
    """An agent presented to ChatVolt as a catalogue product."""

    id: int
    name: str = Field(serialization_alias="nome")
    category: str = Field(serialization_alias="categoria")
    status: str
    description: str = Field(serialization_alias="descricao")
    price: int | float = Field(serialization_alias="preco")
    available: bool = Field(serialization_alias="disponivel")
    image: str = Field(serialization_alias="imagem")
    details: ProductDetails = Field(serialization_alias="detalhes")


class AgentView(WireModel):
    id: int
    name: str = Field(serialization_alias="nome")
    kind: str = Field(serialization_alias="tipo")
    status: str
    total_conversations: int = Field(serialization_alias="total_conversas")
    configuration: dict[str, Any] = Field(serialization_alias="configuracoes")
    statistics: dict[str, Any] = Field(serialization_alias="estatisticas")
    created_at: datetime = Field(serialization_alias="data_criacao")
    updated_at: datetime = Field(serialization_alias="ultima_atualizacao")


class ContactView(WireModel):
    id: int
    name: str = Field(serialization_alias="nome")
    email: str | None
    phone: str | None = Field(serialization_alias="telefone")
    origin: str = Field(serialization_alias="origem")
    tags: list[str]
    created_at: datetime = Field(serialization_alias="data_criacao")
    updated_at: datetime = Field(serialization_alias="ultima_atualizacao")


class AgentSummary(WireModel):
    id: int
    name: str = Field(serialization_alias="nome")
    kind: str = Field(serialization_alias="tipo")


class ConversationView(WireModel):
    id: int
    client_name: str = Field(serialization_alias="cliente_nome")
    phone: str | None = Field(serialization_alias="telefone")
    email: str | None
    status: str
    origin: str = Field(serialization_alias="origem")
    external_id: str | None = Field(serialization_alias="chatvolt_id")
    agent: AgentSummary | None = Field(serialization_alias="agente")
    messages: list[dict[str, Any]] = Field(serialization_alias="mensagens")
    created_at: datetime = Field(serialization_alias="data_inicio")
    updated_at: datetime = Field(serialization_alias="ultima_interacao")


class AgentCounts(WireModel):
    total: int
    active: int = Field(serialization_alias="ativos")
    inactive: int = Field(serialization_alias="inativos")


class ContactCounts(WireModel):
    total: int


class ConversationCounts(WireModel):
    total: int
    active: int = Field(serialization_alias="ativas")
    ended: int = Field(serialization_alias="encerradas")


class StatusSummary(WireModel):
    agents: AgentCounts = Field(serialization_alias="agentes")
    contacts: ContactCounts = Field(serialization_alias="contatos")
    conversations: ConversationCounts = Field(serialization_alias="conversas")


class ActivityView(WireModel):
    """One entry of the recent activity feed."""

    kind: str = Field(serialization_alias="tipo")
    title: str = Field(serialization_alias="titulo")
    description: str = Field(serialization_alias="descricao")
    timestamp: datetime
    metadata: dict[str, Any]
