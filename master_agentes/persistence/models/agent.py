"""Agent model."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from master_agentes.persistence.database import Base


class AgentKind(str, enum.Enum):
    ATTENDANCE = "attendance"
    SALES = "sales"
    SUPPORT = "support"
    LEADS = "leads"


class AgentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PAUSED = "paused"


class Agent(Base):
    """Automated agent (bot) configured by a tenant."""

    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    kind = Column(String(20), nullable=False)  # AgentKind value
    status = Column(String(20), nullable=False, default=AgentStatus.ACTIVE.value, index=True)

    # Validated by AgentConfiguration / AgentStatistics before storage
    configuration = Column(JSON, nullable=False, default=dict)
    statistics = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="agents")
    conversations = relationship("Conversation", back_populates="agent")

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, tenant_id={self.tenant_id}, kind={self.kind}, status={self.status})>"
