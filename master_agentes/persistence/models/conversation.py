"""Conversation model with embedded messages."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from master_agentes.persistence.database import Base


class ConversationStatus:
    """Conversation status constants."""
    ACTIVE = "active"
    ENDED = "ended"


class Conversation(Base):
    """Conversation model representing a customer interaction.

    ``messages`` is an ordered, append-only JSON list of
    ``{id, text, kind, sender, timestamp, metadata}`` records.
    """

    __tablename__ = "conversations"
    __table_args__ = (
        # NULL external ids never collide, so manual conversations are unaffected
        UniqueConstraint("tenant_id", "external_id", name="uq_conversations_tenant_external_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    agent_id = Column(Integer, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True, index=True)
    client_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=ConversationStatus.ACTIVE, index=True)
    origin = Column(String(50), nullable=False, default="manual")
    external_id = Column(String(255), nullable=True, index=True)  # ChatVolt conversation id
    messages = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="conversations")
    agent = relationship("Agent", back_populates="conversations")

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, tenant_id={self.tenant_id}, status={self.status})>"
