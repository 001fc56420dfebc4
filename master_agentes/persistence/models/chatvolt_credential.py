"""ChatVolt integration credential model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from master_agentes.persistence.database import Base
from master_agentes.persistence.types import EncryptedString


class ChatVoltCredential(Base):
    """Maps a ChatVolt organization (API key + org id) to a tenant.

    One record per tenant. The (api_key, org_id) pair is deliberately not
    unique across tenants; lookups break ties by lowest id.
    """

    __tablename__ = "chatvolt_credentials"
    __table_args__ = (
        Index("ix_chatvolt_credentials_key_org", "api_key", "org_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, unique=True, index=True)

    api_key = Column(String(255), nullable=False)
    org_id = Column(String(255), nullable=False, index=True)
    webhook_secret = Column(EncryptedString(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="chatvolt_credential")

    def __repr__(self) -> str:
        return f"<ChatVoltCredential(id={self.id}, tenant_id={self.tenant_id}, active={self.is_active})>"
