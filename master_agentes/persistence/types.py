"""Custom SQLAlchemy types for the application."""

from typing import Optional

from sqlalchemy import String, TypeDecorator

from master_agentes.core.encryption import decrypt_field, encrypt_field


class EncryptedString(TypeDecorator):
    """String column transparently encrypted at rest.

    Usage:
        webhook_secret = Column(EncryptedString(255), nullable=True)

    Encrypted values carry an ``enc:`` prefix, so rows written before a key
    was configured still read back as plaintext. Encrypted columns cannot be
    used in equality filters.
    """

    impl = String
    cache_ok = True

    def __init__(self, length: Optional[int] = None):
        # Fernet tokens are roughly 1.4x longer plus prefix and overhead
        if length:
            super().__init__(max(length * 3, 512))
        else:
            super().__init__(512)

    def process_bind_param(self, value: Optional[str], dialect) -> Optional[str]:
        return encrypt_field(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[str]:
        return decrypt_field(value)
