"""Field-level encryption for credential secrets stored at rest.

Uses Fernet symmetric encryption. When ``FIELD_ENCRYPTION_KEY`` is not set,
values are stored as plaintext so development databases keep working.
"""

import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "enc:"


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""


class EncryptionService:
    """Encrypts and decrypts sensitive column values."""

    def __init__(self, key: str | None) -> None:
        self._fernet: Optional[Fernet] = None
        if key:
            try:
                self._fernet = Fernet(key.encode())
            except (ValueError, TypeError) as e:
                raise EncryptionError(f"Invalid FIELD_ENCRYPTION_KEY format: {e}") from e
            logger.info("Encryption service initialized")
        else:
            logger.warning("No encryption key configured - encryption disabled")

    @property
    def is_enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a plaintext string.

        Returns:
            Encrypted token prefixed with ``enc:``, or the plaintext when
            encryption is disabled
        """
        if not plaintext or not self._fernet:
            return plaintext
        token = self._fernet.encrypt(plaintext.encode()).decode()
        return f"{ENCRYPTED_PREFIX}{token}"

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a value written by :meth:`encrypt`.

        Values without the ``enc:`` prefix are returned unchanged.

        Raises:
            EncryptionError: If the value is encrypted and cannot be decrypted
        """
        if not ciphertext or not ciphertext.startswith(ENCRYPTED_PREFIX):
            return ciphertext
        if not self._fernet:
            raise EncryptionError("Cannot decrypt: encryption key not configured")
        try:
            return self._fernet.decrypt(ciphertext[len(ENCRYPTED_PREFIX):].encode()).decode()
        except InvalidToken as e:
            raise EncryptionError("Failed to decrypt: invalid token or wrong key") from e


_encryption_service: Optional[EncryptionService] = None


def get_encryption_service() -> EncryptionService:
    """Get the process-wide encryption service built from settings."""
    global _encryption_service
    if _encryption_service is None:
        from master_agentes.settings import settings

        _encryption_service = EncryptionService(settings.field_encryption_key)
    return _encryption_service


def encrypt_field(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return get_encryption_service().encrypt(value)


def decrypt_field(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return get_encryption_service().decrypt(value)
