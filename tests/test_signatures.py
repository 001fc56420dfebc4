"""Tests for webhook signatures, key masking and field encryption."""

import hashlib
import hmac

import pytest
from cryptography.fernet import Fernet

from master_agentes.core.encryption import EncryptionError, EncryptionService
from master_agentes.core.signatures import compute_signature, mask_api_key, verify_signature


def test_compute_signature_is_prefixed_hex_hmac():
    body = b'{"type":"conversation.ended"}'
    expected = hmac.new(b"s", body, hashlib.sha256).hexdigest()

    assert compute_signature("s", body) == f"sha256={expected}"


def test_verify_signature_accepts_exact_body():
    body = b'{"type":"message.received","data":{}}'
    assert verify_signature("s", body, compute_signature("s", body))


@pytest.mark.parametrize("position", [0, 5, -1])
def test_verify_signature_rejects_single_byte_mutation(position):
    body = bytearray(b'{"type":"message.received","data":{}}')
    header = compute_signature("s", bytes(body))

    body[position] = (body[position] + 1) % 256

    assert not verify_signature("s", bytes(body), header)


def test_verify_signature_rejects_other_secret_and_bare_hex():
    body = b"payload"
    assert not verify_signature("other", body, compute_signature("s", body))
    bare = hmac.new(b"s", body, hashlib.sha256).hexdigest()
    assert not verify_signature("s", body, bare)


def test_mask_api_key():
    assert mask_api_key("sk-1234567890abcdef") == "sk-12345...cdef"
    assert mask_api_key("short-key") == "..."


def test_encryption_round_trip_with_key():
    service = EncryptionService(Fernet.generate_key().decode())

    token = service.encrypt("webhook-secret")

    assert token.startswith("enc:")
    assert "webhook-secret" not in token
    assert service.decrypt(token) == "webhook-secret"


def test_encryption_disabled_passes_plaintext_through():
    service = EncryptionService("")

    assert not service.is_enabled
    assert service.encrypt("webhook-secret") == "webhook-secret"
    assert service.decrypt("webhook-secret") == "webhook-secret"


def test_invalid_encryption_key_is_rejected():
    with pytest.raises(EncryptionError):
        EncryptionService("not-a-fernet-key")
