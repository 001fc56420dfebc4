"""Tests for the ChatVolt credential store."""

import pytest
from cryptography.fernet import Fernet
from sqlalchemy import text

from master_agentes.core import encryption
from master_agentes.core.encryption import EncryptionService
from master_agentes.domain.services.credential_service import CredentialService


@pytest.mark.asyncio
async def test_upsert_creates_then_replaces_single_record(db_session, make_tenant):
    tenant = await make_tenant()
    service = CredentialService(db_session)

    created = await service.upsert(tenant.id, api_key="key-aaaaaaaaaa", org_id="org-aaaaa")
    await service.set_active(tenant.id, False)
    replaced = await service.upsert(
        tenant.id, api_key="key-bbbbbbbbbb", org_id="org-bbbbb", webhook_secret="s"
    )

    assert replaced.id == created.id
    assert replaced.api_key == "key-bbbbbbbbbb"
    assert replaced.org_id == "org-bbbbb"
    assert replaced.webhook_secret == "s"
    assert replaced.is_active is True

    count = (await db_session.execute(text("SELECT COUNT(*) FROM chatvolt_credentials"))).scalar()
    assert count == 1


@pytest.mark.asyncio
async def test_resolve_requires_matching_pair_and_active_flag(db_session, make_tenant):
    tenant = await make_tenant()
    service = CredentialService(db_session)
    await service.upsert(tenant.id, api_key="key-aaaaaaaaaa", org_id="org-aaaaa")

    resolved = await service.resolve("key-aaaaaaaaaa", "org-aaaaa")
    assert resolved is not None
    assert resolved.tenant_id == tenant.id

    assert await service.resolve("key-aaaaaaaaaa", "org-other") is None
    assert await service.resolve("key-wrong-wrong", "org-aaaaa") is None

    await service.set_active(tenant.id, False)
    assert await service.resolve("key-aaaaaaaaaa", "org-aaaaa") is None
    assert await service.resolve_by_org("org-aaaaa") is None


@pytest.mark.asyncio
async def test_shared_pair_resolves_to_oldest_credential(db_session, make_tenant):
    first = await make_tenant()
    second = await make_tenant()
    service = CredentialService(db_session)
    await service.upsert(first.id, api_key="key-shared-key", org_id="org-shared")
    await service.upsert(second.id, api_key="key-shared-key", org_id="org-shared")

    resolved = await service.resolve("key-shared-key", "org-shared")
    by_org = await service.resolve_by_org("org-shared")

    assert resolved.tenant_id == first.id
    assert by_org.tenant_id == first.id


@pytest.mark.asyncio
async def test_set_active_and_delete_report_row_counts(db_session, make_tenant):
    tenant = await make_tenant()
    other = await make_tenant()
    service = CredentialService(db_session)
    await service.upsert(tenant.id, api_key="key-aaaaaaaaaa", org_id="org-aaaaa")

    assert await service.set_active(other.id, True) == 0
    assert await service.delete(other.id) == 0

    assert await service.set_active(tenant.id, False) == 1
    assert await service.delete(tenant.id) == 1
    assert await service.get_for_tenant(tenant.id) is None


@pytest.mark.asyncio
async def test_webhook_secret_is_encrypted_at_rest(db_session, make_tenant, monkeypatch):
    monkeypatch.setattr(
        encryption, "_encryption_service", EncryptionService(Fernet.generate_key().decode())
    )
    tenant = await make_tenant()
    service = CredentialService(db_session)

    await service.upsert(
        tenant.id, api_key="key-aaaaaaaaaa", org_id="org-aaaaa", webhook_secret="top-secret"
    )

    raw = (
        await db_session.execute(text("SELECT webhook_secret FROM chatvolt_credentials"))
    ).scalar()
    assert raw.startswith("enc:")

    db_session.expunge_all()
    credential = await service.get_for_tenant(tenant.id)
    assert credential.webhook_secret == "top-secret"
