"""initial schema: tenants, users, agents, contacts, conversations, chatvolt credentials

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'agents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('configuration', sa.JSON(), nullable=False),
        sa.Column('statistics', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_agents_id', 'agents', ['id'])
    op.create_index('ix_agents_tenant_id', 'agents', ['tenant_id'])
    op.create_index('ix_agents_status', 'agents', ['status'])
    op.create_index('ix_agents_created_at', 'agents', ['created_at'])

    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('origin', sa.String(length=50), nullable=False, server_default='manual'),
        sa.Column('tags', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_contacts_id', 'contacts', ['id'])
    op.create_index('ix_contacts_tenant_id', 'contacts', ['tenant_id'])
    op.create_index('ix_contacts_created_at', 'contacts', ['created_at'])
    op.create_index('ix_contacts_tenant_email', 'contacts', ['tenant_id', 'email'])
    op.create_index('ix_contacts_tenant_phone', 'contacts', ['tenant_id', 'phone'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column(
            'agent_id',
            sa.Integer(),
            sa.ForeignKey('agents.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('origin', sa.String(length=50), nullable=False, server_default='manual'),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('messages', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'external_id', name='uq_conversations_tenant_external_id'),
    )
    op.create_index('ix_conversations_id', 'conversations', ['id'])
    op.create_index('ix_conversations_tenant_id', 'conversations', ['tenant_id'])
    op.create_index('ix_conversations_agent_id', 'conversations', ['agent_id'])
    op.create_index('ix_conversations_status', 'conversations', ['status'])
    op.create_index('ix_conversations_external_id', 'conversations', ['external_id'])
    op.create_index('ix_conversations_created_at', 'conversations', ['created_at'])

    op.create_table(
        'chatvolt_credentials',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('api_key', sa.String(length=255), nullable=False),
        sa.Column('org_id', sa.String(length=255), nullable=False),
        # Fernet ciphertext when FIELD_ENCRYPTION_KEY is set
        sa.Column('webhook_secret', sa.String(length=765), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_chatvolt_credentials_id', 'chatvolt_credentials', ['id'])
    op.create_index(
        'ix_chatvolt_credentials_tenant_id', 'chatvolt_credentials', ['tenant_id'], unique=True
    )
    op.create_index('ix_chatvolt_credentials_org_id', 'chatvolt_credentials', ['org_id'])
    op.create_index('ix_chatvolt_credentials_key_org', 'chatvolt_credentials', ['api_key', 'org_id'])


def downgrade() -> None:
    op.drop_table('chatvolt_credentials')
    op.drop_table('conversations')
    op.drop_table('contacts')
    op.drop_table('agents')
    op.drop_table('users')
    op.drop_table('tenants')
