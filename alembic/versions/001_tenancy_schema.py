"""Tenancy schema: users, companies, memberships, campaigns, grants, activity log

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. Enum types ─────────────────────────────────────────────────────
    op.execute("CREATE TYPE companytype AS ENUM ('agency', 'dealership');")
    op.execute("CREATE TYPE companyrole AS ENUM ('user', 'admin');")

    # ── 2. Companies ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE companies (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            type companytype NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("CREATE INDEX ix_companies_type ON companies (type);")

    # ── 3. Users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id SERIAL PRIMARY KEY,
            first_name VARCHAR(100) NOT NULL,
            last_name VARCHAR(100) NOT NULL DEFAULT '',
            email VARCHAR(255) NOT NULL UNIQUE,
            username VARCHAR(100) NOT NULL DEFAULT 'username',
            password_hash VARCHAR(255) NOT NULL DEFAULT '',
            phone_number VARCHAR(20),
            is_admin BOOLEAN NOT NULL DEFAULT false,
            timezone VARCHAR(50),
            default_company_id INTEGER REFERENCES companies(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    # ── 4. Memberships ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE company_user (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            company_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
            role companyrole NOT NULL DEFAULT 'user',
            config JSONB NOT NULL DEFAULT '{}',
            is_active BOOLEAN NOT NULL DEFAULT true,
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_company_user_user_company UNIQUE (user_id, company_id)
        );
    """)
    op.execute("CREATE INDEX ix_company_user_user_id ON company_user (user_id);")
    op.execute("CREATE INDEX ix_company_user_company_id ON company_user (company_id);")

    # ── 5. Campaigns and access grants ────────────────────────────────────
    op.execute("""
        CREATE TABLE campaigns (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            agency_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
            dealership_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("CREATE INDEX ix_campaigns_agency_id ON campaigns (agency_id);")
    op.execute("CREATE INDEX ix_campaigns_dealership_id ON campaigns (dealership_id);")

    op.execute("""
        CREATE TABLE campaign_user (
            campaign_id INTEGER NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            PRIMARY KEY (campaign_id, user_id)
        );
    """)

    # ── 6. Activity log ───────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE activity_log (
            id SERIAL PRIMARY KEY,
            log_name VARCHAR(50) NOT NULL DEFAULT 'default',
            description VARCHAR(255) NOT NULL,
            subject_type VARCHAR(100),
            subject_id INTEGER,
            causer_id INTEGER,
            properties JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("CREATE INDEX ix_activity_log_subject ON activity_log (subject_type, subject_id);")
    op.execute("CREATE INDEX ix_activity_log_causer_id ON activity_log (causer_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS activity_log;")
    op.execute("DROP TABLE IF EXISTS campaign_user;")
    op.execute("DROP TABLE IF EXISTS campaigns;")
    op.execute("DROP TABLE IF EXISTS company_user;")
    op.execute("DROP TABLE IF EXISTS users;")
    op.execute("DROP TABLE IF EXISTS companies;")
    op.execute("DROP TYPE IF EXISTS companyrole;")
    op.execute("DROP TYPE IF EXISTS companytype;")
