"""Initial schema: tenants, credentials, staff profiles, audit events

Learn: companies and users reference each other (users.company_id and
companies.admin_id), so companies is created first without its admin FK
and the constraint is added once users exists. The batch context makes
that ALTER work on sqlite too.

Role and status columns are plain VARCHARs holding enum values; the
closed vocabulary is enforced by the ORM, not by a database type, so
adding a role never needs a type migration.

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ─── Tenants ─────────────────────────────────────────
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("logo", sa.String(500), nullable=False),
        sa.Column("admin_id", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("invitation_token", sa.String(128), nullable=True),
        sa.Column("invitation_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("name", name="uq_companies_name"),
        sa.UniqueConstraint("invitation_token", name="uq_companies_invitation_token"),
    )

    # ─── Credentials ─────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("companies.id"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("reset_token", sa.String(128), nullable=True),
        sa.Column("reset_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("reset_token", name="uq_users_reset_token"),
    )
    op.create_index("idx_users_company", "users", ["company_id"])

    with op.batch_alter_table("companies") as batch:
        batch.create_foreign_key("fk_companies_admin_id", "users", ["admin_id"], ["id"])

    # ─── Staff profiles ──────────────────────────────────
    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("designation", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", name="uq_employees_user_id"),
    )
    op.create_index("idx_employees_company", "employees", ["company_id"])

    op.create_table(
        "service_managers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", name="uq_service_managers_user_id"),
    )
    op.create_index("idx_service_managers_company", "service_managers", ["company_id"])

    # ─── Audit trail ─────────────────────────────────────
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("stream_id", sa.String(200), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_events_stream", "events", ["stream_id", "id"])
    op.create_index("idx_events_type", "events", ["type"])


def downgrade() -> None:
    op.drop_index("idx_events_type", table_name="events")
    op.drop_index("idx_events_stream", table_name="events")
    op.drop_table("events")
    op.drop_index("idx_service_managers_company", table_name="service_managers")
    op.drop_table("service_managers")
    op.drop_index("idx_employees_company", table_name="employees")
    op.drop_table("employees")
    with op.batch_alter_table("companies") as batch:
        batch.drop_constraint("fk_companies_admin_id", type_="foreignkey")
    op.drop_index("idx_users_company", table_name="users")
    op.drop_table("users")
    op.drop_table("companies")
