"""Initial schema - delivery, access_token, audit_event.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DELIVERY_STATUSES = ("CREATED", "SIGNED", "DOC_UPLOADED", "FINALIZED", "CLOSED", "EXPIRED")


def upgrade() -> None:
    op.create_table(
        "delivery",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("signer_name", sa.String(255), nullable=False),
        sa.Column("doc_number", sa.String(255), nullable=True),
        sa.Column("recipient_email", sa.String(320), nullable=True),
        sa.Column("signature_ref", sa.Text(), nullable=True),
        sa.Column("original_doc_ref", sa.Text(), nullable=True),
        sa.Column("final_doc_ref", sa.Text(), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finalizing_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("original_hash", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in DELIVERY_STATUSES) + ")",
            name="ck_delivery_status",
        ),
        sa.CheckConstraint(
            "(final_doc_ref IS NOT NULL) = (status = 'FINALIZED')",
            name="ck_delivery_final_ref_iff_finalized",
        ),
    )
    op.create_index("ix_delivery_tenant_id", "delivery", ["tenant_id"])

    op.create_table(
        "access_token",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "delivery_id",
            sa.UUID(),
            sa.ForeignKey("delivery.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("tenant_id", sa.UUID(), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_access_token_token", "access_token", ["token"], unique=True)
    op.create_index("ix_access_token_delivery_id", "access_token", ["delivery_id"])

    op.create_table(
        "audit_event",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "delivery_id",
            sa.UUID(),
            sa.ForeignKey("delivery.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("tenant_id", sa.UUID(), nullable=False),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("actor", sa.String(20), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_event_delivery_id", "audit_event", ["delivery_id"])

    # Audit trail is append-only.
    op.execute(
        """
        CREATE FUNCTION audit_event_immutable() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'audit_event is append-only';
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        "CREATE TRIGGER audit_event_no_change BEFORE UPDATE OR DELETE ON audit_event "
        "FOR EACH ROW EXECUTE FUNCTION audit_event_immutable()"
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS audit_event_no_change ON audit_event")
    op.execute("DROP FUNCTION IF EXISTS audit_event_immutable()")
    op.drop_table("audit_event")
    op.drop_table("access_token")
    op.drop_table("delivery")
