"""Initial dashboard schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id_column() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _created_at(index: bool = False) -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=index)


def upgrade() -> None:
    op.create_table(
        "orders",
        _id_column(),
        sa.Column("order_no", sa.String(50), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_initials", sa.String(8), nullable=False),
        sa.Column("items", postgresql.JSONB(), nullable=False),
        sa.Column("delivery_info", sa.Text(), nullable=True),
        sa.Column("payment_status", sa.String(50), nullable=False),
        sa.Column("order_status", sa.String(50), nullable=False),
        sa.Column("amount", sa.String(32), nullable=True),
        sa.Column("total", sa.Numeric(12, 2), nullable=True),
        _created_at(index=True),
    )
    op.create_index("ix_orders_order_no", "orders", ["order_no"], unique=True)
    op.create_index("ix_orders_order_status", "orders", ["order_status"])

    op.create_table(
        "conversations",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("initials", sa.String(8), nullable=False),
        sa.Column("last_message", sa.Text(), nullable=False),
        sa.Column("time", sa.String(50), nullable=False),
        sa.Column("unread_count", sa.Integer(), nullable=False),
        sa.Column("is_online", sa.Boolean(), nullable=False),
        sa.Column("platform", sa.String(50), nullable=False, index=True),
        _created_at(),
    )

    op.create_table(
        "messages",
        _id_column(),
        sa.Column(
            "conversation_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_from_bot", sa.Boolean(), nullable=False),
        sa.Column("timestamp", sa.String(20), nullable=False),
        _created_at(index=True),
    )

    op.create_table(
        "transactions",
        _id_column(),
        sa.Column("transaction_id", sa.String(64), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("amount", sa.String(32), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("time", sa.String(50), nullable=False),
        _created_at(index=True),
    )
    op.create_index(
        "ix_transactions_transaction_id", "transactions", ["transaction_id"], unique=True
    )

    op.create_table(
        "system_status",
        _id_column(),
        sa.Column("bot_status", sa.String(50), nullable=False),
        sa.Column("webhook_status", sa.String(50), nullable=False),
        sa.Column("db_status", sa.String(50), nullable=False),
        sa.Column("api_status", sa.String(50), nullable=False),
        sa.Column("uptime", sa.String(20), nullable=False),
        sa.Column("version", sa.String(20), nullable=False),
        sa.Column("build", sa.String(20), nullable=False),
        sa.Column("environment", sa.String(50), nullable=False),
        sa.Column("server", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("last_deploy", sa.String(50), nullable=False),
        sa.Column("cpu_usage", sa.Integer(), nullable=False),
        sa.Column("memory_usage", sa.Integer(), nullable=False),
        sa.Column("disk_usage", sa.Integer(), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    for table in ("pending_user_approvals", "pending_order_approvals"):
        op.create_table(
            table,
            _id_column(),
            sa.Column("reference", sa.String(255), nullable=False),
            _created_at(),
        )


def downgrade() -> None:
    for table in (
        "pending_order_approvals",
        "pending_user_approvals",
        "system_status",
        "transactions",
        "messages",
        "conversations",
        "orders",
    ):
        op.drop_table(table)
