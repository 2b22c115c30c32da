"""create agents, sales, payments and balances

Revision ID: 3e1a7c9b52d4
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3e1a7c9b52d4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # -----------------------------------------------------
    # 1) agents
    # -----------------------------------------------------
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_agents_full_name", "agents", ["full_name"])
    op.create_index("ix_agents_email", "agents", ["email"], unique=True)

    # -----------------------------------------------------
    # 2) sales (agent_id captured at creation; seller_name kept for legacy rows)
    # -----------------------------------------------------
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "agent_id",
            sa.Integer(),
            sa.ForeignKey("agents.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("seller_name", sa.String(length=200), nullable=False),
        sa.Column("buyer_name", sa.String(length=200), nullable=False),
        sa.Column("total_contract_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("project", sa.String(length=200), nullable=False),
        sa.Column("block", sa.String(length=20), nullable=True),
        sa.Column("lot", sa.String(length=20), nullable=True),
        sa.Column("reservation_date", sa.Date(), nullable=True),
        sa.Column("receipt_path", sa.String(length=500), nullable=True),
        sa.Column("secondary_receipt_path", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_sales_agent_id", "sales", ["agent_id"])
    op.create_index("ix_sales_seller_name", "sales", ["seller_name"])
    op.create_index("ix_sales_status", "sales", ["status"])
    op.create_index("ix_sales_status_agent", "sales", ["status", "agent_id"])

    # -----------------------------------------------------
    # 3) payments
    # -----------------------------------------------------
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("payer_name", sa.String(length=200), nullable=False),
        sa.Column("project", sa.String(length=200), nullable=False),
        sa.Column("block_lot", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("penalty_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("due_date", sa.String(length=10), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_period", sa.Date(), nullable=False),
        sa.Column("reference_number", sa.String(length=100), nullable=False),
        sa.Column("vat", sa.String(length=20), nullable=False, server_default="Non Vat"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("receipt_path", sa.String(length=500), nullable=False),
        sa.Column("ack_receipt_path", sa.String(length=500), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_payments_payer_name", "payments", ["payer_name"])
    op.create_index("ix_payments_project", "payments", ["project"])
    op.create_index("ix_payments_status", "payments", ["status"])
    op.create_index("ix_payments_status_created", "payments", ["status", "created_at"])
    op.create_index("ix_payments_payer_project", "payments", ["payer_name", "project"])

    # -----------------------------------------------------
    # 4) balances (read-only snapshot)
    # -----------------------------------------------------
    op.create_table(
        "balances",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=False),
        sa.Column("project", sa.String(length=200), nullable=False),
        sa.Column("block", sa.String(length=20), nullable=False),
        sa.Column("lot", sa.String(length=20), nullable=False),
        sa.Column("total_contract_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("amount_paid", sa.Numeric(14, 2), nullable=True),
        sa.Column("remaining_balance", sa.Numeric(14, 2), nullable=True),
        sa.Column("monthly_amortization", sa.Numeric(14, 2), nullable=True),
        sa.Column("months_paid", sa.String(length=50), nullable=True),
        sa.Column("terms", sa.String(length=50), nullable=True),
        sa.Column("due_date", sa.String(length=10), nullable=True),
        sa.Column("sqm", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_per_sqm", sa.Numeric(14, 2), nullable=True),
    )
    op.create_index("ix_balances_client_name", "balances", ["client_name"])
    op.create_index(
        "ix_balances_client_project_block_lot",
        "balances",
        ["client_name", "project", "block", "lot"],
    )


def downgrade() -> None:
    op.drop_index("ix_balances_client_project_block_lot", table_name="balances")
    op.drop_index("ix_balances_client_name", table_name="balances")
    op.drop_table("balances")

    op.drop_index("ix_payments_payer_project", table_name="payments")
    op.drop_index("ix_payments_status_created", table_name="payments")
    op.drop_index("ix_payments_status", table_name="payments")
    op.drop_index("ix_payments_project", table_name="payments")
    op.drop_index("ix_payments_payer_name", table_name="payments")
    op.drop_table("payments")

    op.drop_index("ix_sales_status_agent", table_name="sales")
    op.drop_index("ix_sales_status", table_name="sales")
    op.drop_index("ix_sales_seller_name", table_name="sales")
    op.drop_index("ix_sales_agent_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_agents_email", table_name="agents")
    op.drop_index("ix_agents_full_name", table_name="agents")
    op.drop_table("agents")
