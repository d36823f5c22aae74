"""create expenses table

Revision ID: 202401010001
Revises:
Create Date: 2024-01-01 00:00:01.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202401010001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column(
            "date", sa.Date(), nullable=False, server_default=sa.func.current_date()
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount_cents > 0", name="ck_expenses_amount_positive"),
    )
    op.create_index("ix_expenses_date_created", "expenses", ["date", "created_at"])
    op.create_index("ix_expenses_category", "expenses", ["category"])


def downgrade():
    op.drop_index("ix_expenses_category", table_name="expenses")
    op.drop_index("ix_expenses_date_created", table_name="expenses")
    op.drop_table("expenses")
