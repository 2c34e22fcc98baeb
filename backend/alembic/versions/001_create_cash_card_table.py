"""Create cash_card table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the `cash_card` table (id identity, amount exact NUMERIC).
Rollback: downgrade() drops the table (all cash cards are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the cash_card table; see cashcard/models/cash_card.py for column notes."""
    op.create_table(
        "cash_card",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            autoincrement=True,
            nullable=False,
            comment="Store-assigned identifier",
        ),
        sa.Column(
            "amount",
            sa.Numeric().with_variant(sa.String(64), "sqlite"),
            nullable=False,
            comment="Card balance",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("cash_card")
