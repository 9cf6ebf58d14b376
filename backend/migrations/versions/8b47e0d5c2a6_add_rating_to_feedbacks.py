"""add rating to feedbacks

Revision ID: 8b47e0d5c2a6
Revises: 3f1c9a2d7b10
Create Date: 2025-05-05 19:44:18.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b47e0d5c2a6'
down_revision: Union[str, Sequence[str], None] = '3f1c9a2d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table("feedbacks") as batch_op:
        batch_op.add_column(sa.Column("rating", sa.Integer(), nullable=False, server_default="0"))


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("feedbacks") as batch_op:
        batch_op.drop_column("rating")
