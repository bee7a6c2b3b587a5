"""Create clientes table

Revision ID: 001
Revises: None
Create Date: 2021-01-22 00:00:00.000000+00:00

What:  Creates the `clientes` table (see app/models/cliente.py).
Rollback: downgrade() drops the table. Client records are lost; photo files
in the upload directory are left in place.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clientes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(12), nullable=False),
        sa.Column("apellido", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("created_at", sa.Date(), nullable=False),
        # Filename inside the upload directory; NULL until a photo is uploaded
        sa.Column("imagen", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )


def downgrade() -> None:
    op.drop_table("clientes")
