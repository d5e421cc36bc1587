"""Initial migration - create all tables

Revision ID: 3c1d9e7a5b20
Revises: 
Create Date: 2026-10-18 09:12:44.118205

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c1d9e7a5b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: create all tables from current models."""
    from homestead.database import Base
    from homestead import models  # noqa: F401

    bind = op.get_bind()
    Base.metadata.create_all(bind=bind)


def downgrade() -> None:
    """Downgrade schema: drop all tables (in reverse dependency order)."""
    from homestead.database import Base
    from homestead import models  # noqa: F401

    bind = op.get_bind()
    Base.metadata.drop_all(bind=bind)
