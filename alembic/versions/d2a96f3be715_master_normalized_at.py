"""track when master rows were normalized

Revision ID: d2a96f3be715
Revises: b7e35d21c4a8
Create Date: 2026-10-19 11:05:42.381950
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "d2a96f3be715"
down_revision: Union[str, None] = "b7e35d21c4a8"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("ext_cfms_stg_t", sa.Column("normalized_at", sa.DateTime(timezone=True), nullable=True))
    op.create_index("ix_ext_cfms_stg_t_normalized_at", "ext_cfms_stg_t", ["normalized_at"])

    # Every existing row was backfilled by the previous revision.
    master = sa.table("ext_cfms_stg_t", sa.column("normalized_at", sa.DateTime(timezone=True)))
    op.get_bind().execute(master.update().values(normalized_at=sa.func.now()))


def downgrade() -> None:
    op.drop_index("ix_ext_cfms_stg_t_normalized_at", table_name="ext_cfms_stg_t")
    op.drop_column("ext_cfms_stg_t", "normalized_at")
