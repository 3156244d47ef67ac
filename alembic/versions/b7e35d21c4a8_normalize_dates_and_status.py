"""normalize dates and status, unique cfms_id

Revision ID: b7e35d21c4a8
Revises: 4f1c2a9d0e01
Create Date: 2026-09-21 15:47:29.604117
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from personnel_directory.core.dates import parse_date
from personnel_directory.core.status import status_bucket

revision: str = "b7e35d21c4a8"
down_revision: Union[str, None] = "4f1c2a9d0e01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("ext_cfms_stg_t", sa.Column("dob_date", sa.Date(), nullable=True))
    op.add_column("ext_cfms_stg_t", sa.Column("doj_date", sa.Date(), nullable=True))
    op.add_column("ext_cfms_stg_t", sa.Column("dor_date", sa.Date(), nullable=True))
    op.add_column(
        "ext_cfms_stg_t",
        sa.Column("status_bucket", sa.String(length=20), nullable=False, server_default="other"),
    )
    op.create_index("ix_ext_cfms_stg_t_dob_date", "ext_cfms_stg_t", ["dob_date"])
    op.create_index("ix_ext_cfms_stg_t_dor_date", "ext_cfms_stg_t", ["dor_date"])
    op.create_index("ix_ext_cfms_stg_t_status_bucket", "ext_cfms_stg_t", ["status_bucket"])

    op.add_column(
        "cdma_cmsnr_drctry",
        sa.Column("status_bucket", sa.String(length=20), nullable=False, server_default="regular"),
    )
    op.create_index("ix_cdma_cmsnr_drctry_status_bucket", "cdma_cmsnr_drctry", ["status_bucket"])

    # Backfill in Python: the raw dates are free text and the status mapping
    # lives in the application.
    conn = op.get_bind()
    master = sa.table(
        "ext_cfms_stg_t",
        sa.column("employeeid", sa.String),
        sa.column("dob", sa.String),
        sa.column("doj", sa.String),
        sa.column("dor", sa.String),
        sa.column("employee_status", sa.String),
        sa.column("dob_date", sa.Date),
        sa.column("doj_date", sa.Date),
        sa.column("dor_date", sa.Date),
        sa.column("status_bucket", sa.String),
    )
    rows = conn.execute(
        sa.select(master.c.employeeid, master.c.dob, master.c.doj, master.c.dor, master.c.employee_status)
    ).all()
    for r in rows:
        conn.execute(
            master.update()
            .where(master.c.employeeid == r.employeeid)
            .values(
                dob_date=parse_date(r.dob),
                doj_date=parse_date(r.doj),
                dor_date=parse_date(r.dor),
                status_bucket=status_bucket(r.employee_status).value,
            )
        )

    directory = sa.table(
        "cdma_cmsnr_drctry",
        sa.column("sno", sa.BigInteger),
        sa.column("status", sa.String),
        sa.column("status_bucket", sa.String),
    )
    for r in conn.execute(sa.select(directory.c.sno, directory.c.status)).all():
        conn.execute(
            directory.update()
            .where(directory.c.sno == r.sno)
            .values(status_bucket=status_bucket(r.status).value)
        )

    # Fails loudly if duplicates already exist; clean them up first.
    op.create_unique_constraint("uq_cmsnr_drctry_cfms_id", "cdma_cmsnr_drctry", ["cfms_id"])


def downgrade() -> None:
    op.drop_constraint("uq_cmsnr_drctry_cfms_id", "cdma_cmsnr_drctry", type_="unique")
    op.drop_index("ix_cdma_cmsnr_drctry_status_bucket", table_name="cdma_cmsnr_drctry")
    op.drop_column("cdma_cmsnr_drctry", "status_bucket")

    op.drop_index("ix_ext_cfms_stg_t_status_bucket", table_name="ext_cfms_stg_t")
    op.drop_index("ix_ext_cfms_stg_t_dor_date", table_name="ext_cfms_stg_t")
    op.drop_index("ix_ext_cfms_stg_t_dob_date", table_name="ext_cfms_stg_t")
    op.drop_column("ext_cfms_stg_t", "status_bucket")
    op.drop_column("ext_cfms_stg_t", "dor_date")
    op.drop_column("ext_cfms_stg_t", "doj_date")
    op.drop_column("ext_cfms_stg_t", "dob_date")
