"""create directory tables

Revision ID: 4f1c2a9d0e01
Revises:
Create Date: 2026-09-14 10:12:03.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "4f1c2a9d0e01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Master staff as delivered by the CFMS load: dates and status are raw text.
    op.create_table(
        "ext_cfms_stg_t",
        sa.Column("employeeid", sa.String(length=20), primary_key=True),
        sa.Column("cfms_id", sa.String(length=20), nullable=True),
        sa.Column("name", sa.String(length=150), nullable=True),
        sa.Column("surname", sa.String(length=100), nullable=True),
        sa.Column("fathername", sa.String(length=150), nullable=True),
        sa.Column("designation", sa.String(length=150), nullable=True),
        sa.Column("desgcode", sa.String(length=20), nullable=True),
        sa.Column("position_name", sa.String(length=150), nullable=True),
        sa.Column("dept_id", sa.Integer(), nullable=True),
        sa.Column("department_name", sa.String(length=150), nullable=True),
        sa.Column("department_code", sa.String(length=20), nullable=True),
        sa.Column("distcode", sa.String(length=20), nullable=True),
        sa.Column("distname", sa.String(length=100), nullable=True),
        sa.Column("description_long", sa.String(length=200), nullable=True),
        sa.Column("mobileno", sa.String(length=15), nullable=True),
        sa.Column("email1", sa.String(length=150), nullable=True),
        sa.Column("doj", sa.String(length=30), nullable=True),
        sa.Column("dor", sa.String(length=30), nullable=True),
        sa.Column("dob", sa.String(length=30), nullable=True),
        sa.Column("basicpay", sa.Float(), nullable=True),
        sa.Column("gross", sa.Float(), nullable=True),
        sa.Column("gender_desc", sa.String(length=20), nullable=True),
        sa.Column("employee_status", sa.String(length=50), nullable=True),
    )
    op.create_index("ix_ext_cfms_stg_t_cfms_id", "ext_cfms_stg_t", ["cfms_id"])

    op.create_table(
        "cdma_cmsnr_drctry",
        sa.Column("sno", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("cfms_id", sa.String(length=20), nullable=False),
        sa.Column("employee_id", sa.String(length=20), nullable=True),
        sa.Column("employee_name", sa.String(length=150), nullable=True),
        sa.Column("sir_name", sa.String(length=100), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("mobile_no", sa.String(length=15), nullable=True),
        sa.Column("email", sa.String(length=150), nullable=True),
        sa.Column("position", sa.String(length=150), nullable=True),
        sa.Column("role", sa.String(length=100), nullable=True),
        sa.Column("designation", sa.String(length=150), nullable=True),
        sa.Column("department", sa.String(length=150), nullable=True),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("district", sa.String(length=150), nullable=True),
        sa.Column("district_code", sa.String(length=20), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("doj", sa.Date(), nullable=True),
        sa.Column("dor", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="ACTIVE"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_cdma_cmsnr_drctry_employee_id", "cdma_cmsnr_drctry", ["employee_id"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor", sa.String(length=100), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("event_metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_audit_events_entity_id", "audit_events", ["entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_entity_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index("ix_cdma_cmsnr_drctry_employee_id", table_name="cdma_cmsnr_drctry")
    op.drop_table("cdma_cmsnr_drctry")
    op.drop_index("ix_ext_cfms_stg_t_cfms_id", table_name="ext_cfms_stg_t")
    op.drop_table("ext_cfms_stg_t")
