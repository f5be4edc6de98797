"""Fuel transaction and vehicle mapping schema

Revision ID: 20261018_01
Revises: None
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "vehicle",
        sa.Column("vehicle_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_number", sa.String(20), nullable=False),
        sa.Column("telematics_unit_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("vehicle_number", name="uq_vehicle_vehicle_number"),
    )
    op.create_index("ix_vehicle_telematics_unit_id", "vehicle", ["telematics_unit_id"])

    op.create_table(
        "fuel_transaction",
        sa.Column("transaction_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_number", sa.String(20), nullable=False),
        sa.Column("card_number", sa.String(50), nullable=True),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column("station_name", sa.String(255), nullable=True),
        sa.Column("station_country", sa.String(100), nullable=True),
        sa.Column("product_type", sa.String(50), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 3), nullable=False),
        sa.Column("unit", sa.String(10), nullable=False, server_default="L"),
        sa.Column("unit_price", sa.Numeric(10, 4), nullable=True),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("original_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("original_currency", sa.String(10), nullable=True),
        sa.Column("telematics_unit_id", sa.Integer(), nullable=True),
        sa.Column("enrichment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("gps_latitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("gps_longitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("odometer_gps", sa.Integer(), nullable=True),
        sa.Column("enriched_at", sa.DateTime(), nullable=True),
        sa.Column("import_batch_id", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "enrichment_status IN ('pending', 'enriched', 'failed')",
            name="ck_fuel_transaction_enrichment_status",
        ),
    )
    op.create_index("ix_fuel_transaction_vehicle_date", "fuel_transaction", ["vehicle_number", "transaction_date"])
    op.create_index("ix_fuel_transaction_card_number", "fuel_transaction", ["card_number"])
    op.create_index("ix_fuel_transaction_import_batch_id", "fuel_transaction", ["import_batch_id"])
    op.create_index(
        "ix_fuel_transaction_enrichment_status",
        "fuel_transaction",
        ["enrichment_status", "telematics_unit_id"],
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_fuel_transaction_enrichment_status", table_name="fuel_transaction")
    op.drop_index("ix_fuel_transaction_import_batch_id", table_name="fuel_transaction")
    op.drop_index("ix_fuel_transaction_card_number", table_name="fuel_transaction")
    op.drop_index("ix_fuel_transaction_vehicle_date", table_name="fuel_transaction")
    op.drop_table("fuel_transaction")
    op.drop_index("ix_vehicle_telematics_unit_id", table_name="vehicle")
    op.drop_table("vehicle")
