"""Initial schema — locations, currencies, offices, rates and working hours.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "countries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("code", sa.String(3), nullable=True),
    )

    op.create_table(
        "cities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("country_id", sa.Integer, sa.ForeignKey("countries.id"), nullable=True),
    )

    op.create_table(
        "currencies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(3), unique=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("symbol", sa.String(10), nullable=True),
    )

    op.create_table(
        "offices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("office_name", sa.String(200), nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("city_id", sa.Integer, sa.ForeignKey("cities.id"), nullable=True),
        sa.Column("country_id", sa.Integer, sa.ForeignKey("countries.id"), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("slug", sa.String(200), unique=True, nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("primary_phone_number", sa.String(30), nullable=True),
        sa.Column("secondary_phone_number", sa.String(30), nullable=True),
        sa.Column("third_phone_number", sa.String(30), nullable=True),
        sa.Column("whatsapp_number", sa.String(30), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_offices_lat_lon", "offices", ["latitude", "longitude"])

    op.create_table(
        "office_rates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "office_id", sa.Integer,
            sa.ForeignKey("offices.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "base_currency_id", sa.Integer, sa.ForeignKey("currencies.id"), nullable=False
        ),
        sa.Column(
            "target_currency_id", sa.Integer, sa.ForeignKey("currencies.id"), nullable=False
        ),
        sa.Column("buy_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("sell_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("buy_rate > 0", name="ck_office_rates_buy_positive"),
        sa.CheckConstraint("sell_rate > 0", name="ck_office_rates_sell_positive"),
    )
    op.create_index("idx_office_rates_office", "office_rates", ["office_id"])
    op.create_index(
        "idx_office_rates_pair", "office_rates", ["base_currency_id", "target_currency_id"]
    )

    op.create_table(
        "working_hours",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "office_id", sa.Integer,
            sa.ForeignKey("offices.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("day_of_week", sa.String(10), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("from_time", sa.String(5), nullable=True),
        sa.Column("to_time", sa.String(5), nullable=True),
        sa.Column("has_break", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("break_from_time", sa.String(5), nullable=True),
        sa.Column("break_to_time", sa.String(5), nullable=True),
        sa.UniqueConstraint("office_id", "day_of_week", name="uq_working_hours_office_day"),
    )


def downgrade() -> None:
    op.drop_table("working_hours")
    op.drop_table("office_rates")
    op.drop_table("offices")
    op.drop_table("currencies")
    op.drop_table("cities")
    op.drop_table("countries")
