"""supplier_offers table + v_price_history view

Revision ID: 0001_supplier_offers
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from pricedesk.db import OFFERS_TABLE, PRICE_HISTORY_VIEW, price_history_view_sql


revision = "0001_supplier_offers"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        OFFERS_TABLE,
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("supplier", sa.String(256), nullable=True),
        sa.Column("source_sku", sa.String(128), nullable=True),
        sa.Column("price", sa.Numeric(24, 10), nullable=True),
        sa.Column("currency", sa.String(8), nullable=True),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("product_id", sa.String(64), nullable=True),
    )
    op.create_index(f"ix_{OFFERS_TABLE}_supplier", OFFERS_TABLE, ["supplier"])
    op.create_index(f"ix_{OFFERS_TABLE}_source_sku", OFFERS_TABLE, ["source_sku"])
    op.create_index(f"ix_{OFFERS_TABLE}_observed_at", OFFERS_TABLE, ["observed_at"])
    op.create_index(f"ix_{OFFERS_TABLE}_product_id", OFFERS_TABLE, ["product_id"])

    op.execute(price_history_view_sql(op.get_bind().dialect.name))


def downgrade() -> None:
    op.execute(f"DROP VIEW IF EXISTS {PRICE_HISTORY_VIEW}")
    op.drop_index(f"ix_{OFFERS_TABLE}_product_id", table_name=OFFERS_TABLE)
    op.drop_index(f"ix_{OFFERS_TABLE}_observed_at", table_name=OFFERS_TABLE)
    op.drop_index(f"ix_{OFFERS_TABLE}_source_sku", table_name=OFFERS_TABLE)
    op.drop_index(f"ix_{OFFERS_TABLE}_supplier", table_name=OFFERS_TABLE)
    op.drop_table(OFFERS_TABLE)
