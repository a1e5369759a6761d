"""initial ledger and procurement schema

Revision ID: 4b1f0c2a9d10
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1f0c2a9d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# mêmes types que stockroom.app.db.base / models_v1
PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

ROLE = sa.Enum("administrator", "manager", "staff", name="role")
MOVEMENT_TYPE = sa.Enum("inflow", "outflow", "adjustment", name="movement_type")
ADJUSTMENT_DIRECTION = sa.Enum("increase", "decrease", name="adjustment_direction")
REQUEST_STATUS = sa.Enum(
    "pending", "approved", "rejected", "sent", "received", "archived",
    name="request_status",
)


def upgrade() -> None:
    op.create_table(
        "areas",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
    )
    op.create_table(
        "warehouses",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("location", sa.String(255)),
    )
    op.create_table(
        "suppliers",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("phone_number", sa.String(64)),
    )
    op.create_table(
        "categories",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("is_stockable", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "products",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.Column("minimum_stock", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(64), unique=True),
        sa.Column("supplier_id", PK, sa.ForeignKey("suppliers.id", ondelete="SET NULL")),
        sa.Column("category_id", PK, sa.ForeignKey("categories.id", ondelete="SET NULL")),
        sa.Column("warehouse_id", PK, sa.ForeignKey("warehouses.id", ondelete="SET NULL")),
        sa.CheckConstraint("minimum_stock >= 0", name="ck_product_minimum_stock_nonneg"),
    )
    op.create_table(
        "users",
        sa.Column("email", sa.String(255), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("area_id", PK, sa.ForeignKey("areas.id", ondelete="SET NULL")),
        sa.Column("category_ids", sa.JSON(), nullable=False),
        sa.Column("can_receive_orders", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "movements",
        sa.Column("id", PK, primary_key=True),
        sa.Column("product_id", PK, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("movement_type", MOVEMENT_TYPE, nullable=False),
        sa.Column("direction", ADJUSTMENT_DIRECTION),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(255)),
        sa.Column("happened_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_email", sa.String(255), sa.ForeignKey("users.email", ondelete="SET NULL")),
        sa.CheckConstraint("quantity > 0", name="ck_movement_qty_pos"),
    )
    op.create_index("ix_movements_product_id", "movements", ["product_id"])
    op.create_index("ix_movements_time", "movements", ["happened_at", "id"])

    op.create_table(
        "purchase_requests",
        sa.Column("id", PK, primary_key=True),
        sa.Column("status", REQUEST_STATUS, nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        sa.Column("received_at", sa.DateTime(timezone=True)),
        sa.Column("requester_email", sa.String(255), sa.ForeignKey("users.email", ondelete="SET NULL")),
        sa.Column("approved_by", sa.String(255), sa.ForeignKey("users.email", ondelete="SET NULL")),
        sa.Column("received_by", sa.String(255), sa.ForeignKey("users.email", ondelete="SET NULL")),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_purchase_requests_requested_at", "purchase_requests", ["requested_at"])

    op.create_table(
        "purchase_request_items",
        sa.Column("id", PK, primary_key=True),
        sa.Column(
            "request_id",
            PK,
            sa.ForeignKey("purchase_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", PK, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_pr_item_qty_pos"),
    )
    op.create_index("ix_purchase_request_items_request_id", "purchase_request_items", ["request_id"])
    op.create_index("ix_purchase_request_items_product_id", "purchase_request_items", ["product_id"])


def downgrade() -> None:
    op.drop_table("purchase_request_items")
    op.drop_table("purchase_requests")
    op.drop_table("movements")
    op.drop_table("users")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_table("suppliers")
    op.drop_table("warehouses")
    op.drop_table("areas")

    bind = op.get_bind()
    for enum_type in (REQUEST_STATUS, ADJUSTMENT_DIRECTION, MOVEMENT_TYPE, ROLE):
        enum_type.drop(bind, checkfirst=True)
