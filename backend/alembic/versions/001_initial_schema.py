"""Initial schema: households, catalog, pantry, recipes, shopping lists

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # --- households ---
    op.create_table(
        "households",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("invite_code", sa.String(8), unique=True, index=True, nullable=False),
        sa.Column("created_by", UUID(as_uuid=True), nullable=False),
        *_timestamps(),
    )

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("external_id", sa.String, unique=True, index=True, nullable=False),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("name", sa.String),
        sa.Column(
            "household_id", UUID(as_uuid=True),
            sa.ForeignKey("households.id", ondelete="SET NULL"), nullable=True, index=True,
        ),
        sa.Column("preferences", JSONB, server_default="{}"),
        *_timestamps(),
    )

    # --- ingredients ---
    op.create_table(
        "ingredients",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String, nullable=False, index=True),
        sa.Column("category", sa.String, nullable=False, server_default="other", index=True),
        sa.Column("default_unit", sa.String),
        *_timestamps(),
    )

    # --- pantry_items ---
    op.create_table(
        "pantry_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "household_id", UUID(as_uuid=True),
            sa.ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("ingredient_id", UUID(as_uuid=True), sa.ForeignKey("ingredients.id"), nullable=False, index=True),
        sa.Column("quantity", sa.Float, nullable=False),
        sa.Column("unit", sa.String, nullable=False),
        sa.Column("expiration_date", sa.DateTime(timezone=True)),
        sa.Column("location", sa.String, index=True),
        sa.Column("notes", sa.Text),
        sa.Column("added_by", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("household_id", "ingredient_id", name="uq_pantry_household_ingredient"),
    )

    # --- recipes ---
    op.create_table(
        "recipes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "household_id", UUID(as_uuid=True),
            sa.ForeignKey("households.id", ondelete="CASCADE"), nullable=True, index=True,
        ),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("instructions", JSONB, server_default="[]"),
        sa.Column("prep_time_minutes", sa.Integer),
        sa.Column("cook_time_minutes", sa.Integer),
        sa.Column("servings", sa.Integer),
        sa.Column("difficulty", sa.String),
        sa.Column("cuisine", sa.String),
        sa.Column("image_url", sa.String),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false", index=True),
        sa.Column("added_by", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )

    # --- recipe_ingredients ---
    op.create_table(
        "recipe_ingredients",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "recipe_id", UUID(as_uuid=True),
            sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("ingredient_id", UUID(as_uuid=True), sa.ForeignKey("ingredients.id"), nullable=False, index=True),
        sa.Column("quantity", sa.Float, nullable=False),
        sa.Column("unit", sa.String, nullable=False),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )

    # --- shopping_lists ---
    op.create_table(
        "shopping_lists",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "household_id", UUID(as_uuid=True),
            sa.ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true", index=True),
        *_timestamps(),
    )

    # --- shopping_list_items ---
    op.create_table(
        "shopping_list_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "list_id", UUID(as_uuid=True),
            sa.ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("ingredient_id", UUID(as_uuid=True), sa.ForeignKey("ingredients.id"), nullable=False, index=True),
        sa.Column("quantity", sa.Float, nullable=False),
        sa.Column("unit", sa.String, nullable=False),
        sa.Column("is_purchased", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("notes", sa.Text),
        sa.Column("added_by", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("list_id", "ingredient_id", name="uq_shopping_list_ingredient"),
    )


def downgrade() -> None:
    op.drop_table("shopping_list_items")
    op.drop_table("shopping_lists")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("pantry_items")
    op.drop_table("ingredients")
    op.drop_table("users")
    op.drop_table("households")
