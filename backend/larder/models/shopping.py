from sqlalchemy import Column, String, Float, Boolean, Text, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from larder.database import Base, BaseMixin


class ShoppingList(BaseMixin, Base):
    __tablename__ = "shopping_lists"

    household_id = Column(
        UUID(as_uuid=True), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    household = relationship("Household", back_populates="shopping_lists")
    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItem.created_at",
    )


class ShoppingListItem(BaseMixin, Base):
    __tablename__ = "shopping_list_items"
    __table_args__ = (
        UniqueConstraint("list_id", "ingredient_id", name="uq_shopping_list_ingredient"),
    )

    list_id = Column(
        UUID(as_uuid=True), ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id"), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    is_purchased = Column(Boolean, default=False, nullable=False)
    notes = Column(Text)
    added_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    shopping_list = relationship("ShoppingList", back_populates="items")
    ingredient = relationship("Ingredient", lazy="joined")
