from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from larder.database import Base, BaseMixin


class Household(BaseMixin, Base):
    __tablename__ = "households"

    name = Column(String, nullable=False)
    invite_code = Column(String(8), unique=True, index=True, nullable=False)
    # Plain identifier, not a foreign key: users.household_id already points the other way.
    created_by = Column(UUID(as_uuid=True), nullable=False)

    members = relationship("User", back_populates="household")
    pantry_items = relationship("PantryItem", back_populates="household", cascade="all, delete-orphan")
    recipes = relationship("Recipe", back_populates="household", cascade="all, delete-orphan")
    shopping_lists = relationship("ShoppingList", back_populates="household", cascade="all, delete-orphan")
