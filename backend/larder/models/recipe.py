from sqlalchemy import Column, String, Integer, Float, Boolean, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from larder.database import Base, BaseMixin


class Recipe(BaseMixin, Base):
    __tablename__ = "recipes"

    # NULL household means a shared/system recipe
    household_id = Column(
        UUID(as_uuid=True), ForeignKey("households.id", ondelete="CASCADE"), nullable=True, index=True
    )
    title = Column(String, nullable=False)
    description = Column(Text)
    instructions = Column(JSONB, default=list)
    prep_time_minutes = Column(Integer)
    cook_time_minutes = Column(Integer)
    servings = Column(Integer)
    difficulty = Column(String)
    cuisine = Column(String)
    image_url = Column(String)
    is_public = Column(Boolean, default=False, nullable=False, index=True)
    added_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    household = relationship("Household", back_populates="recipes")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.created_at",
    )


class RecipeIngredient(BaseMixin, Base):
    __tablename__ = "recipe_ingredients"

    recipe_id = Column(
        UUID(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id"), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    notes = Column(Text)

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", lazy="joined")
