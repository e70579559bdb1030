from sqlalchemy import Column, String, Float, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from larder.database import Base, BaseMixin


class PantryItem(BaseMixin, Base):
    __tablename__ = "pantry_items"
    __table_args__ = (
        UniqueConstraint("household_id", "ingredient_id", name="uq_pantry_household_ingredient"),
    )

    household_id = Column(
        UUID(as_uuid=True), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id"), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    expiration_date = Column(DateTime(timezone=True))
    location = Column(String, index=True)
    notes = Column(Text)
    added_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    household = relationship("Household", back_populates="pantry_items")
    ingredient = relationship("Ingredient", lazy="joined")
