from sqlalchemy import Column, String

from larder.database import Base, BaseMixin


class Ingredient(BaseMixin, Base):
    __tablename__ = "ingredients"

    # Case-insensitively unique by convention only; see larder.tasks.ingredient_dedup.
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, default="other", index=True)
    default_unit = Column(String)
