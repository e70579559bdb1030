from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from larder.database import Base, BaseMixin


class User(BaseMixin, Base):
    __tablename__ = "users"

    external_id = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=False)
    name = Column(String)
    household_id = Column(
        UUID(as_uuid=True), ForeignKey("households.id", ondelete="SET NULL"), nullable=True, index=True
    )
    preferences = Column(JSONB, default=dict)

    household = relationship("Household", back_populates="members")

    @property
    def auto_add_items(self) -> bool:
        return bool((self.preferences or {}).get("auto_add_items", False))
