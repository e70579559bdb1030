from datetime import datetime
from uuid import UUID
from pydantic import BaseModel


class StoreUserRequest(BaseModel):
    email: str
    name: str | None = None


class PreferencesUpdate(BaseModel):
    auto_add_items: bool


class UserResponse(BaseModel):
    id: UUID
    external_id: str
    email: str
    name: str | None
    household_id: UUID | None
    preferences: dict | None
    created_at: datetime

    model_config = {"from_attributes": True}
