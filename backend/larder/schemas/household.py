from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field


class HouseholdCreate(BaseModel):
    name: str = Field(min_length=1)


class HouseholdJoin(BaseModel):
    invite_code: str


class HouseholdRename(BaseModel):
    name: str = Field(min_length=1)


class HouseholdMember(BaseModel):
    id: UUID
    name: str | None
    email: str
    is_creator: bool


class HouseholdResponse(BaseModel):
    id: UUID
    name: str
    invite_code: str
    created_by: UUID
    created_at: datetime
    members: list[HouseholdMember] = []


class HouseholdCreated(BaseModel):
    household_id: UUID
    invite_code: str


class HouseholdJoined(BaseModel):
    household_id: UUID
    household_name: str


class HouseholdLeft(BaseModel):
    household_deleted: bool


class HouseholdEnsured(BaseModel):
    household_id: UUID
    created: bool


class InviteCodeResponse(BaseModel):
    invite_code: str
