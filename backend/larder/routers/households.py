from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.household import (
    HouseholdCreate, HouseholdJoin, HouseholdRename, HouseholdResponse,
    HouseholdCreated, HouseholdJoined, HouseholdLeft, HouseholdEnsured,
    InviteCodeResponse,
)
from larder.services import households as household_service
from larder.utils.auth import get_current_user

router = APIRouter()


@router.get("/me", response_model=HouseholdResponse | None)
def my_household(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.get_my_household(db, current_user.id)


@router.post("/", response_model=HouseholdCreated, status_code=201)
def create_household(
    body: HouseholdCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.create_household(db, current_user.id, body.name)


@router.post("/ensure", response_model=HouseholdEnsured)
def ensure_household(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.ensure_household(db, current_user.id)


@router.post("/join", response_model=HouseholdJoined)
def join_household(
    body: HouseholdJoin,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.join_household(db, current_user.id, body.invite_code)


@router.post("/leave", response_model=HouseholdLeft)
def leave_household(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.leave_household(db, current_user.id)


@router.post("/invite-code", response_model=InviteCodeResponse)
def regenerate_invite_code(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return household_service.regenerate_invite_code(db, current_user.id)


@router.patch("/name", status_code=204)
def rename_household(
    body: HouseholdRename,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    household_service.update_household_name(db, current_user.id, body.name)
