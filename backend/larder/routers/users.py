from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.user import PreferencesUpdate, StoreUserRequest, UserResponse
from larder.services import users as user_service
from larder.utils.auth import get_current_user, get_identity

router = APIRouter()


@router.post("/store", response_model=UserResponse)
def store_user(
    body: StoreUserRequest,
    external_id: str = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return user_service.store_user(db, external_id, body.email, body.name)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me/preferences", response_model=UserResponse)
def update_preferences(
    body: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_preferences(db, current_user.id, body.auto_add_items)
