"""
Household Registry: groups users under one pantry, recipe collection and shopping list.

A user belongs to at most one household. Invite codes are 8 characters from
an alphabet without the look-alikes 0/O and 1/I, unique across households.
"""

import logging
import secrets
from typing import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from larder.config import get_settings
from larder.errors import InvariantError, NotFoundError
from larder.models.household import Household
from larder.models.user import User

logger = logging.getLogger(__name__)

INVITE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 8


def generate_invite_code(
    alphabet: str = INVITE_ALPHABET,
    length: int = INVITE_CODE_LENGTH,
    choice: Callable[[str], str] = secrets.choice,
) -> str:
    return "".join(choice(alphabet) for _ in range(length))


def allocate_invite_code(
    exists: Callable[[str], bool],
    alphabet: str = INVITE_ALPHABET,
    length: int = INVITE_CODE_LENGTH,
    max_attempts: int | None = None,
    choice: Callable[[str], str] = secrets.choice,
) -> str:
    """Draw codes until ``exists`` reports one as free."""
    attempts = max_attempts or get_settings().INVITE_CODE_MAX_ATTEMPTS
    for _ in range(attempts):
        code = generate_invite_code(alphabet, length, choice)
        if not exists(code):
            return code
    raise RuntimeError(f"Could not find a free invite code after {attempts} attempts")


def _code_taken(db: Session) -> Callable[[str], bool]:
    def exists(code: str) -> bool:
        return db.query(Household.id).filter(Household.invite_code == code).first() is not None
    return exists


def _get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _members(db: Session, household_id: UUID) -> list[User]:
    return db.query(User).filter(
        User.household_id == household_id
    ).order_by(User.created_at.asc(), User.id.asc()).all()


def get_my_household(db: Session, user_id: UUID) -> dict | None:
    user = _get_user(db, user_id)
    if not user.household_id:
        return None
    household = db.get(Household, user.household_id)
    if not household:
        return None
    return {
        "id": household.id,
        "name": household.name,
        "invite_code": household.invite_code,
        "created_by": household.created_by,
        "created_at": household.created_at,
        "members": [
            {"id": m.id, "name": m.name, "email": m.email, "is_creator": m.id == household.created_by}
            for m in _members(db, household.id)
        ],
    }


def _insert_household(db: Session, user: User, name: str) -> Household:
    household = Household(
        name=name,
        invite_code=allocate_invite_code(_code_taken(db)),
        created_by=user.id,
    )
    db.add(household)
    db.flush()
    user.household_id = household.id
    db.commit()
    db.refresh(household)
    logger.info(f"User {user.id} created household {household.id} ({household.name!r})")
    return household


def create_household(db: Session, user_id: UUID, name: str) -> dict:
    user = _get_user(db, user_id)
    if user.household_id:
        raise InvariantError("You are already in a household. Leave it first to create a new one.")
    household = _insert_household(db, user, name)
    return {"household_id": household.id, "invite_code": household.invite_code}


def ensure_household(db: Session, user_id: UUID) -> dict:
    """Give a user without a household a default one."""
    user = _get_user(db, user_id)
    if user.household_id:
        return {"household_id": user.household_id, "created": False}
    name = f"{user.name}'s Household" if user.name else "My Household"
    household = _insert_household(db, user, name)
    return {"household_id": household.id, "created": True}


def join_household(db: Session, user_id: UUID, invite_code: str) -> dict:
    user = _get_user(db, user_id)
    if user.household_id:
        raise InvariantError("You are already in a household. Leave it first to join another.")

    code = invite_code.strip().upper()
    household = db.query(Household).filter(Household.invite_code == code).first()
    if not household:
        raise InvariantError("Invalid invite code. Please check and try again.")

    user.household_id = household.id
    db.commit()
    logger.info(f"User {user.id} joined household {household.id}")
    return {"household_id": household.id, "household_name": household.name}


def leave_household(db: Session, user_id: UUID) -> dict:
    """
    Remove the user from their household.

    The last member out deletes the household. A departing creator hands
    ownership to the longest-standing remaining member.
    """
    user = _get_user(db, user_id)
    if not user.household_id:
        raise InvariantError("You are not in a household")
    household = db.get(Household, user.household_id)
    if not household:
        raise NotFoundError("Household not found")

    members = _members(db, household.id)
    user.household_id = None

    if len(members) <= 1:
        db.flush()
        db.delete(household)
        db.commit()
        logger.info(f"Household {household.id} deleted after its last member left")
        return {"household_deleted": True}

    if household.created_by == user.id:
        new_owner = next((m for m in members if m.id != user.id), None)
        if new_owner:
            household.created_by = new_owner.id
            logger.info(f"Household {household.id} ownership transferred to {new_owner.id}")

    db.commit()
    return {"household_deleted": False}


def regenerate_invite_code(db: Session, user_id: UUID) -> dict:
    user = _get_user(db, user_id)
    if not user.household_id:
        raise InvariantError("You are not in a household")
    household = db.get(Household, user.household_id)
    if not household:
        raise NotFoundError("Household not found")

    household.invite_code = allocate_invite_code(_code_taken(db))
    db.commit()
    return {"invite_code": household.invite_code}


def update_household_name(db: Session, user_id: UUID, name: str) -> None:
    user = _get_user(db, user_id)
    if not user.household_id:
        raise InvariantError("You are not in a household")
    household = db.get(Household, user.household_id)
    if not household:
        raise NotFoundError("Household not found")
    household.name = name
    db.commit()
