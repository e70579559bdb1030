from uuid import UUID

from sqlalchemy.orm import Session

from larder.errors import NotFoundError
from larder.models.user import User


def get_by_external_id(db: Session, external_id: str) -> User | None:
    return db.query(User).filter(User.external_id == external_id).first()


def store_user(db: Session, external_id: str, email: str, name: str | None = None) -> User:
    """Get-or-create on sign-in. A changed display name is written back."""
    user = get_by_external_id(db, external_id)
    if user:
        if name and user.name != name:
            user.name = name
            db.commit()
            db.refresh(user)
        return user

    user = User(external_id=external_id, email=email, name=name, preferences={})
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_preferences(db: Session, user_id: UUID, auto_add_items: bool) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    # Reassign rather than mutate: the JSON column does not track in-place changes.
    user.preferences = {**(user.preferences or {}), "auto_add_items": auto_add_items}
    db.commit()
    db.refresh(user)
    return user
