"""
Identity boundary. Sign-in happens at an external provider, which hands the
client a signed JWT; the ``sub`` claim is the user's external identity.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from larder.config import get_settings
from larder.database import get_db
from larder.models.user import User
from larder.services.users import get_by_external_id

bearer_scheme = HTTPBearer(auto_error=False)


def create_identity_token(subject: str, expires_minutes: int = 60, **claims) -> str:
    """Mint a token the way the identity provider does. Used by tests and local tooling."""
    settings = get_settings()
    payload = {
        **claims,
        "sub": subject,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    subject = decode_token(credentials.credentials).get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has no subject")
    return subject


def get_current_user(
    external_id: str = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    user = get_by_external_id(db, external_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not registered. Call /api/v1/users/store after sign-in.",
        )
    return user


def get_household_id(current_user: User = Depends(get_current_user)) -> UUID:
    if not current_user.household_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You are not in a household")
    return current_user.household_id
