"""
User endpoints: anonymous sign-up and the profile used by health metrics.
"""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from trinity.db.database import get_db
from trinity.domain.measurements import Gender
from trinity.models.user import User
from trinity.utils.auth import get_current_user_id
from trinity.utils.jwt import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


class AnonymousUserResponse(BaseModel):
    """Anonymous user creation response."""

    user_id: UUID
    token: str
    is_anonymous: bool = True


class UserInfoResponse(BaseModel):
    """Current user information response."""

    user_id: UUID
    email: str | None
    is_anonymous: bool
    gender: str | None
    age: int | None


class UserProfileUpdateRequest(BaseModel):
    """Request model for updating user profile."""

    gender: Gender | None = Field(None, description="Gender: 'male' or 'female'")
    age: int | None = Field(None, ge=1, le=150, description="Age in years")


def _user_info(user: User) -> UserInfoResponse:
    return UserInfoResponse(
        user_id=user.user_id,
        email=user.email,
        is_anonymous=user.is_anonymous,
        gender=user.gender,
        age=user.age,
    )


def _load_user(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.post(
    "/anonymous",
    response_model=AnonymousUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_anonymous_user(
    db: Session = Depends(get_db),
):
    """
    Create an anonymous user for first-time app usage.

    Returns the new user_id and a bearer token for it, so check-ins can be
    recorded before the user completes onboarding.
    """
    user = User(email=None, is_anonymous=True)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"[USERS] Created anonymous user {user.user_id}")

    return AnonymousUserResponse(
        user_id=user.user_id,
        token=create_access_token(user.user_id),
    )


@router.get("/me", response_model=UserInfoResponse, status_code=status.HTTP_200_OK)
async def get_current_user_info(
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Current authenticated user information."""
    return _user_info(_load_user(db, current_user_id))


@router.put(
    "/me/profile", response_model=UserInfoResponse, status_code=status.HTTP_200_OK
)
async def update_user_profile(
    request: UserProfileUpdateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Update current user's profile (gender and age).

    Gender selects the Navy formula; age selects the ideal body fat bracket.
    """
    user = _load_user(db, current_user_id)

    if request.gender is not None:
        user.gender = request.gender.value
    if request.age is not None:
        user.age = request.age

    db.commit()
    db.refresh(user)

    return _user_info(user)
