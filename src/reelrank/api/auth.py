"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.database import get_db
from reelrank.models.user import User
from reelrank.schemas.user import Token, UserCreate, UserLogin, UserProfileUpdate, UserResponse
from reelrank.utils.clock import utcnow
from reelrank.utils.security import (
    CurrentUser,
    create_access_token,
    hash_password,
    verify_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Register a new user.

    New accounts are never administrators.

    Raises:
        HTTPException 409: If username or email already exists
    """
    username_result = await db.execute(select(User).where(User.username == user_data.username))
    if username_result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Username already registered")

    email = user_data.email.lower()
    email_result = await db.execute(select(User).where(User.email == email))
    if email_result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Email already registered")

    new_user = User(
        username=user_data.username,
        email=email,
        hashed_password=hash_password(user_data.password),
        is_admin=False,
        is_active=True,
        created_at=utcnow(),
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)

    return UserResponse.model_validate(new_user)


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate user and return JWT token.

    Accepts either username or email in the username field.

    Raises:
        HTTPException 401: If credentials are invalid
        HTTPException 403: If user account is inactive
    """
    query = select(User).where(
        or_(
            User.username == credentials.username.lower(),
            User.email == credentials.username.lower(),
        )
    )
    result = await db.execute(query)
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")

    access_token = create_access_token(data={"sub": str(user.id)})
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information."""
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    current_user: CurrentUser,
    profile_data: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the current user's username or profile picture.

    Raises:
        HTTPException 409: If the new username is taken
    """
    if profile_data.username is not None and profile_data.username != current_user.username:
        existing = await db.execute(select(User).where(User.username == profile_data.username))
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=409, detail="Username already registered")
        current_user.username = profile_data.username

    if profile_data.profile_pic is not None:
        current_user.profile_pic = profile_data.profile_pic

    await db.flush()
    await db.refresh(current_user)

    return UserResponse.model_validate(current_user)
