"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from app.db.database import get_db_session
from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.services.store_service import now_iso
from app.services.team_service import normalize_email
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    After registration, login to get access token, then create profile.
    """
    email = normalize_email(request.email)
    with get_db_session() as db:
        # Check email exists
        result = db.execute(
            text("SELECT user_id FROM users WHERE email = :email"),
            {"email": email}
        )
        if result.fetchone():
            raise HTTPException(status_code=400, detail="Email already registered")

        # Create user
        db.execute(
            text("""
                INSERT INTO users (email, password_hash, created_at)
                VALUES (:email, :password_hash, :created_at)
            """),
            {
                "email": email,
                "password_hash": hash_password(request.password),
                "created_at": now_iso()
            }
        )

    logger.info("Registered user %s", email)
    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    email = normalize_email(request.email)
    with get_db_session() as db:
        result = db.execute(
            text("SELECT user_id, password_hash FROM users WHERE email = :email"),
            {"email": email}
        )
        user = result.fetchone()

    if not user or not verify_password(request.password, user[1]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": email})

    return TokenResponse(access_token=token, email=email)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT user_id, email, created_at FROM users WHERE user_id = :id"),
            {"id": user["user_id"]}
        )
        row = result.fetchone()

    return UserResponse(user_id=row[0], email=row[1], created_at=row[2])
