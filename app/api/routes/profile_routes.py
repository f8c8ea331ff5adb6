"""
Profile Routes

GET /profile - Get own profile
PUT /profile - Create or update own profile
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.core.errors import NotFoundError
from app.db.database import get_db_session
from app.services.store_service import ProfileStore
from app.schemas.schemas import ProfileUpdate, ProfileResponse

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current user's profile."""
    with get_db_session() as db:
        profile = ProfileStore(db).find_by_email(user["email"])
    if profile is None:
        raise NotFoundError("Profile not found. Create profile first.")
    return ProfileResponse.from_profile(profile)


@router.put("", response_model=ProfileResponse)
async def upsert_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Create the profile, or update only the provided fields."""
    with get_db_session() as db:
        profile = ProfileStore(db).upsert(user["email"], data.model_dump())
    return ProfileResponse.from_profile(profile)
