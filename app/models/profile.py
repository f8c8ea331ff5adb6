from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Profile(BaseModel):
    profile_id: int
    email: str
    name: Optional[str] = None
    year: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    availability: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Teammate(BaseModel):
    """A confirmed member joined with whatever profile fields could be found."""
    email: str
    name: Optional[str] = None
    profile_id: Optional[int] = None
    year: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    availability: Optional[str] = None
    added_at: datetime
