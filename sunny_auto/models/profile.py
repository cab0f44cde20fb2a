from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    """The signed-in Supabase auth user, as far as this backend cares."""
    id: str
    email: str
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class Profile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
