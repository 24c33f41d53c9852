"""
Response models shared by the user, session and micropost routers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    """Response model for user data (digests are never exposed)."""
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MicropostResponse(BaseModel):
    """Response model for micropost data."""
    id: int
    user_id: int
    content: str
    location: Optional[str] = None
    event_date: datetime
    created_at: datetime

    class Config:
        from_attributes = True
