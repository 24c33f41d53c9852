"""
Micropost API endpoints: event announcements and attendance.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.database import get_db
from app.services import attendance_service, micropost_service, user_service
from app.services.errors import DuplicateEdgeError, EdgeNotFoundError, StorageError
from app.api.routes.schemas import MicropostResponse, UserResponse


router = APIRouter(prefix="/microposts", tags=["microposts"])


# Request/Response models
class CreateMicropostRequest(BaseModel):
    """Request model for creating a micropost."""
    content: str = Field(..., description="Announcement text (max 140 characters)")
    event_date: datetime = Field(..., description="When the event takes place")
    location: Optional[str] = Field(None, description="Where the event takes place")


class AttendanceResponse(BaseModel):
    """Response model for an attendance edge."""
    id: int
    attendee_id: int
    attending_id: int
    created_at: datetime

    class Config:
        from_attributes = True


def _get_micropost_or_404(db: Session, micropost_id: int):
    micropost = micropost_service.get_micropost_by_id(db, micropost_id)
    if not micropost:
        raise HTTPException(status_code=404, detail="Micropost not found")
    return micropost


def _get_user_or_404(db: Session, user_id: int):
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users/{user_id}", response_model=List[MicropostResponse])
async def list_user_microposts(
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    List all microposts by a user, newest first.

    Raises:
        404: User not found
    """
    _get_user_or_404(db, user_id)
    return micropost_service.get_microposts_by_user(db, user_id)


@router.post("/users/{user_id}", response_model=MicropostResponse, status_code=201)
async def create_micropost(
    user_id: int,
    request: CreateMicropostRequest,
    db: Session = Depends(get_db)
):
    """
    Post a new event announcement for a user.

    Raises:
        404: User not found
        400: Invalid micropost data
        500: Database error
    """
    _get_user_or_404(db, user_id)

    try:
        return micropost_service.create_micropost(
            db, user_id, request.content, request.event_date, request.location
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get("/{micropost_id}", response_model=MicropostResponse)
async def get_micropost(
    micropost_id: int,
    db: Session = Depends(get_db)
):
    """
    Get a specific micropost by ID.

    Raises:
        404: Micropost not found
    """
    return _get_micropost_or_404(db, micropost_id)


@router.delete("/{micropost_id}", status_code=204)
async def delete_micropost(
    micropost_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a micropost and its attendances.

    Raises:
        404: Micropost not found
    """
    try:
        success = micropost_service.delete_micropost(db, micropost_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    if not success:
        raise HTTPException(status_code=404, detail="Micropost not found")

    return None


@router.get("/{micropost_id}/attendees", response_model=List[UserResponse])
async def list_attendees(
    micropost_id: int,
    db: Session = Depends(get_db)
):
    """List the users attending a micropost's event."""
    micropost = _get_micropost_or_404(db, micropost_id)
    return attendance_service.get_attendees(db, micropost)


@router.post("/{micropost_id}/attendees/{user_id}", response_model=AttendanceResponse, status_code=201)
async def attend_event(
    micropost_id: int,
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Mark a user as attending a micropost's event.

    Raises:
        404: Micropost or user not found
        409: Already attending
        500: Database error
    """
    micropost = _get_micropost_or_404(db, micropost_id)
    user = _get_user_or_404(db, user_id)

    try:
        return attendance_service.attend(db, user, micropost)
    except DuplicateEdgeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.delete("/{micropost_id}/attendees/{user_id}", status_code=204)
async def unattend_event(
    micropost_id: int,
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Remove a user's attendance of a micropost's event.

    Raises:
        404: Micropost or user not found, or user not attending
        500: Database error
    """
    micropost = _get_micropost_or_404(db, micropost_id)
    user = _get_user_or_404(db, user_id)

    try:
        attendance_service.unattend(db, user, micropost)
    except EdgeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return None
