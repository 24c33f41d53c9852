"""
User API endpoints: registration, profile management, following and feed.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.database import get_db
from app.services import attendance_service, feed_service, relationship_service, user_service
from app.services.errors import (
    DuplicateEdgeError,
    EdgeNotFoundError,
    SelfReferenceError,
    StorageError,
    UserValidationError,
)
from app.api.routes.schemas import MicropostResponse, UserResponse


router = APIRouter(prefix="/users", tags=["users"])


# Request/Response models
class CreateUserRequest(BaseModel):
    """Request model for user registration."""
    name: str = Field(..., description="Display name (max 50 characters)")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password (min 6 characters)")
    password_confirmation: Optional[str] = Field(None, description="Repeat of the password (optional)")


class UpdateUserRequest(BaseModel):
    """Request model for updating a user; omitted fields are unchanged."""
    name: Optional[str] = Field(None, description="New display name")
    email: Optional[str] = Field(None, description="New email address")
    password: Optional[str] = Field(None, description="New password")
    password_confirmation: Optional[str] = Field(None, description="Repeat of the new password")


class RelationshipResponse(BaseModel):
    """Response model for a follow edge."""
    id: int
    follower_id: int
    followed_id: int
    created_at: datetime

    class Config:
        from_attributes = True


def _get_user_or_404(db: Session, user_id: int):
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    """
    List all users.

    Args:
        db: Database session

    Returns:
        List of all users
    """
    return user_service.get_all_users(db)


@router.post("", response_model=UserResponse, status_code=201)
async def register_user(
    request: CreateUserRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user.

    Args:
        request: User registration request
        db: Database session

    Returns:
        Created user

    Raises:
        422: Validation failed (field-level errors in detail.errors)
        500: Database error
    """
    try:
        return user_service.create_user(
            db,
            request.name,
            request.email,
            request.password,
            request.password_confirmation
        )
    except UserValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Get user by ID.

    Raises:
        404: User not found
    """
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    db: Session = Depends(get_db)
):
    """
    Update name, email and/or password of a user.

    Raises:
        404: User not found
        422: Validation failed
        500: Database error
    """
    _get_user_or_404(db, user_id)

    try:
        return user_service.update_user(
            db,
            user_id,
            name=request.name,
            email=request.email,
            password=request.password,
            password_confirmation=request.password_confirmation
        )
    except UserValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a user together with their posts, follows and attendances.

    Raises:
        404: User not found
    """
    try:
        success = user_service.delete_user(db, user_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    if not success:
        raise HTTPException(status_code=404, detail="User not found")

    return None


@router.get("/{user_id}/following", response_model=List[UserResponse])
async def list_following(
    user_id: int,
    db: Session = Depends(get_db)
):
    """List the users this user follows."""
    user = _get_user_or_404(db, user_id)
    return relationship_service.get_following(db, user)


@router.get("/{user_id}/followers", response_model=List[UserResponse])
async def list_followers(
    user_id: int,
    db: Session = Depends(get_db)
):
    """List the users following this user."""
    user = _get_user_or_404(db, user_id)
    return relationship_service.get_followers(db, user)


@router.post("/{user_id}/following/{other_id}", response_model=RelationshipResponse, status_code=201)
async def follow_user(
    user_id: int,
    other_id: int,
    db: Session = Depends(get_db)
):
    """
    Make user_id follow other_id.

    Raises:
        400: Attempt to follow oneself
        404: Either user not found
        409: Already following
        500: Database error
    """
    user = _get_user_or_404(db, user_id)
    other_user = _get_user_or_404(db, other_id)

    try:
        return relationship_service.follow(db, user, other_user)
    except SelfReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateEdgeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.delete("/{user_id}/following/{other_id}", status_code=204)
async def unfollow_user(
    user_id: int,
    other_id: int,
    db: Session = Depends(get_db)
):
    """
    Make user_id stop following other_id.

    Raises:
        404: Either user not found, or user_id does not follow other_id
        500: Database error
    """
    user = _get_user_or_404(db, user_id)
    other_user = _get_user_or_404(db, other_id)

    try:
        relationship_service.unfollow(db, user, other_user)
    except EdgeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return None


@router.get("/{user_id}/feed", response_model=List[MicropostResponse])
async def get_feed(
    user_id: int,
    search: Optional[str] = Query(None, description="Substring to match in content, date or location"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: Optional[int] = Query(None, ge=1, description="Posts per page"),
    db: Session = Depends(get_db)
):
    """
    Get the user's feed: their own and followed users' upcoming events.

    Raises:
        404: User not found
    """
    user = _get_user_or_404(db, user_id)
    query = feed_service.search(db, user, search)
    return feed_service.paginate(query, page, per_page).all()


@router.get("/{user_id}/attending", response_model=List[MicropostResponse])
async def list_attending(
    user_id: int,
    db: Session = Depends(get_db)
):
    """List the microposts whose events this user attends."""
    user = _get_user_or_404(db, user_id)
    return attendance_service.get_attending(db, user)
