"""
Session API endpoints: password login, remember-token restore and logout.

Cookie handling belongs to the client; these endpoints only issue and
check remember tokens.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional

from app.database import get_db
from app.services import user_service
from app.services.credential_service import get_credential_service
from app.services.errors import StorageError
from app.api.routes.schemas import UserResponse


router = APIRouter(prefix="/sessions", tags=["sessions"])


class LoginRequest(BaseModel):
    """Request model for password login."""
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")
    remember_me: bool = Field(False, description="Issue a remember token for persistent sessions")


class LoginResponse(BaseModel):
    """Response model for a successful login."""
    user: UserResponse
    remember_token: Optional[str] = None


class RestoreRequest(BaseModel):
    """Request model for restoring a session from a remember token."""
    user_id: int
    remember_token: str


@router.post("", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Log in with email and password.

    With remember_me set, a fresh remember token is issued and its digest
    stored; otherwise any previous remember digest is cleared.

    Raises:
        401: Invalid email/password combination
        500: Database error
    """
    user = user_service.authenticate_user(db, request.email, request.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email/password combination")

    credentials = get_credential_service()
    try:
        if request.remember_me:
            token = credentials.remember(db, user)
        else:
            credentials.forget(db, user)
            token = None
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return LoginResponse(user=UserResponse.model_validate(user), remember_token=token)


@router.post("/restore", response_model=UserResponse)
async def restore_session(
    request: RestoreRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate a returning client by its remember token.

    Raises:
        401: Unknown user or token does not match
    """
    user = user_service.get_user_by_id(db, request.user_id)
    if not user or not get_credential_service().authenticated(user, request.remember_token):
        raise HTTPException(status_code=401, detail="Invalid remember token")

    return user


@router.delete("/{user_id}", status_code=204)
async def logout(
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Log out by forgetting the user's remember digest.

    Raises:
        404: User not found
        500: Database error
    """
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        get_credential_service().forget(db, user)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return None
