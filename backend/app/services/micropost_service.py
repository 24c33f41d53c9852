"""
Micropost service layer for event announcements.

Handles micropost creation with content validation, lookup and deletion.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.micropost import Micropost
from app.services.errors import storage_errors

logger = logging.getLogger(__name__)
settings = get_settings()


def validate_content(content: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate micropost content.

    Args:
        content: Announcement text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not content or not content.strip():
        return False, "Content can't be blank"

    max_length = settings.micropost.CONTENT_MAX_LENGTH
    if len(content) > max_length:
        return False, f"Content is too long (maximum is {max_length} characters)"

    return True, None


def validate_location(location: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate the optional event location."""
    if location is None:
        return True, None

    max_length = settings.micropost.LOCATION_MAX_LENGTH
    if len(location) > max_length:
        return False, f"Location is too long (maximum is {max_length} characters)"

    return True, None


def create_micropost(
    db: Session,
    user_id: int,
    content: str,
    event_date: datetime,
    location: Optional[str] = None
) -> Micropost:
    """
    Create a new micropost announcing an event.

    Args:
        db: Database session
        user_id: Author user ID
        content: Announcement text
        event_date: When the event takes place; offset-aware values are stored as naive UTC
        location: Where the event takes place (optional)

    Returns:
        Created Micropost object

    Raises:
        ValueError: If validation fails
        StorageError: If the database write fails
    """
    is_valid, error_message = validate_content(content)
    if not is_valid:
        raise ValueError(error_message)

    is_valid, error_message = validate_location(location)
    if not is_valid:
        raise ValueError(error_message)

    if event_date is None:
        raise ValueError("Event date can't be blank")
    if event_date.tzinfo is not None:
        event_date = event_date.astimezone(timezone.utc).replace(tzinfo=None)

    micropost = Micropost(
        user_id=user_id,
        content=content,
        location=location,
        event_date=event_date
    )

    with storage_errors(db):
        db.add(micropost)
        db.commit()
        db.refresh(micropost)

    logger.info(f"User {user_id} posted micropost {micropost.id} for {event_date}")
    return micropost


def get_micropost_by_id(db: Session, micropost_id: int) -> Optional[Micropost]:
    """
    Get micropost by ID.

    Args:
        db: Database session
        micropost_id: Micropost ID to lookup

    Returns:
        Micropost object if found, None otherwise
    """
    return db.query(Micropost).filter(Micropost.id == micropost_id).first()


def get_microposts_by_user(db: Session, user_id: int) -> List[Micropost]:
    """
    Get all microposts for a user, newest first.

    Args:
        db: Database session
        user_id: Author user ID

    Returns:
        List of Micropost objects
    """
    return db.query(Micropost).filter(
        Micropost.user_id == user_id
    ).order_by(Micropost.created_at.desc(), Micropost.id.desc()).all()


def delete_micropost(db: Session, micropost_id: int) -> bool:
    """
    Delete a micropost and its attendance edges.

    Args:
        db: Database session
        micropost_id: Micropost ID to delete

    Returns:
        True if deleted, False if not found
    """
    micropost = get_micropost_by_id(db, micropost_id)
    if not micropost:
        return False

    with storage_errors(db):
        db.delete(micropost)
        db.commit()

    logger.info(f"Deleted micropost {micropost_id}")
    return True
