"""
Attendance service layer: users attending and leaving events.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.models.attendance import Attendance
from app.models.micropost import Micropost
from app.models.user import User
from app.services.errors import DuplicateEdgeError, EdgeNotFoundError, storage_errors

logger = logging.getLogger(__name__)


def _find_edge(db: Session, attendee_id: int, micropost_id: int):
    return db.query(Attendance).filter(
        Attendance.attendee_id == attendee_id,
        Attendance.attending_id == micropost_id
    ).first()


def attend(db: Session, user: User, micropost: Micropost) -> Attendance:
    """
    Mark user as attending the micropost's event.

    Authors may attend their own events.

    Raises:
        DuplicateEdgeError: If the user already attends the event
        StorageError: If the database write fails
    """
    if _find_edge(db, user.id, micropost.id):
        logger.warning(f"User {user.id} already attends micropost {micropost.id}")
        raise DuplicateEdgeError(f"User {user.id} already attends micropost {micropost.id}")

    edge = Attendance(attendee_id=user.id, attending_id=micropost.id)
    with storage_errors(db):
        db.add(edge)
        db.commit()
        db.refresh(edge)

    logger.info(f"User {user.id} is attending micropost {micropost.id}")
    return edge


def unattend(db: Session, user: User, micropost: Micropost) -> None:
    """
    Remove the user's attendance of the micropost's event.

    Raises:
        EdgeNotFoundError: If the user was not attending
        StorageError: If the database write fails
    """
    edge = _find_edge(db, user.id, micropost.id)
    if edge is None:
        logger.warning(f"User {user.id} tried to unattend micropost {micropost.id} without attending")
        raise EdgeNotFoundError(f"User {user.id} is not attending micropost {micropost.id}")

    with storage_errors(db):
        db.delete(edge)
        db.commit()

    logger.info(f"User {user.id} stopped attending micropost {micropost.id}")


def is_attending(db: Session, user: User, micropost: Micropost) -> bool:
    """Return True if user attends the micropost's event."""
    return _find_edge(db, user.id, micropost.id) is not None


def attending_ids(db: Session, user: User) -> List[int]:
    """Get the ids of the microposts this user attends."""
    rows = db.query(Attendance.attending_id).filter(Attendance.attendee_id == user.id).all()
    return [row.attending_id for row in rows]


def get_attending(db: Session, user: User) -> List[Micropost]:
    """
    Get the microposts this user attends, soonest event first.

    Args:
        db: Database session
        user: Attendee

    Returns:
        List of Micropost objects
    """
    return db.query(Micropost).join(
        Attendance, Attendance.attending_id == Micropost.id
    ).filter(
        Attendance.attendee_id == user.id
    ).order_by(Micropost.event_date.asc(), Micropost.id).all()


def get_attendees(db: Session, micropost: Micropost) -> List[User]:
    """
    Get the users attending a micropost's event, ordered by name.

    Args:
        db: Database session
        micropost: Event micropost

    Returns:
        List of User objects
    """
    return db.query(User).join(
        Attendance, Attendance.attendee_id == User.id
    ).filter(
        Attendance.attending_id == micropost.id
    ).order_by(User.name, User.id).all()
