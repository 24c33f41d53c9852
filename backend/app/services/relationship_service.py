"""
Relationship service layer: following and unfollowing users.

Edges live in the relationships table and are always queried explicitly.
"""

import logging
from typing import List

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.models.relationship import Relationship
from app.models.user import User
from app.services.errors import (
    DuplicateEdgeError,
    EdgeNotFoundError,
    SelfReferenceError,
    storage_errors,
)

logger = logging.getLogger(__name__)


def _find_edge(db: Session, follower_id: int, followed_id: int):
    return db.query(Relationship).filter(
        Relationship.follower_id == follower_id,
        Relationship.followed_id == followed_id
    ).first()


def follow(db: Session, user: User, other_user: User) -> Relationship:
    """
    Make user follow other_user.

    Args:
        db: Database session
        user: Follower
        other_user: User to follow

    Returns:
        Created Relationship edge

    Raises:
        SelfReferenceError: If user and other_user are the same
        DuplicateEdgeError: If user already follows other_user
        StorageError: If the database write fails
    """
    if user.id == other_user.id:
        raise SelfReferenceError("Users cannot follow themselves")

    if _find_edge(db, user.id, other_user.id):
        logger.warning(f"User {user.id} already follows user {other_user.id}")
        raise DuplicateEdgeError(f"User {user.id} already follows user {other_user.id}")

    edge = Relationship(follower_id=user.id, followed_id=other_user.id)
    with storage_errors(db):
        db.add(edge)
        db.commit()
        db.refresh(edge)

    logger.info(f"User {user.id} followed user {other_user.id}")
    return edge


def unfollow(db: Session, user: User, other_user: User) -> None:
    """
    Remove the follow edge from user to other_user.

    Raises:
        EdgeNotFoundError: If user does not follow other_user
        StorageError: If the database write fails
    """
    edge = _find_edge(db, user.id, other_user.id)
    if edge is None:
        logger.warning(f"User {user.id} tried to unfollow user {other_user.id} without following")
        raise EdgeNotFoundError(f"User {user.id} does not follow user {other_user.id}")

    with storage_errors(db):
        db.delete(edge)
        db.commit()

    logger.info(f"User {user.id} unfollowed user {other_user.id}")


def is_following(db: Session, user: User, other_user: User) -> bool:
    """Return True if user follows other_user."""
    return _find_edge(db, user.id, other_user.id) is not None


def followed_ids_select(user_id: int) -> Select:
    """
    SELECT followed_id FROM relationships WHERE follower_id = :user_id

    Used by the feed to keep the membership test inside one SQL statement.
    """
    return select(Relationship.followed_id).where(Relationship.follower_id == user_id)


def followed_ids(db: Session, user: User) -> List[int]:
    """Get the ids of the users this user follows."""
    return list(db.execute(followed_ids_select(user.id)).scalars().all())


def follower_ids(db: Session, user: User) -> List[int]:
    """Get the ids of the users following this user."""
    rows = db.query(Relationship.follower_id).filter(Relationship.followed_id == user.id).all()
    return [row.follower_id for row in rows]


def get_following(db: Session, user: User) -> List[User]:
    """
    Get the users this user follows, ordered by name.

    Args:
        db: Database session
        user: Follower

    Returns:
        List of followed User objects
    """
    return db.query(User).join(
        Relationship, Relationship.followed_id == User.id
    ).filter(
        Relationship.follower_id == user.id
    ).order_by(User.name, User.id).all()


def get_followers(db: Session, user: User) -> List[User]:
    """
    Get the users following this user, ordered by name.

    Args:
        db: Database session
        user: Followed user

    Returns:
        List of follower User objects
    """
    return db.query(User).join(
        Relationship, Relationship.follower_id == User.id
    ).filter(
        Relationship.followed_id == user.id
    ).order_by(User.name, User.id).all()
