"""
Feed service: the events a user sees.

A user's feed holds microposts written by the user or by anyone the user
follows, whose event date is no older than the feed window (24 hours by
default), soonest event first. Both feed() and search() return unexecuted
SQLAlchemy queries so callers can filter, count or paginate further.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Query, Session

from app.config import get_settings
from app.models.micropost import Micropost
from app.models.user import User
from app.services.relationship_service import followed_ids_select

logger = logging.getLogger(__name__)
settings = get_settings()


def utcnow() -> datetime:
    """Clock used when no explicit time is given; patched in tests."""
    return datetime.utcnow()


def feed(db: Session, user: User, now: Optional[datetime] = None) -> Query:
    """
    Build the feed query for a user.

    Args:
        db: Database session
        user: User whose feed to build
        now: Reference time for the window (defaults to utcnow())

    Returns:
        Query over Micropost ordered by event date ascending
    """
    now = now or utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    window_start = now - timedelta(hours=settings.feed.WINDOW_HOURS)
    logger.debug(f"Feed for user {user.id} from {window_start}")

    return db.query(Micropost).filter(
        or_(
            Micropost.user_id.in_(followed_ids_select(user.id)),
            Micropost.user_id == user.id,
        ),
        Micropost.event_date >= window_start
    ).order_by(Micropost.event_date.asc(), Micropost.id.asc())


def search(db: Session, user: User, term: Optional[str], now: Optional[datetime] = None) -> Query:
    """
    Narrow a user's feed to posts matching a search term.

    The term is matched as a case-sensitive LIKE '%term%' pattern against
    content, event date and location. A missing or empty term returns the plain feed.

    Args:
        db: Database session
        user: User whose feed to search
        term: Search string (optional)
        now: Reference time for the window (defaults to utcnow())

    Returns:
        Query over Micropost ordered by event date ascending
    """
    query = feed(db, user, now=now)
    if not term:
        return query

    pattern = f"%{term}%"
    return query.filter(
        or_(
            Micropost.content.like(pattern),
            cast(Micropost.event_date, String).like(pattern),
            Micropost.location.like(pattern),
        )
    )


def paginate(query: Query, page: int = 1, per_page: Optional[int] = None) -> Query:
    """
    Apply 1-based page limits to a feed query.

    Args:
        query: Feed or search query
        page: Page number, starting at 1
        per_page: Page size (defaults to the configured feed page size, capped)

    Returns:
        The limited query
    """
    per_page = per_page or settings.feed.PAGE_SIZE
    per_page = max(1, min(per_page, settings.feed.MAX_PAGE_SIZE))
    page = max(1, page)
    return query.offset((page - 1) * per_page).limit(per_page)
