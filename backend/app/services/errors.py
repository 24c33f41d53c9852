"""
Service-layer exceptions.

Routes translate these into HTTP status codes; services never raise
HTTPException themselves.
"""

from contextlib import contextmanager
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


class UserValidationError(ValueError):
    """Raised when user attributes fail validation.

    Carries every failing field at once so a form can show all problems.
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        messages = "; ".join(
            f"{field}: {', '.join(field_errors)}" for field, field_errors in errors.items()
        )
        super().__init__(messages)


class EdgeNotFoundError(LookupError):
    """Raised when unfollow/unattend targets an edge that does not exist."""
    pass


class DuplicateEdgeError(ValueError):
    """Raised when follow/attend would create an edge that already exists."""
    pass


class SelfReferenceError(ValueError):
    """Raised when a user tries to follow themselves."""
    pass


class StorageError(RuntimeError):
    """Raised when the database rejects or fails a write."""
    pass


@contextmanager
def storage_errors(db: Session):
    """
    Roll back and re-raise database failures as StorageError.

    Args:
        db: Database session the wrapped block writes through
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {e}") from e
