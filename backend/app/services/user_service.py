"""
User service layer for user management operations.

Handles validation, email normalisation, creation, update, lookup,
deletion and password authentication of users.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User
from app.services.credential_service import get_credential_service
from app.services.errors import UserValidationError, storage_errors

logger = logging.getLogger(__name__)
settings = get_settings()


# Standard email format: local part, "@", domain with at least one dot
EMAIL_PATTERN = re.compile(r'\A[\w+\-.]+@[a-z\d\-.]+\.[a-z]+\Z', re.IGNORECASE | re.ASCII)


def normalize_email(email: str) -> str:
    """Return the canonical (stripped, lowercased) form of an email."""
    return email.strip().lower()


def validate_name(name: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate display name.

    Args:
        name: Name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Name can't be blank"

    max_length = settings.user.NAME_MAX_LENGTH
    if len(name.strip()) > max_length:
        return False, f"Name is too long (maximum is {max_length} characters)"

    return True, None


def validate_email(email: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate email format (uniqueness is checked separately).

    Surrounding whitespace makes an email invalid.

    Args:
        email: Email to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not email.strip():
        return False, "Email can't be blank"

    max_length = settings.user.EMAIL_MAX_LENGTH
    if len(email) > max_length:
        return False, f"Email is too long (maximum is {max_length} characters)"

    if not EMAIL_PATTERN.match(email):
        return False, "Email is invalid"

    return True, None


def validate_password(
    password: Optional[str],
    password_confirmation: Optional[str] = None
) -> Tuple[bool, Optional[str]]:
    """
    Validate a password being set.

    Args:
        password: Plaintext password
        password_confirmation: Optional repeat of the password; checked only if given

    Returns:
        Tuple of (is_valid, error_message)
    """
    if password is None or not password.strip():
        return False, "Password can't be blank"

    min_length = settings.user.PASSWORD_MIN_LENGTH
    if len(password) < min_length:
        return False, f"Password is too short (minimum is {min_length} characters)"

    max_bytes = settings.user.PASSWORD_MAX_BYTES
    if len(password.encode("utf-8")) > max_bytes:
        return False, f"Password is too long (maximum is {max_bytes} bytes)"

    if password_confirmation is not None and password_confirmation != password:
        return False, "Password confirmation doesn't match Password"

    return True, None


def email_taken(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    """
    Check whether an email is already registered, ignoring case.

    Args:
        db: Database session
        email: Email to look for
        exclude_user_id: User whose own email should not count as a clash

    Returns:
        True if another user already has this email
    """
    query = db.query(User.id).filter(func.lower(User.email) == normalize_email(email))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _collect_errors(checks: Dict[str, Tuple[bool, Optional[str]]]) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for field, (is_valid, error_message) in checks.items():
        if not is_valid:
            errors.setdefault(field, []).append(error_message)
    return errors


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    password_confirmation: Optional[str] = None
) -> User:
    """
    Register a new user.

    The email is normalised to lowercase before it is stored.

    Args:
        db: Database session
        name: Display name
        email: Email address
        password: Plaintext password (only its digest is stored)
        password_confirmation: Optional repeat of the password

    Returns:
        Created User object

    Raises:
        UserValidationError: If any field fails validation
        StorageError: If the database write fails
    """
    errors = _collect_errors({
        "name": validate_name(name),
        "email": validate_email(email),
        "password": validate_password(password, password_confirmation),
    })
    if "email" not in errors and email_taken(db, email):
        errors["email"] = ["Email has already been taken"]
    if errors:
        logger.warning(f"Rejected registration: {errors}")
        raise UserValidationError(errors)

    new_user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_digest=get_credential_service().hash_password(password),
    )

    with storage_errors(db):
        db.add(new_user)
        db.commit()
        db.refresh(new_user)

    logger.info(f"Created user {new_user.id}")
    return new_user


def update_user(
    db: Session,
    user_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    password_confirmation: Optional[str] = None
) -> User:
    """
    Update an existing user.

    Fields left as None keep their current value; in particular a None
    password leaves the stored digest untouched.

    Args:
        db: Database session
        user_id: User ID to update
        name: New display name (optional)
        email: New email (optional, normalised to lowercase)
        password: New password (optional)
        password_confirmation: Optional repeat of the new password

    Returns:
        Updated User object

    Raises:
        ValueError: If the user does not exist
        UserValidationError: If any supplied field fails validation
        StorageError: If the database write fails
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise ValueError("User not found")

    checks = {}
    if name is not None:
        checks["name"] = validate_name(name)
    if email is not None:
        checks["email"] = validate_email(email)
    if password is not None:
        checks["password"] = validate_password(password, password_confirmation)
    elif not user.password_digest:
        checks["password"] = (False, "Password can't be blank")

    errors = _collect_errors(checks)
    if email is not None and "email" not in errors and email_taken(db, email, exclude_user_id=user.id):
        errors["email"] = ["Email has already been taken"]
    if errors:
        logger.warning(f"Rejected update of user {user_id}: {errors}")
        raise UserValidationError(errors)

    with storage_errors(db):
        if name is not None:
            user.name = name.strip()
        if email is not None:
            user.email = normalize_email(email)
        if password is not None:
            user.password_digest = get_credential_service().hash_password(password)
        db.commit()
        db.refresh(user)

    logger.info(f"Updated user {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Look up a user by email and check the password.

    Args:
        db: Database session
        email: Email address (any case)
        password: Plaintext password

    Returns:
        User object if the credentials match, None otherwise
    """
    user = get_user_by_email(db, email)
    if user and get_credential_service().verify_password(user, password):
        return user

    if user:
        logger.warning(f"Failed login for user {user.id}")
    else:
        logger.warning("Failed login for unknown email")
    return None


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Get user by email, ignoring case.

    Args:
        db: Database session
        email: Email to lookup

    Returns:
        User object if found, None otherwise
    """
    if not email:
        return None
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """
    Get user by ID.

    Args:
        db: Database session
        user_id: User ID to lookup

    Returns:
        User object if found, None otherwise
    """
    return db.query(User).filter(User.id == user_id).first()


def get_all_users(db: Session) -> List[User]:
    """
    Get all users, ordered by name.

    Args:
        db: Database session

    Returns:
        List of all User objects
    """
    return db.query(User).order_by(User.name, User.id).all()


def delete_user(db: Session, user_id: int) -> bool:
    """
    Delete a user by ID.

    Cascades to the user's microposts, follow edges on both sides
    and attendance edges.

    Args:
        db: Database session
        user_id: User ID to delete

    Returns:
        True if deleted, False if not found
    """
    user = get_user_by_id(db, user_id)
    if not user:
        return False

    with storage_errors(db):
        db.delete(user)
        db.commit()

    logger.info(f"Deleted user {user_id}")
    return True
