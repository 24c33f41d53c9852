"""
Credential service: password digests and remembered-session tokens.

Only bcrypt digests are ever persisted. The hasher is injectable so tests
and alternative deployments can swap the primitive.
"""

import logging
import secrets
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User
from app.services.errors import storage_errors

logger = logging.getLogger(__name__)


class BcryptHasher:
    """Thin wrapper around the bcrypt primitive."""

    def hash(self, plaintext: str, cost: int) -> str:
        salt = bcrypt.gensalt(rounds=cost)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify(self, digest: str, candidate: str) -> bool:
        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            # Malformed digest or oversized candidate: never a match
            return False


class CredentialService:
    """
    Hashes and verifies secrets for users.

    Covers both halves of authentication: the password digest set at
    registration and the remember digest used for persistent sessions.
    """

    def __init__(self, hasher=None, cost: Optional[int] = None):
        """
        Args:
            hasher: Object with hash(plaintext, cost) and verify(digest, candidate)
            cost: bcrypt work factor (defaults to the configured cost)
        """
        self._hasher = hasher or BcryptHasher()
        self._cost = cost

    @property
    def cost(self) -> int:
        if self._cost is not None:
            return self._cost
        return get_settings().security.cost

    def digest(self, plaintext: str) -> str:
        """Return the salted hash digest of the given string."""
        return self._hasher.hash(plaintext, self.cost)

    def new_token(self) -> str:
        """Return a random URL-safe token."""
        return secrets.token_urlsafe(get_settings().security.REMEMBER_TOKEN_BYTES)

    def hash_password(self, password: str) -> str:
        """Return the digest to store as a user's password_digest."""
        return self.digest(password)

    def verify_password(self, user: User, password: Optional[str]) -> bool:
        """
        Check a plaintext password against the user's stored digest.

        Args:
            user: User to check
            password: Candidate password

        Returns:
            True if the password matches, False otherwise
        """
        if not user.password_digest or password is None:
            return False
        return self._hasher.verify(user.password_digest, password)

    def remember(self, db: Session, user: User) -> str:
        """
        Remember a user for persistent sessions.

        Generates a fresh token, keeps it in memory on user.remember_token and
        persists only its digest. No other attribute is revalidated.

        Args:
            db: Database session
            user: User to remember

        Returns:
            The plaintext remember token to hand to the client
        """
        token = self.new_token()
        with storage_errors(db):
            user.remember_digest = self.digest(token)
            db.commit()
        user.remember_token = token
        logger.info(f"Remembered session for user {user.id}")
        return token

    def authenticated(self, user: User, remember_token: Optional[str]) -> bool:
        """
        Check a presented remember token against the stored digest.

        Returns False when the user has no remember digest.
        """
        if user.remember_digest is None or remember_token is None:
            return False
        return self._hasher.verify(user.remember_digest, remember_token)

    def forget(self, db: Session, user: User) -> None:
        """Forget a user by clearing the remember digest."""
        with storage_errors(db):
            user.remember_digest = None
            db.commit()
        user.remember_token = None
        logger.info(f"Forgot session for user {user.id}")


# Global credential service instance
_credential_service = CredentialService()


def get_credential_service() -> CredentialService:
    """Get global credential service instance."""
    return _credential_service
