"""
User model: identity, credentials and anchor for the social graph.

Passwords and remember tokens are only ever stored as bcrypt digests.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class User(Base):
    """
    User model for authentication, following and event attendance.

    Attributes:
        id: Primary key
        name: Display name (1-50 chars)
        email: Lowercased, unique email address (max 200 chars)
        password_digest: bcrypt hash of the password
        remember_digest: bcrypt hash of the remember token (None when forgotten)
        created_at: User registration timestamp
        updated_at: Last modification timestamp
        microposts: Events posted by the user (one-to-many)
        active_relationships: Edges where the user is the follower
        passive_relationships: Edges where the user is the followed
        events_attending: Attendance edges owned by the user
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    password_digest = Column(String(60), nullable=False)
    remember_digest = Column(String(60), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    microposts = relationship("Micropost", back_populates="author", cascade="all, delete-orphan")
    active_relationships = relationship(
        "Relationship",
        foreign_keys="Relationship.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    passive_relationships = relationship(
        "Relationship",
        foreign_keys="Relationship.followed_id",
        back_populates="followed",
        cascade="all, delete-orphan",
    )
    events_attending = relationship("Attendance", back_populates="attendee", cascade="all, delete-orphan")

    # Plaintext remember token, only held in memory after CredentialService.remember()
    remember_token = None

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"
