"""
Micropost model for short event announcements.

Each micropost belongs to a user and carries the date and place of the event.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class Micropost(Base):
    """
    Micropost model announcing an event.

    Attributes:
        id: Primary key
        user_id: Foreign key to author user
        content: Announcement text (1-140 chars)
        location: Where the event takes place (optional)
        event_date: When the event takes place (column "eventDate")
        created_at: Post creation timestamp
        author: Relationship to User model
        attendances: Attendance edges pointing at this post
    """
    __tablename__ = "microposts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(140), nullable=False)
    location = Column(String(255), nullable=True)
    event_date = Column("eventDate", DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    author = relationship("User", back_populates="microposts")
    attendances = relationship("Attendance", back_populates="attending", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Micropost(id={self.id}, user_id={self.user_id}, event_date={self.event_date})>"
