"""
Attendance model: a user marking a micropost's event as attended.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class Attendance(Base):
    """
    Attend edge from a user to an event micropost.

    Attributes:
        id: Primary key
        attendee_id: User attending
        attending_id: Micropost being attended
        created_at: When the user signed up
    """
    __tablename__ = "attendances"
    __table_args__ = (
        UniqueConstraint("attendee_id", "attending_id", name="uq_attendances_attendee_attending"),
    )

    id = Column(Integer, primary_key=True, index=True)
    attendee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attending_id = Column(Integer, ForeignKey("microposts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    attendee = relationship("User", back_populates="events_attending")
    attending = relationship("Micropost", back_populates="attendances")

    def __repr__(self):
        return f"<Attendance(attendee_id={self.attendee_id}, attending_id={self.attending_id})>"
