"""
Relationship model: directed follower -> followed edge between two users.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class Relationship(Base):
    """
    Follow edge.

    Attributes:
        id: Primary key
        follower_id: User doing the following
        followed_id: User being followed
        created_at: When the follow happened
    """
    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_relationships_follower_followed"),
    )

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    followed_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    follower = relationship("User", foreign_keys=[follower_id], back_populates="active_relationships")
    followed = relationship("User", foreign_keys=[followed_id], back_populates="passive_relationships")

    def __repr__(self):
        return f"<Relationship(follower_id={self.follower_id}, followed_id={self.followed_id})>"
