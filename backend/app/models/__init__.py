"""
Models package - export all SQLAlchemy models.
"""

from app.models.user import User
from app.models.micropost import Micropost
from app.models.relationship import Relationship
from app.models.attendance import Attendance

__all__ = ["User", "Micropost", "Relationship", "Attendance"]
