"""
Bandhan Database Models
Exports all models for use throughout the application.
"""

from app.models.user import User, Gender, AccountStatus
from app.models.matches import Like, Match
from app.models.admin import Admin

__all__ = [
    "User",
    "Gender",
    "AccountStatus",
    "Like",
    "Match",
    "Admin",
]
