"""
User Model
Stores end-user credentials, the matrimony profile and partner preferences.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, JSON, Index

from app.database import Base


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class AccountStatus(str, enum.Enum):
    """Lifecycle status shared by users and administrators."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    """
    End-user account.

    Profile attributes are flattened into columns; picture references are
    ordered JSON lists of media URLs. Likes and matches live in their own
    edge tables (see app.models.matches).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    hashed_password = Column(String(1024), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False, index=True)
    gender = Column(Enum(Gender, values_callable=_enum_values, name="gender"), nullable=False)
    religion = Column(String(100), nullable=True, index=True)
    occupation = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    about = Column(Text, nullable=True)
    profile_picture = Column(String(1024), nullable=False, default="")
    additional_pictures = Column(JSON, nullable=False, default=list)
    photos = Column(JSON, nullable=False, default=list)

    status = Column(
        Enum(AccountStatus, values_callable=_enum_values, name="account_status"),
        default=AccountStatus.ACTIVE,
        nullable=False,
    )

    # Number of pending inbound likes
    likes_count = Column(Integer, default=0, nullable=False)

    # Partner preferences
    pref_age_min = Column(Integer, default=18, nullable=False)
    pref_age_max = Column(Integer, default=65, nullable=False)
    pref_religion = Column(String(100), nullable=True)
    pref_location = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_active = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('ix_users_email', 'email', unique=True),
        Index('ix_users_created_at', 'created_at'),
    )

    def touch(self):
        """Stamp the profile as modified."""
        self.updated_at = datetime.utcnow()

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
