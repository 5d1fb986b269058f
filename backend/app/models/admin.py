"""
Admin Model
Stores administrator credentials and permission sets.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON, Index

from app.database import Base
from app.models.user import AccountStatus, _enum_values


class Admin(Base):
    """
    Administrator account. Gated actions check `permissions`, a list of
    capability names such as "manage_users" or "view_statistics".
    """
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    hashed_password = Column(String(1024), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(50), default="admin", nullable=False)
    permissions = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum(AccountStatus, values_callable=_enum_values, name="account_status"),
        default=AccountStatus.ACTIVE,
        nullable=False,
    )

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('ix_admins_email', 'email', unique=True),
    )

    def has_permission(self, permission: str) -> bool:
        return permission in (self.permissions or [])

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}', role='{self.role}')>"
