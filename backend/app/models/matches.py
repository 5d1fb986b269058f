"""
Like / Match Edge Models
Directed "like" edges and the symmetric "match" relation between users.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index

from app.database import Base


class Like(Base):
    """
    One-directional expression of interest from liker to liked.
    Removed when the liked user reciprocates (the pair becomes a Match).
    """
    __tablename__ = "user_likes"

    id = Column(Integer, primary_key=True, index=True)
    liker_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    liked_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('liker_id', 'liked_id', name='uq_user_like'),
        CheckConstraint('liker_id <> liked_id', name='ck_user_like_not_self'),
    )

    def __repr__(self):
        return f"<Like({self.liker_id} -> {self.liked_id})>"


class Match(Base):
    """
    Reciprocated like. Stored once per direction so that each side lists
    its own matches with a single indexed lookup.
    """
    __tablename__ = "user_matches"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    matched_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    matched_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'matched_user_id', name='uq_user_match'),
        Index('ix_user_matches_matched_user_id', 'matched_user_id'),
    )

    def __repr__(self):
        return f"<Match({self.user_id} <-> {self.matched_user_id})>"
