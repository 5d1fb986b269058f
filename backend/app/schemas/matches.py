"""
Matching Schemas
Response models for the like/match endpoints.
"""

from typing import List

from app.models.user import User
from app.schemas.common import BaseResponse
from app.schemas.user import ProfileOut


class ProfileCard(BaseResponse):
    id: int
    profile: ProfileOut

    @classmethod
    def from_user(cls, user: User) -> "ProfileCard":
        return cls(id=user.id, profile=ProfileOut.from_user(user))


class LikedProfileCard(ProfileCard):
    likes_count: int

    @classmethod
    def from_user(cls, user: User) -> "LikedProfileCard":
        return cls(id=user.id, profile=ProfileOut.from_user(user), likes_count=user.likes_count)


class PotentialMatchesResponse(BaseResponse):
    matches: List[ProfileCard]


class LikeResponse(BaseResponse):
    message: str
    is_match: bool
    likes_count: int


class LikedProfilesResponse(BaseResponse):
    liked_profiles: List[LikedProfileCard]
    total_likes: int


class MutualMatchesResponse(BaseResponse):
    matches: List[ProfileCard]
    total_matches: int
