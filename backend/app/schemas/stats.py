from typing import Dict, List
from app.schemas.common import BaseResponse


class DailyTrend(BaseResponse):
    date: str
    count: int


class UserStatsResponse(BaseResponse):
    total_users: int
    users_by_status: Dict[str, int]
    daily_trends: List[DailyTrend]
