from typing import List, Optional

from app.schemas.common import BaseResponse


class PhotosResponse(BaseResponse):
    message: Optional[str] = None
    photos: List[str]
