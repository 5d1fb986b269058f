from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class BaseResponse(BaseModel):
    """Base model for request/response bodies. camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseResponse):
    message: str
