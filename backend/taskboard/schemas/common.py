"""
Shared schema base and response envelope.
Every response body is {success, message?, <resource>?}; JSON fields are camelCase, snake_case accepted on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Envelope(CamelModel):
    success: bool = True


class MessageResponse(Envelope):
    """Success with a message and no resource (e.g. delete)."""
    message: str


class ErrorResponse(Envelope):
    success: bool = False
    message: str
