"""
Shared pydantic building blocks.

JSON bodies use camelCase keys; requests may also send snake_case.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageMeta(CamelModel):
    """Pagination envelope fields shared by every list response."""

    current_page: int
    total_pages: int
    total_items: int
    limit: int


class MessageResponse(CamelModel):
    message: str
