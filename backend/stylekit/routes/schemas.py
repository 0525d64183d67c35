"""
Base for HTTP request bodies.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiRequest(BaseModel):
    """Request body accepting camelCase or snake_case keys."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )
