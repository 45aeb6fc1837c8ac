"""
Shared configuration for I/O models.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from project_management_api.core.validation import MAX_DB_INT

# Ids in request bodies must fit the signed 64-bit primary key columns.
DbId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]


class ApiModel(BaseModel):
    """Base for every request and response schema.

    Serialized with camelCase aliases; accepts both camelCase and snake_case on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
