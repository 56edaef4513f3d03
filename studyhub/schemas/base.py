from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestSchema(BaseModel):
    """Base schema for request bodies; accepts camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseSchema(BaseModel):
    """Base schema with ORM mode enabled for all response schemas (camelCase on the wire)."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
