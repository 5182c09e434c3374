# rasoi/models/common.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for response bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(ApiModel):
    """Base for request bodies; unknown keys are rejected."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )


class OkOut(BaseModel):
    ok: bool = True
