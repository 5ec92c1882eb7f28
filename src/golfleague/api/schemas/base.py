from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class ApiModel(BaseModel):
    """Wire models speak camelCase and also accept snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
