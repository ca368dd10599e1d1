"""
base.py — Shared pydantic base for wire models.

The dashboard consumes camelCase JSON (playerCount, historicalData, ...),
while Python code uses snake_case field names. Aliases bridge the two;
populate_by_name lets services build models with snake_case kwargs.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(BaseModel):
    """Immutable result model: built once, never mutated."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
