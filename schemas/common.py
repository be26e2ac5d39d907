"""
Shared pydantic building blocks for the warehouse schemas.
"""
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _coerce_iso(value: Any) -> Any:
    # Stored text is kept verbatim so a malformed legacy value can still be
    # shown as "Invalid Date" rather than failing the whole collection.
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


IsoTimestamp = Annotated[str, BeforeValidator(_coerce_iso)]


class CamelModel(BaseModel):
    """Base model serialized with the camelCase field names of the stored payloads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RecordModel(CamelModel):
    """Stored records are replaced on update, never mutated in place."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
