"""
Validation helpers shared by the services.

- validate_payload: run a pydantic schema over client input and raise the
  domain ``ValidationError`` with field-level detail
- parse_id: normalise path identifiers; anything that is not a positive
  integer is reported as NotFound
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from talentbridge.core.errors import NotFound, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_ID = 2 ** 31 - 1


def validate_payload(schema: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` (dict or model instance) against ``schema``."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc.errors()) from exc


def field_names_by_alias(schema: Type[BaseModel]) -> Dict[str, str]:
    """Map every accepted input key (alias and attribute name) to the attribute name."""
    names = {}
    for name, field in schema.model_fields.items():
        names[name] = name
        if field.alias:
            names[field.alias] = name
    return names


def parse_id(raw: Any, message: str = "Not found") -> int:
    if isinstance(raw, bool):
        raise NotFound(message)
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise NotFound(message)
        value = int(text)
    # primary keys are 32-bit serials
    if value <= 0 or value > MAX_ID:
        raise NotFound(message)
    return value
