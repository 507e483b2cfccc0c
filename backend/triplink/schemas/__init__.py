"""
TripLink Backend — Schema & Validation Layer
==============================================

What:  Pydantic models defining what a valid record looks like for each entity,
       and `validate_record()`, the single entry point that turns raw input
       into a typed record.
How:   Each entity kind maps to its create-schema. Validation is pure: it never
       touches the database (uniqueness and foreign keys are checked by the
       services at write time).

Example:
    >>> validate_record("service", {"title": "Tour", "price": "49.99", ...})
    ServiceCreate(title='Tour', price=Decimal('49.99'), ...)

    >>> validate_record("user", {"username": "ab", "email": "nope"})
    ValidationError: 3 fields failed validation
        details.errors = [
            {"field": "username", ...},
            {"field": "email", ...},
            {"field": "password", "message": "Field required", ...},
        ]
"""

from typing import Any, Dict, Iterable, List, Mapping, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from triplink.exceptions import ValidationError
from triplink.schemas.booking import BookingCreate
from triplink.schemas.message import MessageCreate
from triplink.schemas.service import ServiceCreate
from triplink.schemas.trip import PostCreate, TripCreate
from triplink.schemas.user import UserCreate

ENTITY_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "user": UserCreate,
    "service": ServiceCreate,
    "booking": BookingCreate,
    "trip": TripCreate,
    "post": PostCreate,
    "message": MessageCreate,
}


def format_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flattens Pydantic error dicts into {field, message, type} entries.

    "body" is dropped from request locations so HTTP and direct validation
    report the same field names; model-level errors get field "body".
    """
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        formatted.append(
            {
                "field": ".".join(loc) or "body",
                "message": str(err.get("msg", "Invalid value")).removeprefix("Value error, "),
                "type": err.get("type", "value_error"),
            }
        )
    return formatted


def validate_record(kind: str, raw: Mapping[str, Any]) -> BaseModel:
    """
    Validate raw input for an entity kind.

    Args:
        kind: One of ENTITY_SCHEMAS ("user", "service", "booking", "trip", "post", "message")
        raw: Untyped input, camelCase or snake_case keys

    Returns:
        The typed, coerced record.

    Raises:
        ValidationError: listing every violated constraint in `errors`
    """
    schema = ENTITY_SCHEMAS.get(kind)
    if schema is None:
        raise ValidationError(
            message=f"Unknown entity kind '{kind}'",
            field="kind",
            context={"allowed": sorted(ENTITY_SCHEMAS)},
        )
    try:
        return schema.model_validate(dict(raw))
    except PydanticValidationError as e:
        errors = format_errors(e.errors())
        raise ValidationError(
            message=f"{len(errors)} field(s) failed validation",
            errors=errors,
        ) from e
