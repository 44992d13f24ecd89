"""Field validation helpers used by entity constructors."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import RequiredFieldError, ValidationError


def is_missing(value: Any) -> bool:
    """None and blank strings count as missing."""
    return value is None or (isinstance(value, str) and not value.strip())


def require(entity_type: str, field_name: str, value: Any) -> Any:
    """Return ``value`` or raise RequiredFieldError when it is missing."""
    if is_missing(value):
        raise RequiredFieldError(entity_type, field_name)
    return value


def present(value: Any) -> bool:
    """Partial updates overwrite a field only when a value is supplied."""
    return value is not None


def parse_payload(model: type, payload: Any) -> Any:
    """Coerce a raw payload (model instance or mapping) into ``model``."""
    if isinstance(payload, model):
        return payload
    if payload is None:
        raise ValidationError(f"{model.__name__} payload is required")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(f"Invalid {model.__name__}", details={"errors": errors})
