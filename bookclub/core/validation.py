from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bookclub.core.errors import ValidationError, field_errors

ModelT = TypeVar("ModelT", bound=BaseModel)


def wire_names(model: type[BaseModel]) -> dict[str, str]:
    """Map attribute names to the names clients send (aliases)."""
    return {name: field.alias or name for name, field in model.model_fields.items()}


def validate_payload(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """
    Parse a raw payload into `model`.

    Already-parsed instances pass through. Any failure is reported as a
    single ValidationError naming every offending field.
    """
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError({"body": "Payload must be an object"})
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc.errors(), wire_names(model))) from exc
