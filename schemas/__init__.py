from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class CamelModel(BaseModel):
    """Accepts camelCase keys from clients and snake_case from Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def error_details(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into JSON-safe ``{field, message, type}`` items."""
    details = []
    for err in exc.errors(include_url=False):
        details.append(
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
        )
    return details


def validate_payload(
    schema: Type[SchemaT],
    data: Any,
    message: str = "Invalid request data",
) -> SchemaT:
    """Validate a request body or query mapping, raising a 400 on mismatch."""
    try:
        return schema.model_validate(data if data is not None else {})
    except PydanticValidationError as exc:
        raise ValidationError(message, details=error_details(exc)) from exc


def query_params(args) -> Dict[str, str]:
    """Query string as a plain dict; blank values (``?userId=``) count as absent."""
    return {key: value for key, value in args.items() if value.strip() != ""}
