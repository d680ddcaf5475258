"""Validation of project descriptions and provider payloads."""

import json
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from launchcraft.core.errors import FieldError, ProjectValidationError
from launchcraft.schemas.project import ProjectDescription

# Accepted input aliases that should be reported under their canonical wire name
_FIELD_ALIASES = {"appConcept": "concept"}


def _format_loc(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            name = _FIELD_ALIASES.get(str(part), str(part))
            path = f"{path}.{name}" if path else name
    return path


def _clean_message(msg: str) -> str:
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def field_errors(error: ValidationError) -> list[FieldError]:
    """Turn a pydantic ValidationError into field-level errors with wire names."""
    return [
        FieldError(field=_format_loc(err["loc"]) or "projectData", message=_clean_message(err["msg"]))
        for err in error.errors()
    ]


def validate_project(raw: Any, strict_interests: bool = True) -> ProjectDescription:
    """
    Validate a raw project description.

    Every rule is checked and every violation is reported, not only the first.

    Args:
        raw: Mapping using wire (camelCase) field names
        strict_interests: Reject interests outside the catalog vocabulary

    Returns:
        Validated ProjectDescription

    Raises:
        ProjectValidationError: With one FieldError per violation
    """
    if not isinstance(raw, Mapping):
        raise ProjectValidationError(
            [FieldError(field="projectData", message="Project data must be an object")]
        )

    try:
        return ProjectDescription.model_validate(
            dict(raw), context={"strict_interests": strict_interests}
        )
    except ValidationError as e:
        raise ProjectValidationError(field_errors(e)) from e


def format_schema_errors(error: ValidationError, schema_class: type[BaseModel]) -> str:
    """
    Format a response-shape validation error for logs and error messages.

    Args:
        error: Pydantic ValidationError
        schema_class: The response shape that failed validation

    Returns:
        Multi-line description of every violation
    """
    errors = error.errors()
    if not errors:
        return str(error)

    error_parts = [f"Response does not match {schema_class.__name__}:"]

    for err in errors:
        loc = _format_loc(err["loc"]) or "<root>"
        error_parts.append(f"  {loc}: {err.get('msg', '')} ({err['type']})")

        input_value = err.get("input")
        if input_value is not None and err["type"] != "missing":
            input_str = json.dumps(input_value, ensure_ascii=False, default=str)
            if len(input_str) > 100:
                input_str = input_str[:97] + "..."
            error_parts.append(f"    input: {input_str}")

    return "\n".join(error_parts)
