"""Validation utilities for MCP tool parameters.

Tool inputs arrive from LLM hosts, which often send numbers and booleans as
strings. These helpers coerce the common cases and report every validation
failure at once so the caller can fix its input in a single retry.
"""

from typing import Any

from pydantic import ValidationError


def format_validation_errors(
    error: ValidationError, context: str = "parameters"
) -> str:
    """Format all Pydantic validation errors into a clear message for LLMs.

    Args:
        error: The Pydantic ValidationError containing all validation failures
        context: Description of what was being validated (e.g., "list_changes")

    Returns:
        Formatted error message showing all validation errors at once

    Example:
        >>> try:
        >>>     params = PaginationParams(page="zero", page_size=500)
        >>> except ValidationError as e:
        >>>     msg = format_validation_errors(e, "list_changes parameters")
        >>>     # Returns: "Invalid list_changes parameters - 2 errors:\n  • page: ..."
    """
    errors = error.errors()

    if len(errors) == 1:
        err = errors[0]
        field = ".".join(str(x) for x in err["loc"])
        input_val = err.get("input", "N/A")
        return (
            f"Invalid {context}: {field} - {err['msg']} (received: {repr(input_val)})"
        )

    msg_lines = [f"Invalid {context} - {len(errors)} errors:"]
    for err in errors:
        field = ".".join(str(x) for x in err["loc"])
        input_val = err.get("input", "N/A")
        input_type = type(input_val).__name__ if input_val != "N/A" else "unknown"

        msg_lines.append(
            f"  • {field}: {err['msg']} (received {input_type}: {repr(input_val)})"
        )

    msg_lines.append("\nPlease fix all errors and retry with correct types.")
    return "\n".join(msg_lines)


def coerce_bool(v: Any) -> bool | Any:
    """Coerce common string representations to boolean.

    Args:
        v: Value to coerce

    Returns:
        Boolean if coercible, original value otherwise
    """
    if isinstance(v, str):
        lower_v = v.strip().lower()
        if lower_v in ("true", "1", "yes", "on"):
            return True
        elif lower_v in ("false", "0", "no", "off", ""):
            return False
    return v


def coerce_int(v: Any) -> int | Any:
    """Coerce string numbers to integers.

    Args:
        v: Value to coerce

    Returns:
        Integer if coercible, original value otherwise
    """
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            pass  # Let Pydantic report it with field context
    return v


def coerce_optional_str(v: Any) -> str | None | Any:
    """Trim a string and map blank values to None.

    Args:
        v: Value to coerce

    Returns:
        Stripped string, None for blank strings, original value otherwise
    """
    if isinstance(v, str):
        stripped = v.strip()
        return stripped or None
    return v
