"""
Validation module for construct configuration.

Construct types describe their accepted configuration with a small,
JSON-schema-shaped definition (see `STORAGE_DEFINITION`). This module checks a
user configuration against such a definition and reports every violation at
once with structured errors.

Supported keywords: `type`, `properties`, `required`, `additionalProperties`,
`const`, `anyOf`, `minimum`, `maximum`.
"""

import math
from typing import Any, Dict, List, Mapping, Tuple


class ValidationError:
    """Represents a single validation error."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {"field": self.field, "message": self.message}

    def __repr__(self) -> str:
        return f"ValidationError(field={self.field!r}, message={self.message!r})"


class ValidationResult:
    """Result of validation containing errors if any."""

    def __init__(self, is_valid: bool, errors: List[ValidationError] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "is_valid": self.is_valid,
            "errors": [error.to_dict() for error in self.errors],
        }


class ConfigurationError(ValueError):
    """Raised when a construct configuration is rejected."""

    def __init__(self, construct_id: str, errors: List[ValidationError]):
        self.construct_id = construct_id
        self.errors = list(errors)
        details = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(f"Invalid configuration for '{construct_id}': {details}")


_JSON_TYPES = {
    "object": (dict,),
    "array": (list, tuple),
    "string": (str,),
    "boolean": (bool,),
}


def _matches_type(value: Any, expected: str) -> bool:
    """
    Check a value against a JSON-schema primitive type name.

    Booleans are not numbers here, even though Python treats bool as int.
    NaN and infinities are not numbers either; json.loads accepts them.
    """
    if expected == "number":
        if isinstance(value, float) and not math.isfinite(value):
            return False
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "null":
        return value is None
    return isinstance(value, _JSON_TYPES.get(expected, ()))


def validate_value(value: Any, definition: Mapping[str, Any]) -> Tuple[bool, str]:
    """
    Validate a single property value against its definition.

    Args:
        value: The configured value
        definition: The property definition (subset of JSON schema)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if "const" in definition and value != definition["const"]:
        return False, f"Must be {definition['const']!r}"

    if "anyOf" in definition:
        alternatives = definition["anyOf"]
        if not any(validate_value(value, alt)[0] for alt in alternatives):
            allowed = [alt["const"] for alt in alternatives if "const" in alt]
            if allowed:
                return False, f"Must be one of {', '.join(repr(a) for a in allowed)}"
            return False, "Does not match any allowed alternative"

    expected_type = definition.get("type")
    if expected_type and expected_type != "object" and not _matches_type(value, expected_type):
        return False, f"Must be of type {expected_type}"

    if "minimum" in definition and _matches_type(value, "number"):
        if value < definition["minimum"]:
            return False, f"Must be >= {definition['minimum']}"

    if "maximum" in definition and _matches_type(value, "number"):
        if value > definition["maximum"]:
            return False, f"Must be <= {definition['maximum']}"

    return True, ""


def validate_configuration(
    configuration: Any, definition: Mapping[str, Any]
) -> ValidationResult:
    """
    Validate a construct configuration object against its definition.

    Args:
        configuration: The user-provided configuration (usually a dict)
        definition: Object definition with properties/required/additionalProperties

    Returns:
        ValidationResult with is_valid flag and list of errors
    """
    if not isinstance(configuration, dict):
        return ValidationResult(
            is_valid=False,
            errors=[ValidationError("configuration", "Must be an object")],
        )

    errors: List[ValidationError] = []
    properties = definition.get("properties", {})

    for field in definition.get("required", []):
        if field not in configuration:
            errors.append(ValidationError(field, "This field is required"))

    for field, value in configuration.items():
        if field not in properties:
            if definition.get("additionalProperties", True) is False:
                errors.append(ValidationError(field, "Unknown property"))
            continue
        is_valid, error_msg = validate_value(value, properties[field])
        if not is_valid:
            errors.append(ValidationError(field, error_msg))

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


def resolve_configuration(
    configuration: Mapping[str, Any], defaults: Mapping[str, Any]
) -> Dict[str, Any]:
    """Overlay user configuration on top of the construct defaults."""
    resolved = dict(defaults)
    resolved.update(configuration)
    return resolved
