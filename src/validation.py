"""
Schema Validation - JSON Schema validation utilities.

Provides functions to validate provider configuration and desired resource
state against the JSON Schemas declared by the provider and its plugins.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft7Validator, SchemaError

logger = logging.getLogger(__name__)


def validate_schema(schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate that a schema is a valid JSON Schema (Draft 7).

    Args:
        schema: The schema to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        Draft7Validator.check_schema(schema)
        return True, None
    except SchemaError as e:
        return False, f"Invalid schema: {e.message}"


def schema_errors(
    values: Dict[str, Any], schema: Dict[str, Any]
) -> List[Tuple[Optional[str], str]]:
    """
    Collect every schema violation as an (attribute, message) pair.

    The attribute is the top-level key the violation sits under, or None
    for violations of the document itself (missing or unknown attributes).
    Messages are prefixed with the full dotted path, or "(root)".
    """
    validator = Draft7Validator(schema, format_checker=Draft7Validator.FORMAT_CHECKER)
    errors = sorted(
        validator.iter_errors(values),
        key=lambda e: ".".join(str(p) for p in e.absolute_path),
    )

    violations = []
    for error in errors:
        path = list(error.absolute_path)
        attribute = str(path[0]) if path else None
        prefix = ".".join(str(p) for p in path) or "(root)"
        violations.append((attribute, f"{prefix}: {error.message}"))
    return violations


def validate_against_schema(
    values: Dict[str, Any], schema: Dict[str, Any]
) -> Tuple[bool, Optional[str]]:
    """
    Validate a set of attribute values against a JSON Schema.

    Args:
        values: The attribute values to validate
        schema: The JSON Schema to validate against

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        violations = schema_errors(values, schema)
    except SchemaError as e:
        logger.error(f"Unexpected error during validation: {e}")
        return False, f"Validation failed: {e.message}"

    if not violations:
        return True, None
    return False, "; ".join(message for _, message in violations)
