# =============================================================================
# core/schema.py  —  Parameter Schema Validation
# =============================================================================
#
# Every tool declares a JSON-schema "object" describing its arguments.  Before
# a handler runs, the registry passes the caller's arguments through
# validate_arguments():
#
#   1. top-level `default` values are filled in for missing properties
#   2. the result is checked with jsonschema (Draft 7)
#   3. the first violation becomes a SchemaValidationError naming the field
#      and the failed keyword (required / type / enum / minimum / ...)
#
# Handlers therefore only ever see arguments that satisfy their schema.
# =============================================================================

import copy
from typing import Optional

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError, best_match

from core.errors import SchemaValidationError


def apply_defaults(schema: dict, arguments: Optional[dict]) -> dict:
    """Return a copy of `arguments` with missing top-level defaults filled in."""
    result = dict(arguments or {})
    for name, prop in schema.get("properties", {}).items():
        if name not in result and isinstance(prop, dict) and "default" in prop:
            result[name] = copy.deepcopy(prop["default"])
    return result


def _field_of(error: ValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    if error.validator == "required":
        # jsonschema reports the *object* as the failing instance; the
        # missing property is the one named in validator_value but absent
        missing = [name for name in error.validator_value
                   if isinstance(error.instance, dict) and name not in error.instance]
        if missing:
            return f"{path}.{missing[0]}" if path else missing[0]
    return path


def check_schema(schema: dict) -> None:
    """Raise jsonschema.SchemaError if `schema` itself is not a valid schema."""
    Draft7Validator.check_schema(schema)


def validate_arguments(schema: dict, arguments: Optional[dict]) -> dict:
    """Apply defaults and validate `arguments` against `schema`.

    Returns:
        The arguments with defaults applied.

    Raises:
        SchemaValidationError: On the most relevant schema violation.
    """
    if arguments is not None and not isinstance(arguments, dict):
        raise SchemaValidationError("", "type", "arguments must be a JSON object")

    coerced = apply_defaults(schema, arguments)
    error = best_match(Draft7Validator(schema).iter_errors(coerced))
    if error is not None:
        raise SchemaValidationError(_field_of(error), str(error.validator), error.message)
    return coerced
