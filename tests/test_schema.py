"""
Unit tests for argument validation
"""

import pytest

from core.errors import SchemaValidationError
from core.schema import apply_defaults, validate_arguments

CAMERA_SCHEMA = {
    "type": "object",
    "properties": {
        "position": {"type": "array", "items": {"type": "number"}, "minItems": 3, "maxItems": 3},
        "width": {"type": "number", "default": 1920, "minimum": 256, "maximum": 4096},
        "mode": {"type": "string", "enum": ["tcp", "udp"], "default": "tcp"},
        "tags": {"type": "array", "default": []},
    },
    "required": ["position"],
}


class TestApplyDefaults:
    """Test default filling"""

    def test_missing_properties_get_defaults(self):
        result = apply_defaults(CAMERA_SCHEMA, {"position": [0, 0, 0]})
        assert result == {"position": [0, 0, 0], "width": 1920, "mode": "tcp", "tags": []}

    def test_supplied_values_are_kept(self):
        result = apply_defaults(CAMERA_SCHEMA, {"position": [0, 0, 0], "width": 800})
        assert result["width"] == 800

    def test_input_is_not_mutated_and_defaults_are_copied(self):
        arguments = {"position": [0, 0, 0]}
        first = apply_defaults(CAMERA_SCHEMA, arguments)
        first["tags"].append("x")

        assert arguments == {"position": [0, 0, 0]}
        assert apply_defaults(CAMERA_SCHEMA, arguments)["tags"] == []

    def test_none_means_no_arguments(self):
        assert apply_defaults({"type": "object", "properties": {}}, None) == {}


class TestValidateArguments:
    """Test schema violations become SchemaValidationError"""

    def test_valid_arguments_return_with_defaults(self):
        result = validate_arguments(CAMERA_SCHEMA, {"position": [1, 2, 3]})
        assert result["width"] == 1920

    def test_missing_required_names_the_field(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {})
        assert exc_info.value.field == "position"
        assert exc_info.value.constraint == "required"

    def test_wrong_type(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {"position": "0,0,0"})
        assert exc_info.value.field == "position"
        assert exc_info.value.constraint == "type"

    def test_vector_length_is_checked(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {"position": [0, 0]})
        assert exc_info.value.constraint == "minItems"

    def test_out_of_range_number(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {"position": [0, 0, 0], "width": 100})
        assert exc_info.value.field == "width"
        assert exc_info.value.constraint == "minimum"

    def test_enum_violation(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {"position": [0, 0, 0], "mode": "icmp"})
        assert exc_info.value.constraint == "enum"

    def test_non_object_arguments(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, ["not", "an", "object"])
        assert exc_info.value.constraint == "type"

    def test_error_message_is_readable(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_arguments(CAMERA_SCHEMA, {})
        assert str(exc_info.value).startswith("Invalid argument 'position' (required): ")
