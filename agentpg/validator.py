"""Checking tool input against a tool's schema."""

from __future__ import annotations

import json
import math
from typing import Any, Union

from agentpg.tool import PropertyDef, ToolSchema


class ValidationError(ValueError):
    """Raised when tool input does not match its schema."""


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fmt(number: float) -> str:
    if isinstance(number, float) and number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return str(number)


class Validator:
    """Validates decoded tool input against a ToolSchema."""

    def validate_input(self, schema: ToolSchema, tool_input: Union[str, bytes]) -> dict[str, Any]:
        """Check JSON-encoded input against the schema and return the decoded object."""
        if schema.type != "object":
            raise ValidationError(f"schema type must be 'object', got '{schema.type}'")

        try:
            decoded = json.loads(tool_input)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"invalid JSON input: {exc}") from exc
        if decoded is None:
            decoded = {}
        if not isinstance(decoded, dict):
            raise ValidationError(f"invalid JSON input: expected object, got {_kind(decoded)}")

        for required in schema.required:
            if required not in decoded:
                raise ValidationError(f"missing required field: {required}")

        for prop_name, prop in schema.properties.items():
            if prop_name in decoded:
                self._validate_property(prop_name, prop, decoded[prop_name])

        return decoded

    def _validate_property(self, name: str, prop: PropertyDef, value: Any) -> None:
        if value is None:
            return

        self._validate_type(name, prop.type, value)

        if prop.enum:
            if not isinstance(value, str):
                raise ValidationError(
                    f"field '{name}': expected string for enum validation, got {_kind(value)}"
                )
            if value not in prop.enum:
                allowed = "[" + " ".join(prop.enum) + "]"
                raise ValidationError(
                    f"field '{name}': value '{value}' not in allowed values {allowed}"
                )

        if prop.type in ("number", "integer"):
            number = float(value)
            if prop.minimum is not None and number < prop.minimum:
                raise ValidationError(
                    f"field '{name}': value {_fmt(number)} is less than minimum {_fmt(prop.minimum)}"
                )
            if prop.maximum is not None and number > prop.maximum:
                raise ValidationError(
                    f"field '{name}': value {_fmt(number)} exceeds maximum {_fmt(prop.maximum)}"
                )

        if prop.type == "string" and isinstance(value, str):
            length = len(value.encode("utf-8"))
            if prop.min_length is not None and length < prop.min_length:
                raise ValidationError(
                    f"field '{name}': string length {length} is less than minimum {prop.min_length}"
                )
            if prop.max_length is not None and length > prop.max_length:
                raise ValidationError(
                    f"field '{name}': string length {length} exceeds maximum {prop.max_length}"
                )

        if prop.type == "array" and prop.items is not None and isinstance(value, list):
            for position, item in enumerate(value):
                self._validate_property(f"{name}[{position}]", prop.items, item)

        if prop.type == "object" and prop.properties and isinstance(value, dict):
            for nested_name, nested in prop.properties.items():
                if nested_name in value:
                    self._validate_property(f"{name}.{nested_name}", nested, value[nested_name])

    @staticmethod
    def _validate_type(name: str, expected: str, value: Any) -> None:
        if expected == "string":
            ok = isinstance(value, str)
        elif expected == "number":
            ok = _is_number(value)
        elif expected == "integer":
            if isinstance(value, float) and not isinstance(value, bool):
                if not (math.isfinite(value) and value.is_integer()):
                    raise ValidationError(f"field '{name}': expected integer, got float {value}")
                ok = True
            else:
                ok = isinstance(value, int) and not isinstance(value, bool)
        elif expected == "boolean":
            ok = isinstance(value, bool)
        elif expected == "array":
            ok = isinstance(value, list)
        elif expected == "object":
            ok = isinstance(value, dict)
        else:
            ok = True
        if not ok:
            raise ValidationError(f"field '{name}': expected {expected}, got {_kind(value)}")