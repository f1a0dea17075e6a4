"""
Schema Validation Utilities

Validates the compact JSON records embedded in history documents against
their JSON Schemas before they are decoded.

Two record formats are covered:
- attempt records (one per SESSION_DATA block)
- the performance index block (one per history document)

Both are hand-editable text inside a user's notes, so a block can be
truncated or mangled at any time. Validation turns that into a single
ValidationError the stores can catch per block.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema.validators import validator_for


PERFORMANCE_SCHEMA_VERSION = 1


_SCHEMAS: dict[str, dict] = {}
_VALIDATORS: dict[str, Any] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


def _get_validator(name: str) -> Any:
    if name not in _VALIDATORS:
        schema = _load_schema(name)
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        _VALIDATORS[name] = validator_cls(schema)
    return _VALIDATORS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(name: str, data: Any) -> None:
    validator = _get_validator(name)
    problems = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not problems:
        return

    first = problems[0]
    path = "/".join(str(p) for p in first.absolute_path)
    raise ValidationError(
        f"Invalid {name} record at '{path or '<root>'}': {first.message}",
        path=path,
        errors=[problem.message for problem in problems],
    )


def validate_attempt(data: Any) -> None:
    """
    Validate a compact attempt record.

    Args:
        data: Decoded JSON from one SESSION_DATA block

    Raises:
        ValidationError: If the record does not match the attempt schema
    """
    _validate("attempt", data)


def validate_performance(data: Any) -> None:
    """
    Validate a compact performance block.

    Args:
        data: Decoded JSON from the PERFORMANCE_DATA block

    Raises:
        ValidationError: If the block does not match the performance schema
            (including an unsupported version)
    """
    _validate("performance", data)
