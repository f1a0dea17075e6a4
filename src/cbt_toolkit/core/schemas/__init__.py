"""
Schemas Package

JSON Schemas for the compact records stored in history documents.
"""

from .validator import (
    PERFORMANCE_SCHEMA_VERSION,
    ValidationError,
    validate_attempt,
    validate_performance,
)

__all__ = [
    "PERFORMANCE_SCHEMA_VERSION",
    "ValidationError",
    "validate_attempt",
    "validate_performance",
]
