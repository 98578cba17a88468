"""Structural validation and schema-variant detection."""
from __future__ import annotations

from preflight_viewer.validation.validator import (
    DetectedSections,
    SchemaValidator,
    SchemaVariant,
    ValidationPolicy,
    ValidationResult,
)

__all__ = [
    "DetectedSections",
    "SchemaValidator",
    "SchemaVariant",
    "ValidationPolicy",
    "ValidationResult",
]
