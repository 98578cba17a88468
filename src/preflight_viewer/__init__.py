"""preflight-viewer — Inspect WebRTC pre-flight test-results documents.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start example
-------------------
>>> import preflight_viewer as pv
>>> pv.__version__
'0.1.0'

Subpackages
-----------
schema:
    Typed, frozen models of the imported test-results document.
validation:
    Structural validation and legacy/new/hybrid variant detection.
metrics:
    Unit parsing, thresholds, sample statistics and per-section derivation.
cli:
    Command-line interface built on click and rich.
"""
from __future__ import annotations

__version__: str = "0.1.0"

from preflight_viewer.config import ViewerConfig, load_config, save_config
from preflight_viewer.errors import (
    DocumentImportError,
    FileReadError,
    ParseError,
    SchemaRejection,
    UnsupportedFileTypeError,
)
from preflight_viewer.importer import DocumentImporter, ImportedDocument
from preflight_viewer.metrics import (
    DerivationGap,
    MetricDeriver,
    QualityLevel,
    QualityThresholds,
    Section,
    is_available,
)
from preflight_viewer.report import SectionReporter
from preflight_viewer.schema import TestResultsDocument
from preflight_viewer.session import InMemorySessionStore, SessionStore, ViewerSession
from preflight_viewer.validation import (
    SchemaValidator,
    SchemaVariant,
    ValidationPolicy,
    ValidationResult,
)

__all__ = [
    "__version__",
    # config
    "ViewerConfig",
    "load_config",
    "save_config",
    # errors
    "DocumentImportError",
    "FileReadError",
    "ParseError",
    "SchemaRejection",
    "UnsupportedFileTypeError",
    # import
    "DocumentImporter",
    "ImportedDocument",
    # metrics
    "DerivationGap",
    "MetricDeriver",
    "QualityLevel",
    "QualityThresholds",
    "Section",
    "is_available",
    "SectionReporter",
    # schema
    "TestResultsDocument",
    # session
    "InMemorySessionStore",
    "SessionStore",
    "ViewerSession",
    # validation
    "SchemaValidator",
    "SchemaVariant",
    "ValidationPolicy",
    "ValidationResult",
]
