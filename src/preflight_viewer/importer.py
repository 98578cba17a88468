"""Import and export of test-results documents.

The importer is the boundary between raw input and the validated core:

1. decode the payload as JSON (:class:`~preflight_viewer.errors.ParseError`
   when it is not JSON text);
2. run the :class:`~preflight_viewer.validation.SchemaValidator`
   (:class:`~preflight_viewer.errors.SchemaRejection` on rejection);
3. coerce the accepted payload into a frozen
   :class:`~preflight_viewer.schema.TestResultsDocument`.

Both user-supplied files and the built-in sample documents go through the
same path.  Export writes the accepted payload back verbatim as
pretty-printed UTF-8 JSON.
"""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import resources
from pathlib import Path

from pydantic import ValidationError

from preflight_viewer.errors import (
    FileReadError,
    ParseError,
    SchemaRejection,
    UnsupportedFileTypeError,
)
from preflight_viewer.schema.models import TestResultsDocument
from preflight_viewer.validation.validator import (
    SchemaValidator,
    SchemaVariant,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_SAMPLE_FILES: dict[SchemaVariant, str] = {
    SchemaVariant.LEGACY: "legacy_sample.json",
    SchemaVariant.NEW: "new_sample.json",
}


# ---------------------------------------------------------------------------
# Import result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportedDocument:
    """An accepted document together with the payload it was built from.

    Attributes
    ----------
    source_name:
        Identifier for the data source (filename, ``"sample:legacy"``, ...).
    document:
        The typed, frozen document.
    raw:
        A private copy of the accepted JSON payload, used for verbatim export.
    validation:
        The :class:`ValidationResult` that accepted the payload.
    """

    source_name: str
    document: TestResultsDocument
    raw: dict[str, object]
    validation: ValidationResult

    @property
    def variant(self) -> SchemaVariant:
        variant = self.validation.variant
        if variant is None:
            raise ValueError(f"{self.source_name} was imported without a schema variant")
        return variant


# ---------------------------------------------------------------------------
# Importer
# ---------------------------------------------------------------------------


class DocumentImporter:
    """Decode, validate and coerce test-results payloads.

    Parameters
    ----------
    validator:
        The :class:`SchemaValidator` to use.  Defaults to the strict policy.

    Example
    -------
    ::

        importer = DocumentImporter()
        imported = importer.load_file("results.json")
        print(imported.variant.value)
    """

    def __init__(self, validator: SchemaValidator | None = None) -> None:
        self._validator = validator if validator is not None else SchemaValidator()

    @property
    def validator(self) -> SchemaValidator:
        return self._validator

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    def load_text(self, content: str, source_name: str = "unknown") -> ImportedDocument:
        """Parse *content* as JSON and import it.

        Parameters
        ----------
        content:
            The raw JSON text.
        source_name:
            Label for this data source.

        Returns
        -------
        ImportedDocument

        Raises
        ------
        ParseError
            If *content* is not valid JSON text, or nests too deeply to decode.
        SchemaRejection
            If the JSON is not a recognised test-results document.
        """
        try:
            raw = json.loads(content, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.info("Could not parse %s as JSON: %s", source_name, exc)
            raise ParseError(str(exc), source_name) from exc
        except RecursionError as exc:
            logger.info("Could not parse %s as JSON: nesting too deep", source_name)
            raise ParseError("JSON nesting is too deep", source_name) from exc
        return self.load_value(raw, source_name)

    def load_bytes(self, content: bytes, source_name: str = "unknown") -> ImportedDocument:
        """Decode *content* as UTF-8 (a BOM is tolerated) and import it."""
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"not UTF-8 text: {exc}", source_name) from exc
        return self.load_text(text, source_name)

    def load_file(self, path: str | Path) -> ImportedDocument:
        """Read and import a ``.json`` file.

        Raises
        ------
        UnsupportedFileTypeError
            If *path* does not have a ``.json`` extension.
        FileReadError
            If the file cannot be read.
        ParseError
        SchemaRejection
        """
        path = Path(path)
        if path.suffix.lower() != ".json":
            raise UnsupportedFileTypeError(f"unsupported extension {path.suffix!r}", path.name)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileReadError(str(exc), path.name) from exc
        return self.load_bytes(content, source_name=path.name)

    def load_value(self, raw: object, source_name: str = "unknown") -> ImportedDocument:
        """Validate an already-decoded JSON value and coerce it.

        Raises
        ------
        SchemaRejection
            If validation rejects *raw*, or the accepted payload does not fit
            the typed document model.
        """
        result = self._validator.validate(raw)
        if not result.accepted or not isinstance(raw, dict):
            raise SchemaRejection(result.reason or "rejected", source_name)

        try:
            payload = copy.deepcopy(raw)
            document = TestResultsDocument.model_validate(payload)
        except ValidationError as exc:
            detail = _format_validation_error(exc)
            logger.info("Accepted payload %s failed coercion: %s", source_name, detail)
            raise SchemaRejection(detail, source_name) from exc
        except RecursionError as exc:
            logger.info("Accepted payload %s is nested too deeply to coerce", source_name)
            raise SchemaRejection("document nesting is too deep", source_name) from exc

        logger.info("Imported %s as %s document", source_name, result.variant.value)
        return ImportedDocument(
            source_name=source_name,
            document=document,
            raw=payload,
            validation=result,
        )

    def load_sample(self, variant: SchemaVariant | str = SchemaVariant.LEGACY) -> ImportedDocument:
        """Import one of the built-in sample documents.

        Parameters
        ----------
        variant:
            ``"legacy"`` or ``"new"``.

        Raises
        ------
        ValueError
            If no sample exists for *variant*.
        """
        variant = SchemaVariant(variant)
        filename = _SAMPLE_FILES.get(variant)
        if filename is None:
            raise ValueError(
                f"No sample document for variant {variant.value!r}. "
                f"Available: {', '.join(v.value for v in _SAMPLE_FILES)}."
            )
        content = resources.files("preflight_viewer").joinpath("data", filename).read_text(
            encoding="utf-8"
        )
        return self.load_text(content, source_name=f"sample:{variant.value}")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @staticmethod
    def dumps(imported: ImportedDocument) -> str:
        """Return the accepted payload as pretty-printed JSON text."""
        return json.dumps(imported.raw, indent=2, ensure_ascii=False)

    @staticmethod
    def default_export_name(now: datetime | None = None) -> str:
        """``test-results-YYYY-MM-DD.json`` for the current UTC date."""
        now = now if now is not None else datetime.now(timezone.utc)
        return f"test-results-{now.strftime('%Y-%m-%d')}.json"

    def export(
        self,
        imported: ImportedDocument,
        output: str | Path | None = None,
        directory: str | Path = ".",
    ) -> Path:
        """Write the accepted payload to *output* and return the path.

        When *output* is omitted the file is written to *directory* under
        :meth:`default_export_name`.
        """
        path = Path(output) if output is not None else Path(directory) / self.default_export_name()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(imported), encoding="utf-8")
        logger.info("Exported %s to %s", imported.source_name, path)
        return path

    def __repr__(self) -> str:
        return f"DocumentImporter(validator={self._validator!r})"


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


def _format_validation_error(exc: ValidationError, limit: int = 3) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()[:limit]
    ]
    remaining = exc.error_count() - len(problems)
    if remaining > 0:
        problems.append(f"and {remaining} more")
    return "; ".join(problems)


__all__ = [
    "DocumentImporter",
    "ImportedDocument",
]
