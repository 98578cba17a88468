"""Import-boundary exceptions.

Only the import step raises.  Validation and metric derivation are total
functions that report problems through their return values instead.

Classes
-------
DocumentImportError
    Base class; carries a short, user-actionable ``user_message``.
ParseError
    The input bytes are not valid JSON text.
SchemaRejection
    The JSON parsed but is not a recognised test-results document.
UnsupportedFileTypeError
    The file does not look like a JSON file at all.
FileReadError
    The file could not be read from disk.
"""
from __future__ import annotations


class DocumentImportError(Exception):
    """Base class for every failure that ends an import attempt."""

    user_message: str = "The file could not be imported."

    def __init__(self, detail: str, source_name: str = "unknown") -> None:
        self.detail = detail
        self.source_name = source_name
        super().__init__(f"{self.user_message} ({source_name}: {detail})")


class ParseError(DocumentImportError):
    """Raised when the payload is not valid JSON text."""

    user_message = "Failed to parse file. Please ensure it is a valid JSON file."


class SchemaRejection(DocumentImportError):
    """Raised when valid JSON is not a recognised test-results format."""

    user_message = (
        "Invalid file format. Please import a valid test results file."
    )


class UnsupportedFileTypeError(DocumentImportError):
    """Raised when a file without a ``.json`` extension is offered."""

    user_message = "Please import a JSON file."


class FileReadError(DocumentImportError):
    """Raised when the file exists but cannot be read."""

    user_message = "Error reading file."


__all__ = [
    "DocumentImportError",
    "FileReadError",
    "ParseError",
    "SchemaRejection",
    "UnsupportedFileTypeError",
]
