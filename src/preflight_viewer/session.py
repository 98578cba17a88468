"""Per-session persistence of the currently viewed document.

The viewer keeps exactly one imported document per session.  The accepted
JSON payload is serialised under the ``testResults`` key so a session can be
restored later without re-reading the file; clearing the session returns the
viewer to the import screen.

Classes
-------
SessionStore
    Protocol for a string key/value store.
InMemorySessionStore
    Dict-backed store, used by the CLI and tests.
ViewerSession
    Open, restore and clear the current document.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from preflight_viewer.errors import DocumentImportError
from preflight_viewer.importer import DocumentImporter, ImportedDocument

logger = logging.getLogger(__name__)

SESSION_KEY: str = "testResults"


@runtime_checkable
class SessionStore(Protocol):
    """Minimal key/value interface a session backend must provide."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dict-backed :class:`SessionStore`."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class ViewerSession:
    """Hold the document currently shown by the viewer.

    Parameters
    ----------
    store:
        Backend used to persist the accepted payload.  Defaults to a fresh
        :class:`InMemorySessionStore`.
    importer:
        Importer used to re-validate a persisted payload on restore.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        importer: DocumentImporter | None = None,
    ) -> None:
        self._store: SessionStore = store if store is not None else InMemorySessionStore()
        self._importer = importer if importer is not None else DocumentImporter()
        self._current: ImportedDocument | None = None

    def open(self, imported: ImportedDocument) -> None:
        """Make *imported* the current document and persist its payload."""
        self._store.set(SESSION_KEY, self._importer.dumps(imported))
        self._current = imported
        logger.debug("Session opened %s", imported.source_name)

    def current(self) -> ImportedDocument | None:
        """Return the current document, restoring it from the store if needed.

        A persisted payload that no longer validates is discarded and
        ``None`` is returned.
        """
        if self._current is not None:
            return self._current
        content = self._store.get(SESSION_KEY)
        if content is None:
            return None
        try:
            self._current = self._importer.load_text(content, source_name="session")
        except DocumentImportError as exc:
            logger.warning("Discarding unreadable session payload: %s", exc.detail)
            self._store.delete(SESSION_KEY)
            return None
        return self._current

    @property
    def is_open(self) -> bool:
        return self.current() is not None

    def clear(self) -> None:
        """Forget the current document."""
        self._store.delete(SESSION_KEY)
        self._current = None
        logger.debug("Session cleared")


__all__ = [
    "InMemorySessionStore",
    "SESSION_KEY",
    "SessionStore",
    "ViewerSession",
]
