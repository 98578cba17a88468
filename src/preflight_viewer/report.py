"""Section report formatting.

Turns the frozen section results produced by
:class:`~preflight_viewer.metrics.MetricDeriver` into output-ready shapes:
flat label/value rows for terminal tables, and JSON-compatible dictionaries.

Classes
-------
SectionReporter
    Flattens and serialises section metrics.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum

from preflight_viewer.metrics.deriver import Section
from preflight_viewer.metrics.statistics import DerivationGap

logger = logging.getLogger(__name__)


class SectionReporter:
    """Format derived section metrics.

    Parameters
    ----------
    precision:
        Decimal places used for floats in table rows.  JSON output keeps
        full precision.

    Example
    -------
    ::

        deriver = MetricDeriver()
        reporter = SectionReporter()
        for label, value in reporter.rows(deriver.derive(document, "audio")):
            print(f"{label:<30} {value}")
    """

    def __init__(self, precision: int = 2) -> None:
        if precision < 0:
            raise ValueError(f"precision must be non-negative, got {precision}.")
        self._precision = precision

    # ------------------------------------------------------------------
    # Table rows
    # ------------------------------------------------------------------

    def rows(self, metrics: object) -> list[tuple[str, str]]:
        """Flatten *metrics* into ``(label, value)`` pairs.

        Nested results produce dotted labels (``levels.mean``); sequences of
        results are indexed (``local_candidates[0].endpoint``).  A
        :class:`DerivationGap` renders as ``N/A`` followed by its reason.
        """
        rows: list[tuple[str, str]] = []
        self._flatten(metrics, "", rows)
        return rows

    def _flatten(self, value: object, label: str, rows: list[tuple[str, str]]) -> None:
        if isinstance(value, DerivationGap):
            rows.append((label or value.metric, f"{value} ({value.reason})"))
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            for field in dataclasses.fields(value):
                child = f"{label}.{field.name}" if label else field.name
                self._flatten(getattr(value, field.name), child, rows)
        elif isinstance(value, Mapping):
            if not value:
                rows.append((label, "-"))
            for key, item in value.items():
                self._flatten(item, f"{label}.{_key(key)}" if label else _key(key), rows)
        elif isinstance(value, (list, tuple)) and any(_is_structured(v) for v in value):
            for index, item in enumerate(value):
                self._flatten(item, f"{label}[{index}]", rows)
        else:
            rows.append((label, self._scalar(value)))

    def _scalar(self, value: object) -> str:
        if value is None:
            return "-"
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, float):
            return f"{value:.{self._precision}f}"
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, (list, tuple)):
            return ", ".join(self._scalar(item) for item in value) if value else "-"
        return str(value)

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_dict(
        self, results: Mapping[Section, object]
    ) -> dict[str, object]:
        """Return ``{section name: JSON-compatible metrics}``."""
        return {Section(section).value: to_jsonable(metrics) for section, metrics in results.items()}

    def format_json(self, results: Mapping[Section, object]) -> str:
        """Render *results* as pretty-printed JSON text."""
        payload = self.to_dict(results)
        logger.debug("Formatting %d section(s) as JSON", len(payload))
        return json.dumps(payload, indent=2, ensure_ascii=False)


def to_jsonable(value: object) -> object:
    """Convert derived metrics into JSON-compatible Python values.

    A :class:`DerivationGap` becomes ``{"available": false, ...}`` so that
    consumers can tell a missing metric from a zero one.
    """
    if isinstance(value, DerivationGap):
        return {
            "available": False,
            "metric": value.metric,
            "reason": value.reason,
            "data_quality_issue": value.data_quality_issue,
        }
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_jsonable(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {_key(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def _key(key: object) -> str:
    return str(key.value) if isinstance(key, Enum) else str(key)


def _is_structured(value: object) -> bool:
    return isinstance(value, (DerivationGap, Mapping)) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    )


__all__ = [
    "SectionReporter",
    "to_jsonable",
]
