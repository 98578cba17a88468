"""Sample summaries and the unavailable-metric marker.

Functions
---------
summarize_samples
    min, max, mean and count of a numeric sample sequence.
percent_of
    Share of *part* in *whole*, in percent.

Classes
-------
DerivationGap
    Stands in for a metric the document does not carry data for.
SampleSummary
    Result of :func:`summarize_samples`.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar, Union

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DerivationGap:
    """A metric that cannot be derived from this document.

    Attributes
    ----------
    metric:
        Name of the metric that is unavailable.
    reason:
        Human-readable explanation suitable for display.
    data_quality_issue:
        True when the gap comes from data that breaks the document's own
        invariants (e.g. no samples and no recorded errors), rather than from
        a section the document variant simply does not have.
    """

    metric: str
    reason: str
    data_quality_issue: bool = False

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "N/A"


# A derived value or the marker explaining why it is absent.
Derived = Union[T, DerivationGap]


def is_available(value: object) -> bool:
    """Return True unless *value* is a :class:`DerivationGap`."""
    return not isinstance(value, DerivationGap)


@dataclass(frozen=True)
class SampleSummary:
    """Descriptive statistics for a numeric sample.

    Attributes
    ----------
    minimum:
        Smallest sample.
    maximum:
        Largest sample.
    mean:
        Arithmetic mean.
    count:
        Number of samples.
    """

    minimum: float
    maximum: float
    mean: float
    count: int


def summarize_samples(
    values: Sequence[float],
    metric: str = "samples",
    errors: Sequence[str] = (),
) -> Derived[SampleSummary]:
    """Compute min, max and mean of *values*.

    Parameters
    ----------
    values:
        Numeric samples in recording order.
    metric:
        Metric name used in the returned :class:`DerivationGap`.
    errors:
        Errors recorded by the test that produced *values*.  An empty sample
        with no recorded errors is reported as a data-quality issue.

    Returns
    -------
    SampleSummary | DerivationGap
        The summary, or a gap when there are no finite samples.

    Examples
    --------
    >>> summarize_samples([1.0, 2.0, 3.0]).mean
    2.0
    """
    if len(values) == 0:
        if errors:
            return DerivationGap(metric, "test failed before any samples were recorded")
        logger.warning("No samples for %s and no errors recorded", metric)
        return DerivationGap(
            metric,
            "no samples recorded and no errors reported",
            data_quality_issue=True,
        )

    samples = np.asarray(values, dtype=np.float64)
    if not np.all(np.isfinite(samples)):
        logger.warning("Non-finite samples for %s", metric)
        return DerivationGap(metric, "samples contain non-finite values", data_quality_issue=True)

    return SampleSummary(
        minimum=float(samples.min()),
        maximum=float(samples.max()),
        mean=float(samples.mean()),
        count=int(samples.size),
    )


def percent_of(part: float, whole: float) -> Derived[float]:
    """Return ``part / whole * 100``; a gap when *whole* is not positive."""
    if whole <= 0:
        return DerivationGap("percent", f"total must be positive, got {whole}")
    return part / whole * 100.0


__all__ = [
    "DerivationGap",
    "Derived",
    "SampleSummary",
    "is_available",
    "percent_of",
    "summarize_samples",
]
