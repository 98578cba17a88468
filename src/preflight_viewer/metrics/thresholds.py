"""Threshold tables and classification rules for derived metrics.

Two families of quality metrics exist:

- **lower is better** (jitter, packet loss, RTT): a value above the critical
  limit is critical, above the warning limit is a warning, otherwise good.
- **higher is better** (audio and video bitrate): a value below the critical
  limit is critical, below the warning limit is a warning, otherwise good.

A value sitting exactly on a limit is classified on the better side.
"""
from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from preflight_viewer.schema.models import ConnectivityStatus

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

AUDIO_LEVEL_LOW: float = 0.1
AUDIO_LEVEL_HIGH: float = 0.9

AVERAGE_BITRATE_GOOD_BPS: float = 500_000.0
MAX_BITRATE_GOOD_BPS: float = 1_000_000.0

HD_RESOLUTION: tuple[int, int] = (1280, 720)
FULL_HD_RESOLUTION: tuple[int, int] = (1920, 1080)

HEALTHY_STATUSES: frozenset[str] = frozenset(
    {
        ConnectivityStatus.OPERATIONAL.value,
        ConnectivityStatus.REACHABLE.value,
        ConnectivityStatus.SUCCESS.value,
    }
)
DEGRADED_STATUSES: frozenset[str] = frozenset({ConnectivityStatus.DEGRADED.value})


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class QualityLevel(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class MetricDirection(str, Enum):
    LOWER_IS_BETTER = "lower_is_better"
    HIGHER_IS_BETTER = "higher_is_better"


class AudioLevelRange(str, Enum):
    TOO_LOW = "too_low"
    IN_RANGE = "in_range"
    TOO_HIGH = "too_high"


class ResolutionTier(str, Enum):
    SD = "SD"
    HD = "HD"
    FULL_HD = "Full HD"


class StatusCategory(str, Enum):
    """Display category of a connectivity status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# ---------------------------------------------------------------------------
# Threshold models
# ---------------------------------------------------------------------------


class ThresholdRule(BaseModel):
    """Warning and critical limits for one metric.

    Attributes
    ----------
    warning:
        Limit beyond which the metric is a warning.
    critical:
        Limit beyond which the metric is critical.
    direction:
        Whether lower or higher values are better.
    unit:
        Display unit of the limits.
    """

    warning: float
    critical: float
    direction: MetricDirection = MetricDirection.LOWER_IS_BETTER
    unit: str = ""

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> ThresholdRule:
        if self.direction is MetricDirection.LOWER_IS_BETTER:
            if self.warning > self.critical:
                raise ValueError(
                    f"warning ({self.warning}) must not exceed critical ({self.critical}) "
                    "for a lower-is-better metric"
                )
        elif self.warning < self.critical:
            raise ValueError(
                f"warning ({self.warning}) must not be below critical ({self.critical}) "
                "for a higher-is-better metric"
            )
        return self

    def classify(self, value: float) -> QualityLevel:
        """Return the :class:`QualityLevel` of *value* under this rule."""
        if self.direction is MetricDirection.LOWER_IS_BETTER:
            if value > self.critical:
                return QualityLevel.CRITICAL
            if value > self.warning:
                return QualityLevel.WARNING
            return QualityLevel.GOOD
        if value < self.critical:
            return QualityLevel.CRITICAL
        if value < self.warning:
            return QualityLevel.WARNING
        return QualityLevel.GOOD


class QualityThresholds(BaseModel):
    """Threshold table for every classified quality metric."""

    jitter: ThresholdRule = Field(
        default_factory=lambda: ThresholdRule(warning=30.0, critical=50.0, unit="ms")
    )
    packet_loss: ThresholdRule = Field(
        default_factory=lambda: ThresholdRule(warning=1.0, critical=5.0, unit="%")
    )
    rtt: ThresholdRule = Field(
        default_factory=lambda: ThresholdRule(warning=200.0, critical=300.0, unit="ms")
    )
    audio_bitrate: ThresholdRule = Field(
        default_factory=lambda: ThresholdRule(
            warning=30_000.0,
            critical=20_000.0,
            direction=MetricDirection.HIGHER_IS_BETTER,
            unit="bps",
        )
    )
    video_bitrate: ThresholdRule = Field(
        default_factory=lambda: ThresholdRule(
            warning=500_000.0,
            critical=250_000.0,
            direction=MetricDirection.HIGHER_IS_BETTER,
            unit="bps",
        )
    )

    model_config = {"frozen": True}

    def bitrate_rule(self, media: str) -> ThresholdRule:
        """Return the bitrate rule for ``"audio"`` or ``"video"``."""
        if media == "audio":
            return self.audio_bitrate
        if media == "video":
            return self.video_bitrate
        raise ValueError(f"Unknown media type {media!r}; expected 'audio' or 'video'.")


DEFAULT_THRESHOLDS = QualityThresholds()


# ---------------------------------------------------------------------------
# Classification functions
# ---------------------------------------------------------------------------


def classify_quality(value: float, rule: ThresholdRule) -> QualityLevel:
    """Classify *value* against *rule*."""
    return rule.classify(value)


def classify_audio_level(
    level: float,
    low: float = AUDIO_LEVEL_LOW,
    high: float = AUDIO_LEVEL_HIGH,
) -> AudioLevelRange:
    """Classify a mean audio level; both bounds are exclusive."""
    if level <= low:
        return AudioLevelRange.TOO_LOW
    if level >= high:
        return AudioLevelRange.TOO_HIGH
    return AudioLevelRange.IN_RANGE


def is_average_bitrate_good(
    average_bps: float, threshold: float = AVERAGE_BITRATE_GOOD_BPS
) -> bool:
    return average_bps >= threshold


def is_max_bitrate_good(max_bps: float, threshold: float = MAX_BITRATE_GOOD_BPS) -> bool:
    return max_bps >= threshold


def classify_resolution(width: int, height: int) -> ResolutionTier:
    """Return the highest tier whose width AND height are both met."""
    if width >= FULL_HD_RESOLUTION[0] and height >= FULL_HD_RESOLUTION[1]:
        return ResolutionTier.FULL_HD
    if width >= HD_RESOLUTION[0] and height >= HD_RESOLUTION[1]:
        return ResolutionTier.HD
    return ResolutionTier.SD


def classify_connection_status(status: object) -> StatusCategory:
    """Map a connectivity status to its display category.

    Unrecognised values are unhealthy.
    """
    if not isinstance(status, str):
        return StatusCategory.UNHEALTHY
    if status in HEALTHY_STATUSES:
        return StatusCategory.HEALTHY
    if status in DEGRADED_STATUSES:
        return StatusCategory.DEGRADED
    return StatusCategory.UNHEALTHY


__all__ = [
    "AUDIO_LEVEL_HIGH",
    "AUDIO_LEVEL_LOW",
    "AVERAGE_BITRATE_GOOD_BPS",
    "AudioLevelRange",
    "DEFAULT_THRESHOLDS",
    "FULL_HD_RESOLUTION",
    "HD_RESOLUTION",
    "MAX_BITRATE_GOOD_BPS",
    "MetricDirection",
    "QualityLevel",
    "QualityThresholds",
    "ResolutionTier",
    "StatusCategory",
    "ThresholdRule",
    "classify_audio_level",
    "classify_connection_status",
    "classify_quality",
    "classify_resolution",
    "is_average_bitrate_good",
    "is_max_bitrate_good",
]
