"""Derived, presentation-oriented metrics.

Submodules
----------
statistics:
    Sample summaries (numpy) and the :class:`DerivationGap` marker.
units:
    Parsing of unit-suffixed strings such as ``"45ms"`` and ``"1.2Mbps"``.
thresholds:
    Threshold tables and classification rules.
deriver:
    :class:`MetricDeriver` computes one dashboard section at a time.
"""
from __future__ import annotations

from preflight_viewer.metrics.deriver import (
    AudioMetrics,
    ConnectivityMetrics,
    DeviceMetrics,
    IceMetrics,
    MetricDeriver,
    NetworkMetrics,
    Section,
    VideoMetrics,
)
from preflight_viewer.metrics.statistics import (
    DerivationGap,
    SampleSummary,
    is_available,
    summarize_samples,
)
from preflight_viewer.metrics.thresholds import (
    AudioLevelRange,
    QualityLevel,
    QualityThresholds,
    ResolutionTier,
    StatusCategory,
    ThresholdRule,
    classify_audio_level,
    classify_connection_status,
    classify_quality,
    classify_resolution,
    is_average_bitrate_good,
    is_max_bitrate_good,
)
from preflight_viewer.metrics.units import (
    parse_bitrate_bps,
    parse_duration_ms,
    parse_unit_value,
)

__all__: list[str] = [
    # deriver
    "AudioMetrics",
    "ConnectivityMetrics",
    "DeviceMetrics",
    "IceMetrics",
    "MetricDeriver",
    "NetworkMetrics",
    "Section",
    "VideoMetrics",
    # statistics
    "DerivationGap",
    "SampleSummary",
    "is_available",
    "summarize_samples",
    # thresholds
    "AudioLevelRange",
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
    # units
    "parse_bitrate_bps",
    "parse_duration_ms",
    "parse_unit_value",
]
