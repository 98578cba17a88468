"""Typed document model for imported test-results files."""
from __future__ import annotations

from preflight_viewer.schema.models import (
    AudioInputTest,
    AudioTestResults,
    BitrateTestResults,
    BrowserInformation,
    CandidateType,
    ConnectivityStatus,
    IceCandidateStats,
    MediaQuality,
    PreflightReport,
    PreflightTestReport,
    QualityResults,
    Resolution,
    SimplifiedIceCandidate,
    StatValue,
    TestResultsDocument,
    TestTiming,
    TransportProtocol,
    UnitSummary,
    VideoTestResults,
)

__all__ = [
    "AudioInputTest",
    "AudioTestResults",
    "BitrateTestResults",
    "BrowserInformation",
    "CandidateType",
    "ConnectivityStatus",
    "IceCandidateStats",
    "MediaQuality",
    "PreflightReport",
    "PreflightTestReport",
    "QualityResults",
    "Resolution",
    "SimplifiedIceCandidate",
    "StatValue",
    "TestResultsDocument",
    "TestTiming",
    "TransportProtocol",
    "UnitSummary",
    "VideoTestResults",
]
