"""Typed, immutable model of a WebRTC pre-flight test-results document.

The JSON documents use camelCase keys; every model here exposes snake_case
attributes and accepts either spelling on input.  Sections that differ
between the legacy (Twilio-style) and new (LiveKit-style) documents are
optional on :class:`TestResultsDocument`.

Fields the producing tools leave untyped (``outputTest``, ``cpu`` and the
preflight ``error``) are carried as opaque JSON values.
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, Field, JsonValue, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ConnectivityStatus(str, Enum):
    """Health value reported for one connectivity service."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    OUTAGE = "outage"
    REACHABLE = "Reachable"
    SUCCESS = "success"
    FAILED = "failed"

    @classmethod
    def from_value(cls, value: object) -> ConnectivityStatus | None:
        """Return the member matching *value* exactly, or ``None``."""
        for member in cls:
            if member.value == value:
                return member
        return None


class CandidateType(str, Enum):
    """ICE candidate type."""

    HOST = "host"
    SRFLX = "srflx"
    RELAY = "relay"
    PRFLX = "prflx"


class TransportProtocol(str, Enum):
    """Transport protocol of an ICE candidate."""

    UDP = "udp"
    TCP = "tcp"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class DocumentModel(BaseModel):
    """Common configuration: frozen, camelCase aliases, unknown keys ignored.

    Numbers must be finite; NaN or infinity anywhere in the document fails
    coercion.
    """

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
        "extra": "ignore",
        "allow_inf_nan": False,
    }


# ---------------------------------------------------------------------------
# Shared records
# ---------------------------------------------------------------------------


class TestTiming(DocumentModel):
    """Start/end (Unix epoch, ms) and duration (ms) of one test phase."""

    start: float
    end: float
    duration: float = Field(ge=0)


class StatValue(DocumentModel):
    """``min``/``max``/``average`` triple."""

    min: float
    max: float
    average: float


# ---------------------------------------------------------------------------
# Audio / video
# ---------------------------------------------------------------------------


class AudioInputTest(DocumentModel):
    device_id: str = ""
    errors: tuple[str, ...] = ()
    test_name: str = ""
    values: tuple[float, ...] = ()
    test_timing: TestTiming | None = None


class AudioTestResults(DocumentModel):
    input_test: AudioInputTest
    output_test: JsonValue = None


class Resolution(DocumentModel):
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class VideoTestResults(DocumentModel):
    device_id: str = ""
    errors: tuple[str, ...] = ()
    resolution: Resolution | None = None
    test_name: str = ""
    test_timing: TestTiming | None = None


# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------


class BrowserIdentity(DocumentModel):
    name: str | None = None
    version: str | None = None
    major: str | None = None


class EngineIdentity(DocumentModel):
    name: str | None = None
    version: str | None = None


class OsIdentity(DocumentModel):
    name: str | None = None
    version: str | None = None


class DeviceIdentity(DocumentModel):
    vendor: str | None = None
    model: str | None = None


class BrowserInformation(DocumentModel):
    """User agent plus the parsed browser/engine/os/device breakdown."""

    ua: str = ""
    browser: BrowserIdentity = Field(default_factory=BrowserIdentity)
    engine: EngineIdentity = Field(default_factory=EngineIdentity)
    os: OsIdentity = Field(default_factory=OsIdentity)
    device: DeviceIdentity = Field(default_factory=DeviceIdentity)
    cpu: JsonValue = None


# ---------------------------------------------------------------------------
# ICE candidates
# ---------------------------------------------------------------------------


class SimplifiedIceCandidate(DocumentModel):
    """Candidate as reported inside the preflight report."""

    transport_id: str = ""
    candidate_type: CandidateType
    port: int = Field(ge=0)
    address: str = ""
    priority: int = Field(ge=0)
    protocol: TransportProtocol
    url: str | None = None
    relay_protocol: str | None = None


class IceCandidateStats(SimplifiedIceCandidate):
    """Full RTCIceCandidateStats record from the bitrate test."""

    id: str = ""
    timestamp: float | None = None
    type: str = ""
    foundation: str | None = None
    ip: str = ""
    is_remote: bool = False
    network_type: str | None = None
    related_address: str | None = None
    related_port: int | None = None
    username_fragment: str | None = None
    tcp_type: str | None = None


class SelectedCandidatePair(DocumentModel):
    local_candidate: IceCandidateStats
    remote_candidate: IceCandidateStats


class SimplifiedCandidatePair(DocumentModel):
    local_candidate: SimplifiedIceCandidate
    remote_candidate: SimplifiedIceCandidate


# ---------------------------------------------------------------------------
# Legacy sections
# ---------------------------------------------------------------------------


class BitrateTestResults(DocumentModel):
    """Media-connection bitrate test (legacy documents)."""

    max_bitrate: float
    average_bitrate: float
    errors: tuple[str, ...] = ()
    ice_candidate_stats: tuple[IceCandidateStats, ...] = ()
    test_name: str = ""
    test_timing: TestTiming | None = None
    values: tuple[float, ...] = ()
    selected_ice_candidate_pair_stats: SelectedCandidatePair | None = None


class NetworkTiming(DocumentModel):
    dtls: TestTiming | None = None
    ice: TestTiming | None = None
    peer_connection: TestTiming | None = None
    connect: TestTiming | None = None
    media: TestTiming | None = None


class PreflightStats(DocumentModel):
    jitter: StatValue | None = None
    rtt: StatValue | None = None
    packet_loss: StatValue | None = None


class ProgressEvent(DocumentModel):
    duration: float
    name: str


class PreflightReport(DocumentModel):
    test_timing: TestTiming | None = None
    network_timing: NetworkTiming = Field(default_factory=NetworkTiming)
    stats: PreflightStats = Field(default_factory=PreflightStats)
    selected_ice_candidate_pair_stats: SimplifiedCandidatePair | None = None
    ice_candidate_stats: tuple[SimplifiedIceCandidate, ...] = ()
    progress_events: tuple[ProgressEvent, ...] = ()
    mos: StatValue | None = None


class PreflightTestReport(DocumentModel):
    """Preflight report wrapper (legacy documents)."""

    report: PreflightReport | None = None
    error: JsonValue = None


# ---------------------------------------------------------------------------
# New sections
# ---------------------------------------------------------------------------


class UnitSummary(DocumentModel):
    """``avg``/``max`` pair of unit-suffixed strings such as ``"45ms"``."""

    avg: str | float | None = None
    max: str | float | None = None


class MediaQuality(DocumentModel):
    jitter: float | None = None
    packet_loss: float | None = None
    rtt: UnitSummary | None = Field(default=None, alias="RTT")
    bitrate: UnitSummary | None = None


class QualityResults(DocumentModel):
    """Per-media quality measurements (new documents)."""

    audio: MediaQuality | None = None
    video: MediaQuality | None = None


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class TestResultsDocument(DocumentModel):
    """Root of an imported test-results document."""

    audio_test_results: AudioTestResults
    video_test_results: VideoTestResults
    browser_information: BrowserInformation
    connectivity: tuple[tuple[str, JsonValue], ...] = Field(
        default=(), alias="connectivityResults"
    )
    bitrate_test_results: BitrateTestResults | None = None
    preflight_test_report: PreflightTestReport | None = None
    quality_results: QualityResults | None = None

    @field_validator("connectivity", mode="before")
    @classmethod
    def _connectivity_pairs(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            raise ValueError("connectivityResults must be a JSON object")
        return tuple(value.items())

    @property
    def connectivity_results(self) -> dict[str, JsonValue]:
        """A fresh ``{service: raw status}`` dict; changing it does not touch the document."""
        return dict(self.connectivity)

    def connectivity_items(self) -> list[tuple[str, JsonValue]]:
        """Return connectivity ``(service, raw status)`` pairs in document order."""
        return list(self.connectivity)

    @property
    def has_legacy_sections(self) -> bool:
        return (
            self.bitrate_test_results is not None
            and self.preflight_test_report is not None
        )

    @property
    def has_quality_results(self) -> bool:
        return self.quality_results is not None


__all__ = [
    "AudioInputTest",
    "AudioTestResults",
    "BitrateTestResults",
    "BrowserIdentity",
    "BrowserInformation",
    "CandidateType",
    "ConnectivityStatus",
    "DeviceIdentity",
    "DocumentModel",
    "EngineIdentity",
    "IceCandidateStats",
    "MediaQuality",
    "NetworkTiming",
    "OsIdentity",
    "PreflightReport",
    "PreflightStats",
    "PreflightTestReport",
    "ProgressEvent",
    "QualityResults",
    "Resolution",
    "SelectedCandidatePair",
    "SimplifiedCandidatePair",
    "SimplifiedIceCandidate",
    "StatValue",
    "TestResultsDocument",
    "TestTiming",
    "TransportProtocol",
    "UnitSummary",
    "VideoTestResults",
]
