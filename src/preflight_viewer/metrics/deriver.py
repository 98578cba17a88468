"""MetricDeriver — presentation-oriented statistics for one dashboard section.

Every derivation is a pure function of the validated document.  Metrics the
document has no data for are returned as
:class:`~preflight_viewer.metrics.statistics.DerivationGap` values so that one
missing metric never prevents the rest of a section, or other sections, from
rendering.

Sections
--------
audio
    Input level summary, range classification, per-sample bar heights.
network
    Quality results (new documents) or bitrate and preflight statistics
    (legacy documents), classified against the threshold table.
video
    Resolution tier, timing and, with quality results, bitrate/stability meters.
device
    Browser, engine, operating system and device identification.
ice
    Local/remote ICE candidates and the selected pair (legacy documents only).
connectivity
    Per-service health categories.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import JsonValue

from preflight_viewer.metrics.statistics import (
    DerivationGap,
    Derived,
    SampleSummary,
    is_available,
    percent_of,
    summarize_samples,
)
from preflight_viewer.metrics.thresholds import (
    AUDIO_LEVEL_HIGH,
    AUDIO_LEVEL_LOW,
    AVERAGE_BITRATE_GOOD_BPS,
    DEFAULT_THRESHOLDS,
    MAX_BITRATE_GOOD_BPS,
    AudioLevelRange,
    QualityLevel,
    QualityThresholds,
    ResolutionTier,
    StatusCategory,
    ThresholdRule,
    classify_audio_level,
    classify_connection_status,
    classify_resolution,
    is_average_bitrate_good,
    is_max_bitrate_good,
)
from preflight_viewer.metrics.units import parse_bitrate_bps, parse_duration_ms
from preflight_viewer.schema.models import (
    ConnectivityStatus,
    IceCandidateStats,
    MediaQuality,
    StatValue,
    TestResultsDocument,
    TestTiming,
    UnitSummary,
)

logger = logging.getLogger(__name__)

# Video meters: average bitrate that fills the bitrate meter, and the stability
# penalties per millisecond of jitter and per percent of packet loss.
VIDEO_BITRATE_METER_FULL_BPS: float = 5_000_000.0
STABILITY_JITTER_PENALTY: float = 2.0
STABILITY_PACKET_LOSS_PENALTY: float = 5.0

NETWORK_TIMING_PHASES: tuple[str, ...] = ("dtls", "ice", "peer_connection", "connect", "media")


class Section(str, Enum):
    """Dashboard sections a consumer may request metrics for."""

    AUDIO = "audio"
    NETWORK = "network"
    VIDEO = "video"
    DEVICE = "device"
    ICE = "ice"
    CONNECTIVITY = "connectivity"


# ---------------------------------------------------------------------------
# Shared result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassifiedValue:
    """A measurement in its base unit plus its :class:`QualityLevel`."""

    value: float
    unit: str
    level: QualityLevel


@dataclass(frozen=True)
class TimingSummary:
    started_at: datetime
    ended_at: datetime
    duration_seconds: float


# ---------------------------------------------------------------------------
# Section results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AudioMetrics:
    """Audio input test summary.

    Attributes
    ----------
    device_label:
        ``deviceId`` or ``"Default Device"``.
    test_name:
        Name reported by the test.
    passed:
        True when the test recorded no errors.
    errors:
        Errors reported by the test.
    timing:
        Start/end/duration of the test.
    levels:
        min/max/mean of the input level samples.
    normalized_level:
        The mean level on a 0-1 scale used for range classification.
    level_range:
        Range classification of *normalized_level*.
    in_range:
        True when *level_range* is ``IN_RANGE``.
    bar_heights:
        Per-sample bar height in percent, scaled between 10 and 100.
    """

    device_label: str
    test_name: str
    passed: bool
    errors: tuple[str, ...]
    timing: Derived[TimingSummary]
    levels: Derived[SampleSummary]
    normalized_level: Derived[float]
    level_range: Derived[AudioLevelRange]
    in_range: Derived[bool]
    bar_heights: tuple[float, ...]


@dataclass(frozen=True)
class MediaQualityMetrics:
    """Classified quality results for one media type."""

    media: str
    jitter: Derived[ClassifiedValue]
    packet_loss: Derived[ClassifiedValue]
    rtt_avg: Derived[ClassifiedValue]
    rtt_max: Derived[ClassifiedValue]
    bitrate_avg: Derived[ClassifiedValue]
    bitrate_max: Derived[ClassifiedValue]

    @property
    def worst_level(self) -> QualityLevel | None:
        """Most severe level among the available measurements."""
        order = [QualityLevel.GOOD, QualityLevel.WARNING, QualityLevel.CRITICAL]
        levels = [
            value.level
            for value in (
                self.jitter,
                self.packet_loss,
                self.rtt_avg,
                self.rtt_max,
                self.bitrate_avg,
                self.bitrate_max,
            )
            if isinstance(value, ClassifiedValue)
        ]
        if not levels:
            return None
        return max(levels, key=order.index)


@dataclass(frozen=True)
class BitrateMetrics:
    """Legacy media-connection bitrate test summary."""

    max_bps: float
    average_bps: float
    max_good: bool
    average_good: bool
    passed: bool
    errors: tuple[str, ...]
    samples_kbps: tuple[float, ...]
    samples: Derived[SampleSummary]
    timing: Derived[TimingSummary]


@dataclass(frozen=True)
class ProgressEventShare:
    """One preflight progress event and its share of the whole test."""

    name: str
    label: str
    duration_ms: float
    share_percent: Derived[float]


@dataclass(frozen=True)
class PreflightMetrics:
    """Legacy preflight report statistics."""

    jitter: Derived[ClassifiedValue]
    rtt: Derived[ClassifiedValue]
    packet_loss: Derived[ClassifiedValue]
    mos: Derived[float]
    phase_durations_ms: dict[str, float]
    progress_events: tuple[ProgressEventShare, ...]
    passed: bool
    error: JsonValue


@dataclass(frozen=True)
class NetworkMetrics:
    """Network section; ``primary_view`` mirrors which panel is shown first."""

    primary_view: str
    audio_quality: Derived[MediaQualityMetrics]
    video_quality: Derived[MediaQualityMetrics]
    bitrate: Derived[BitrateMetrics]
    preflight: Derived[PreflightMetrics]


@dataclass(frozen=True)
class VideoMetrics:
    device_id: str
    test_name: str
    passed: bool
    errors: tuple[str, ...]
    resolution_label: Derived[str]
    tier: Derived[ResolutionTier]
    timing: Derived[TimingSummary]
    bitrate_meter_percent: Derived[float]
    stability_meter_percent: Derived[float]


@dataclass(frozen=True)
class DeviceMetrics:
    browser: str
    engine: str
    os: str
    device: str
    user_agent: str


@dataclass(frozen=True)
class CandidateView:
    """Display form of one ICE candidate."""

    id: str
    candidate_type: str
    protocol: str
    endpoint: str
    priority: int
    network_type: str | None
    related_endpoint: str | None
    url: str | None
    selected: bool


@dataclass(frozen=True)
class IceMetrics:
    local_candidates: tuple[CandidateView, ...]
    remote_candidates: tuple[CandidateView, ...]
    selected_local: Derived[str]
    selected_remote: Derived[str]


@dataclass(frozen=True)
class ServiceStatus:
    service: str
    status: JsonValue
    category: StatusCategory
    recognised: bool


@dataclass(frozen=True)
class ConnectivityMetrics:
    services: tuple[ServiceStatus, ...]
    counts: dict[StatusCategory, int]
    is_new_format: bool
    shows_preflight_stats: bool

    @property
    def all_healthy(self) -> bool:
        return all(s.category is StatusCategory.HEALTHY for s in self.services)


SectionMetrics = (
    AudioMetrics
    | NetworkMetrics
    | VideoMetrics
    | DeviceMetrics
    | IceMetrics
    | ConnectivityMetrics
)


# ---------------------------------------------------------------------------
# Deriver
# ---------------------------------------------------------------------------


class MetricDeriver:
    """Compute section metrics from a validated :class:`TestResultsDocument`.

    The deriver holds configuration only; it keeps no per-document state, so
    repeated calls with the same arguments return equal results.

    Parameters
    ----------
    thresholds:
        Quality threshold table.  Defaults to :data:`DEFAULT_THRESHOLDS`.
    audio_level_low:
        Exclusive lower bound of the acceptable mean audio level.
    audio_level_high:
        Exclusive upper bound of the acceptable mean audio level.
    average_bitrate_good_bps:
        Inclusive lower bound for a good average bitrate.
    max_bitrate_good_bps:
        Inclusive lower bound for a good maximum bitrate.

    Example
    -------
    ::

        deriver = MetricDeriver()
        audio = deriver.derive(document, Section.AUDIO)
        print(audio.levels.mean, audio.in_range)
    """

    def __init__(
        self,
        thresholds: QualityThresholds | None = None,
        audio_level_low: float = AUDIO_LEVEL_LOW,
        audio_level_high: float = AUDIO_LEVEL_HIGH,
        average_bitrate_good_bps: float = AVERAGE_BITRATE_GOOD_BPS,
        max_bitrate_good_bps: float = MAX_BITRATE_GOOD_BPS,
    ) -> None:
        if audio_level_low >= audio_level_high:
            raise ValueError(
                f"audio_level_low ({audio_level_low}) must be below "
                f"audio_level_high ({audio_level_high})."
            )
        self._thresholds = thresholds if thresholds is not None else DEFAULT_THRESHOLDS
        self._audio_level_low = audio_level_low
        self._audio_level_high = audio_level_high
        self._average_bitrate_good_bps = average_bitrate_good_bps
        self._max_bitrate_good_bps = max_bitrate_good_bps

    @property
    def thresholds(self) -> QualityThresholds:
        return self._thresholds

    def derive(
        self, document: TestResultsDocument, section: Section | str
    ) -> SectionMetrics | DerivationGap:
        """Derive the metrics for one *section* of *document*.

        Parameters
        ----------
        document:
            A validated document.
        section:
            A :class:`Section` or its string value.

        Returns
        -------
        SectionMetrics | DerivationGap
            The section's metrics, or a gap when the document variant has no
            data for the section at all.

        Raises
        ------
        ValueError
            If *section* is not a known section name.
        """
        section = Section(section)
        handlers = {
            Section.AUDIO: self.audio,
            Section.NETWORK: self.network,
            Section.VIDEO: self.video,
            Section.DEVICE: self.device,
            Section.ICE: self.ice,
            Section.CONNECTIVITY: self.connectivity,
        }
        logger.debug("Deriving %s metrics", section.value)
        return handlers[section](document)

    def derive_all(
        self, document: TestResultsDocument
    ) -> dict[Section, SectionMetrics | DerivationGap]:
        """Derive every section; mainly useful for export and tests."""
        return {section: self.derive(document, section) for section in Section}

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------

    def audio(self, document: TestResultsDocument) -> AudioMetrics:
        input_test = document.audio_test_results.input_test
        levels = summarize_samples(
            input_test.values, metric="audio_levels", errors=input_test.errors
        )

        normalized: Derived[float]
        level_range: Derived[AudioLevelRange]
        in_range: Derived[bool]
        bar_heights: tuple[float, ...] = ()
        if isinstance(levels, SampleSummary):
            normalized = normalized_audio_level(levels)
            level_range = classify_audio_level(
                normalized, self._audio_level_low, self._audio_level_high
            )
            in_range = level_range is AudioLevelRange.IN_RANGE
            bar_heights = _bar_heights(input_test.values, levels.maximum)
        else:
            normalized = level_range = in_range = levels

        return AudioMetrics(
            device_label=input_test.device_id or "Default Device",
            test_name=input_test.test_name,
            passed=not input_test.errors,
            errors=input_test.errors,
            timing=_timing_summary(input_test.test_timing, "audio_timing"),
            levels=levels,
            normalized_level=normalized,
            level_range=level_range,
            in_range=in_range,
            bar_heights=bar_heights,
        )

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def network(self, document: TestResultsDocument) -> NetworkMetrics:
        quality = document.quality_results
        audio_quality: Derived[MediaQualityMetrics]
        video_quality: Derived[MediaQualityMetrics]
        if quality is None:
            gap = DerivationGap("quality_results", "not present in this result format")
            audio_quality = video_quality = gap
        else:
            audio_quality = self._media_quality("audio", quality.audio)
            video_quality = self._media_quality("video", quality.video)

        bitrate = self.bitrate(document)
        preflight = self.preflight(document)

        if quality is not None:
            primary_view = "quality"
        elif is_available(bitrate):
            primary_view = "bitrate"
        else:
            primary_view = "none"

        return NetworkMetrics(
            primary_view=primary_view,
            audio_quality=audio_quality,
            video_quality=video_quality,
            bitrate=bitrate,
            preflight=preflight,
        )

    def bitrate(self, document: TestResultsDocument) -> Derived[BitrateMetrics]:
        """Bitrate pass/fail flags and chart series from ``bitrateTestResults``."""
        results = document.bitrate_test_results
        if results is None:
            return DerivationGap("bitrate", "bitrate test results not present in this result format")

        return BitrateMetrics(
            max_bps=results.max_bitrate,
            average_bps=results.average_bitrate,
            max_good=is_max_bitrate_good(results.max_bitrate, self._max_bitrate_good_bps),
            average_good=is_average_bitrate_good(
                results.average_bitrate, self._average_bitrate_good_bps
            ),
            passed=not results.errors,
            errors=results.errors,
            samples_kbps=tuple(value / 1000 for value in results.values),
            samples=summarize_samples(
                results.values, metric="bitrate_samples", errors=results.errors
            ),
            timing=_timing_summary(results.test_timing, "bitrate_timing"),
        )

    def preflight(self, document: TestResultsDocument) -> Derived[PreflightMetrics]:
        """Classified statistics and progress events from ``preflightTestReport``."""
        wrapper = document.preflight_test_report
        if wrapper is None:
            return DerivationGap("preflight", "preflight report not present in this result format")
        report = wrapper.report
        if report is None:
            return DerivationGap(
                "preflight", "preflight test produced no report", data_quality_issue=True
            )

        thresholds = self._thresholds
        phases: dict[str, float] = {}
        for phase in NETWORK_TIMING_PHASES:
            timing = getattr(report.network_timing, phase)
            if timing is not None:
                phases[phase] = timing.duration

        total_ms = report.test_timing.duration if report.test_timing is not None else 0.0
        events = tuple(
            ProgressEventShare(
                name=event.name,
                label=humanize_event_name(event.name),
                duration_ms=event.duration,
                share_percent=percent_of(event.duration, total_ms),
            )
            for event in report.progress_events
        )

        return PreflightMetrics(
            jitter=_classify_stat(report.stats.jitter, thresholds.jitter, "jitter"),
            rtt=_classify_stat(report.stats.rtt, thresholds.rtt, "rtt"),
            packet_loss=_classify_stat(
                report.stats.packet_loss, thresholds.packet_loss, "packet_loss"
            ),
            mos=(
                report.mos.average
                if report.mos is not None
                else DerivationGap("mos", "MOS not reported")
            ),
            phase_durations_ms=phases,
            progress_events=events,
            passed=wrapper.error is None,
            error=wrapper.error,
        )

    def _media_quality(
        self, media: str, quality: MediaQuality | None
    ) -> Derived[MediaQualityMetrics]:
        if quality is None:
            return DerivationGap(f"{media}_quality", f"no {media} quality results")

        thresholds = self._thresholds
        bitrate_rule = thresholds.bitrate_rule(media)
        rtt = quality.rtt or UnitSummary()
        bitrate = quality.bitrate or UnitSummary()
        return MediaQualityMetrics(
            media=media,
            jitter=_classify(quality.jitter, thresholds.jitter, f"{media}_jitter"),
            packet_loss=_classify(
                quality.packet_loss, thresholds.packet_loss, f"{media}_packet_loss"
            ),
            rtt_avg=_classify(parse_duration_ms(rtt.avg), thresholds.rtt, f"{media}_rtt_avg"),
            rtt_max=_classify(parse_duration_ms(rtt.max), thresholds.rtt, f"{media}_rtt_max"),
            bitrate_avg=_classify(
                parse_bitrate_bps(bitrate.avg), bitrate_rule, f"{media}_bitrate_avg"
            ),
            bitrate_max=_classify(
                parse_bitrate_bps(bitrate.max), bitrate_rule, f"{media}_bitrate_max"
            ),
        )

    # ------------------------------------------------------------------
    # Video
    # ------------------------------------------------------------------

    def video(self, document: TestResultsDocument) -> VideoMetrics:
        video = document.video_test_results
        resolution = video.resolution

        resolution_label: Derived[str]
        tier: Derived[ResolutionTier]
        if resolution is None:
            resolution_label = tier = DerivationGap("resolution", "resolution not reported")
        else:
            resolution_label = f"{resolution.width} × {resolution.height}"
            tier = classify_resolution(resolution.width, resolution.height)

        bitrate_meter: Derived[float] = DerivationGap(
            "video_bitrate_meter", "quality results not present in this result format"
        )
        stability_meter: Derived[float] = DerivationGap(
            "video_stability_meter", "quality results not present in this result format"
        )
        quality = document.quality_results.video if document.quality_results else None
        if quality is not None:
            bitrate_meter = _bitrate_meter(quality)
            stability_meter = _stability_meter(quality)

        return VideoMetrics(
            device_id=video.device_id,
            test_name=video.test_name,
            passed=not video.errors,
            errors=video.errors,
            resolution_label=resolution_label,
            tier=tier,
            timing=_timing_summary(video.test_timing, "video_timing"),
            bitrate_meter_percent=bitrate_meter,
            stability_meter_percent=stability_meter,
        )

    # ------------------------------------------------------------------
    # Device
    # ------------------------------------------------------------------

    def device(self, document: TestResultsDocument) -> DeviceMetrics:
        info = document.browser_information
        return DeviceMetrics(
            browser=_join(info.browser.name, info.browser.version),
            engine=_join(info.engine.name, info.engine.version),
            os=_join(info.os.name, info.os.version),
            device=_join(info.device.vendor or "Unknown", info.device.model),
            user_agent=info.ua,
        )

    # ------------------------------------------------------------------
    # ICE
    # ------------------------------------------------------------------

    def ice(self, document: TestResultsDocument) -> IceMetrics | DerivationGap:
        results = document.bitrate_test_results
        if results is None:
            return DerivationGap(
                "ice_candidates",
                "detailed ICE candidate information is not available in this result format",
            )

        pair = results.selected_ice_candidate_pair_stats
        selected_ids = set()
        if pair is not None:
            selected_ids = {pair.local_candidate.id, pair.remote_candidate.id} - {""}

        local: list[CandidateView] = []
        remote: list[CandidateView] = []
        for candidate in results.ice_candidate_stats:
            view = _candidate_view(candidate, candidate.id in selected_ids)
            if candidate.type == "local-candidate" or not candidate.is_remote:
                local.append(view)
            # Matches both lists when type and isRemote disagree.
            if candidate.type == "remote-candidate" or candidate.is_remote:
                remote.append(view)

        if pair is None:
            no_pair = DerivationGap("selected_candidate_pair", "no candidate pair was selected")
            selected_local: Derived[str] = no_pair
            selected_remote: Derived[str] = no_pair
        else:
            selected_local = _endpoint(pair.local_candidate)
            selected_remote = _endpoint(pair.remote_candidate)

        return IceMetrics(
            local_candidates=tuple(local),
            remote_candidates=tuple(remote),
            selected_local=selected_local,
            selected_remote=selected_remote,
        )

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    def connectivity(self, document: TestResultsDocument) -> ConnectivityMetrics:
        services: list[ServiceStatus] = []
        counts = {category: 0 for category in StatusCategory}
        for service, status in document.connectivity_items():
            category = classify_connection_status(status)
            counts[category] += 1
            services.append(
                ServiceStatus(
                    service=service,
                    status=status,
                    category=category,
                    recognised=ConnectivityStatus.from_value(status) is not None,
                )
            )

        is_new_format = "signalConnection" in document.connectivity_results
        return ConnectivityMetrics(
            services=tuple(services),
            counts=counts,
            is_new_format=is_new_format,
            shows_preflight_stats=(
                not is_new_format and document.preflight_test_report is not None
            ),
        )

    def __repr__(self) -> str:
        return (
            f"MetricDeriver(audio_range=({self._audio_level_low}, {self._audio_level_high}), "
            f"average_bitrate_good_bps={self._average_bitrate_good_bps}, "
            f"max_bitrate_good_bps={self._max_bitrate_good_bps})"
        )


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------


def normalized_audio_level(levels: SampleSummary) -> float:
    """Return the mean level on a 0-1 scale.

    Samples already expressed as fractions (peak at most 1.0) are used as-is;
    samples in raw volume units are scaled by their peak.
    """
    if levels.maximum <= 1.0:
        return levels.mean
    return levels.mean / levels.maximum


def humanize_event_name(name: str) -> str:
    """``"mediaAcquired"`` -> ``"media acquired"``."""
    return re.sub(r"([A-Z])", r" \1", name).strip().lower()


def _bar_heights(values: Sequence[float], maximum: float) -> tuple[float, ...]:
    if maximum <= 0:
        return tuple(10.0 for _ in values)
    return tuple(10 + (value / maximum) * 90 for value in values)


def _timing_summary(timing: TestTiming | None, metric: str) -> Derived[TimingSummary]:
    if timing is None:
        return DerivationGap(metric, "test timing not reported")
    try:
        started = datetime.fromtimestamp(timing.start / 1000, tz=timezone.utc)
        ended = datetime.fromtimestamp(timing.end / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.warning("Timestamp out of range for %s: %r", metric, timing)
        return DerivationGap(metric, "timestamp out of range", data_quality_issue=True)
    return TimingSummary(
        started_at=started, ended_at=ended, duration_seconds=timing.duration / 1000
    )


def _classify(value: float | None, rule: ThresholdRule, metric: str) -> Derived[ClassifiedValue]:
    if value is None:
        return DerivationGap(metric, "value missing or not a number")
    return ClassifiedValue(value=value, unit=rule.unit, level=rule.classify(value))


def _classify_stat(
    stat: StatValue | None, rule: ThresholdRule, metric: str
) -> Derived[ClassifiedValue]:
    if stat is None:
        return DerivationGap(metric, "statistic not reported")
    return _classify(stat.average, rule, metric)


def _bitrate_meter(quality: MediaQuality) -> Derived[float]:
    avg = parse_bitrate_bps(quality.bitrate.avg) if quality.bitrate else None
    if avg is None:
        return DerivationGap("video_bitrate_meter", "average video bitrate missing or not a number")
    return min(avg / VIDEO_BITRATE_METER_FULL_BPS * 100, 100.0)


def _stability_meter(quality: MediaQuality) -> Derived[float]:
    if quality.jitter is None or quality.packet_loss is None:
        return DerivationGap("video_stability_meter", "video jitter or packet loss missing")
    score = (
        100
        - quality.jitter * STABILITY_JITTER_PENALTY
        - quality.packet_loss * STABILITY_PACKET_LOSS_PENALTY
    )
    return max(score, 0.0)


def _candidate_view(candidate: IceCandidateStats, selected: bool) -> CandidateView:
    related = None
    if candidate.related_address:
        related = f"{candidate.related_address}:{candidate.related_port}"
    return CandidateView(
        id=candidate.id,
        candidate_type=candidate.candidate_type.value,
        protocol=candidate.protocol.value.upper(),
        endpoint=_endpoint(candidate),
        priority=candidate.priority,
        network_type=candidate.network_type,
        related_endpoint=related,
        url=candidate.url,
        selected=selected,
    )


def _endpoint(candidate: IceCandidateStats) -> str:
    return f"{candidate.address or candidate.ip}:{candidate.port}"


def _join(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


__all__ = [
    "AudioMetrics",
    "BitrateMetrics",
    "CandidateView",
    "ClassifiedValue",
    "ConnectivityMetrics",
    "DeviceMetrics",
    "IceMetrics",
    "MediaQualityMetrics",
    "MetricDeriver",
    "NetworkMetrics",
    "PreflightMetrics",
    "ProgressEventShare",
    "Section",
    "SectionMetrics",
    "ServiceStatus",
    "TimingSummary",
    "VideoMetrics",
    "humanize_event_name",
    "normalized_audio_level",
]
