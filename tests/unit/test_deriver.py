"""Unit tests for MetricDeriver.

Covers:
- audio summary, range classification, bar heights and the end-to-end
  [3.3, 10.8, 9.1] scenario
- network view for legacy (bitrate + preflight) and new (quality) documents
- video resolution tier and quality meters
- device labels
- ICE candidate split and selected pair
- connectivity categories and counts
- DerivationGap values and idempotence
"""
from __future__ import annotations

import copy
import json
from importlib import resources

import pytest

from preflight_viewer.metrics.deriver import (
    AudioMetrics,
    BitrateMetrics,
    ClassifiedValue,
    ConnectivityMetrics,
    DeviceMetrics,
    IceMetrics,
    MediaQualityMetrics,
    MetricDeriver,
    NetworkMetrics,
    PreflightMetrics,
    Section,
    VideoMetrics,
    humanize_event_name,
    normalized_audio_level,
)
from preflight_viewer.metrics.statistics import DerivationGap, SampleSummary
from preflight_viewer.metrics.thresholds import (
    AudioLevelRange,
    QualityLevel,
    ResolutionTier,
    StatusCategory,
)
from preflight_viewer.schema.models import TestResultsDocument


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sample_raw(name: str) -> dict[str, object]:
    text = resources.files("preflight_viewer").joinpath("data", name).read_text(encoding="utf-8")
    return json.loads(text)


def _document(raw: dict[str, object]) -> TestResultsDocument:
    return TestResultsDocument.model_validate(raw)


def _candidate(
    candidate_id: str, kind: str, is_remote: bool, address: str, port: int
) -> dict[str, object]:
    return {
        "id": candidate_id,
        "type": kind,
        "isRemote": is_remote,
        "address": address,
        "ip": address,
        "port": port,
        "candidateType": "host",
        "priority": 100,
        "protocol": "udp",
    }


@pytest.fixture()
def deriver() -> MetricDeriver:
    return MetricDeriver()


@pytest.fixture()
def legacy_raw() -> dict[str, object]:
    return _sample_raw("legacy_sample.json")


@pytest.fixture()
def new_raw() -> dict[str, object]:
    return _sample_raw("new_sample.json")


@pytest.fixture()
def legacy(legacy_raw: dict[str, object]) -> TestResultsDocument:
    return _document(legacy_raw)


@pytest.fixture()
def new(new_raw: dict[str, object]) -> TestResultsDocument:
    return _document(new_raw)


# ---------------------------------------------------------------------------
# Construction and dispatch
# ---------------------------------------------------------------------------


class TestDeriverBasics:
    def test_inverted_audio_bounds_rejected(self) -> None:
        with pytest.raises(ValueError, match="audio_level_low"):
            MetricDeriver(audio_level_low=0.9, audio_level_high=0.1)

    def test_unknown_section_raises(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        with pytest.raises(ValueError):
            deriver.derive(new, "speakers")

    def test_derive_accepts_string_section(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        assert isinstance(deriver.derive(new, "audio"), AudioMetrics)

    def test_derive_all_covers_every_section(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        results = deriver.derive_all(legacy)
        assert set(results) == set(Section)
        assert isinstance(results[Section.NETWORK], NetworkMetrics)
        assert isinstance(results[Section.CONNECTIVITY], ConnectivityMetrics)

    @pytest.mark.parametrize("section", list(Section))
    def test_idempotent(
        self, deriver: MetricDeriver, legacy: TestResultsDocument, section: Section
    ) -> None:
        assert deriver.derive(legacy, section) == deriver.derive(legacy, section)

    def test_document_not_mutated(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        snapshot = new.model_dump()
        deriver.derive_all(new)
        assert new.model_dump() == snapshot


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


class TestAudio:
    def test_end_to_end_sample_values(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["audioTestResults"]["inputTest"]["values"] = [3.3, 10.8, 9.1]  # type: ignore[index]
        audio = deriver.derive(_document(raw), Section.AUDIO)
        assert isinstance(audio, AudioMetrics)
        assert isinstance(audio.levels, SampleSummary)
        assert audio.levels.minimum == pytest.approx(3.3)
        assert audio.levels.maximum == pytest.approx(10.8)
        assert audio.levels.mean == pytest.approx(7.733, abs=1e-3)
        assert audio.in_range is True

    def test_fractional_levels_used_directly(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        audio = deriver.audio(new)
        assert audio.normalized_level == pytest.approx(0.2)
        assert audio.level_range is AudioLevelRange.IN_RANGE

    def test_bar_heights(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        heights = deriver.audio(new).bar_heights
        assert heights == pytest.approx((64.0, 89.2, 74.8, 100.0))

    def test_device_label_and_pass(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        audio = deriver.audio(new)
        assert audio.device_label == "default"
        assert audio.passed is True
        assert audio.timing.duration_seconds == pytest.approx(5.0)  # type: ignore[union-attr]

    def test_missing_device_id_uses_default_label(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        del raw["audioTestResults"]["inputTest"]["deviceId"]  # type: ignore[index]
        assert deriver.audio(_document(raw)).device_label == "Default Device"

    @pytest.mark.parametrize(
        ("values", "normalized", "expected"),
        [
            ([0.5, 1.5], 1.0 / 1.5, AudioLevelRange.IN_RANGE),
            ([0.95, 0.95], 0.95, AudioLevelRange.TOO_HIGH),
            ([1.0, 1.0], 1.0, AudioLevelRange.TOO_HIGH),
            ([0.1, 5.0], 2.55 / 5.0, AudioLevelRange.IN_RANGE),
        ],
    )
    def test_range_uses_peak_scaled_mean_above_unit_peak(
        self,
        deriver: MetricDeriver,
        new_raw: dict[str, object],
        values: list[float],
        normalized: float,
        expected: AudioLevelRange,
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["audioTestResults"]["inputTest"]["values"] = values  # type: ignore[index]
        audio = deriver.audio(_document(raw))
        assert audio.normalized_level == pytest.approx(normalized)
        assert audio.level_range is expected

    def test_quiet_input_is_too_low(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["audioTestResults"]["inputTest"]["values"] = [0.01, 0.02]  # type: ignore[index]
        audio = deriver.audio(_document(raw))
        assert audio.level_range is AudioLevelRange.TOO_LOW
        assert audio.in_range is False

    def test_failed_test_without_samples_is_gap(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["audioTestResults"]["inputTest"]["values"] = []  # type: ignore[index]
        raw["audioTestResults"]["inputTest"]["errors"] = ["NotAllowedError"]  # type: ignore[index]
        audio = deriver.audio(_document(raw))
        assert audio.passed is False
        assert isinstance(audio.levels, DerivationGap)
        assert isinstance(audio.in_range, DerivationGap)
        assert audio.levels.data_quality_issue is False
        assert audio.bar_heights == ()

    def test_empty_samples_without_errors_flagged(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["audioTestResults"]["inputTest"]["values"] = []  # type: ignore[index]
        audio = deriver.audio(_document(raw))
        assert isinstance(audio.levels, DerivationGap)
        assert audio.levels.data_quality_issue is True

    def test_normalized_level_scales_by_peak(self) -> None:
        summary = SampleSummary(minimum=2.0, maximum=8.0, mean=4.0, count=3)
        assert normalized_audio_level(summary) == pytest.approx(0.5)


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


class TestNetworkLegacy:
    def test_primary_view_is_bitrate(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        network = deriver.network(legacy)
        assert network.primary_view == "bitrate"
        assert isinstance(network.audio_quality, DerivationGap)
        assert isinstance(network.video_quality, DerivationGap)

    def test_bitrate_flags_and_series(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        bitrate = deriver.bitrate(legacy)
        assert isinstance(bitrate, BitrateMetrics)
        assert bitrate.max_good is False
        assert bitrate.average_good is False
        assert bitrate.passed is True
        assert bitrate.samples_kbps[0] == pytest.approx(36.93356, abs=1e-4)
        assert len(bitrate.samples_kbps) == 13

    def test_bitrate_thresholds_configurable(self, legacy: TestResultsDocument) -> None:
        deriver = MetricDeriver(average_bitrate_good_bps=30_000, max_bitrate_good_bps=40_000)
        bitrate = deriver.bitrate(legacy)
        assert isinstance(bitrate, BitrateMetrics)
        assert bitrate.average_good is True
        assert bitrate.max_good is True

    def test_preflight_statistics(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        preflight = deriver.preflight(legacy)
        assert isinstance(preflight, PreflightMetrics)
        assert isinstance(preflight.rtt, ClassifiedValue)
        assert preflight.rtt.value == pytest.approx(66.5)
        assert preflight.rtt.level is QualityLevel.GOOD
        assert preflight.packet_loss.level is QualityLevel.GOOD  # type: ignore[union-attr]
        assert preflight.mos == pytest.approx(4.4036, abs=1e-4)
        assert preflight.passed is True
        assert preflight.phase_durations_ms["dtls"] == 88
        assert set(preflight.phase_durations_ms) == {
            "dtls",
            "ice",
            "peer_connection",
            "connect",
            "media",
        }

    def test_progress_events(self, deriver: MetricDeriver, legacy: TestResultsDocument) -> None:
        preflight = deriver.preflight(legacy)
        assert isinstance(preflight, PreflightMetrics)
        first = preflight.progress_events[0]
        assert first.label == "media acquired"
        assert first.share_percent == pytest.approx(3 / 11947 * 100)

    def test_preflight_error_fails_test(
        self, deriver: MetricDeriver, legacy_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(legacy_raw)
        raw["preflightTestReport"]["error"] = {"code": 53000}  # type: ignore[index]
        preflight = deriver.preflight(_document(raw))
        assert isinstance(preflight, PreflightMetrics)
        assert preflight.passed is False
        assert preflight.error == {"code": 53000}

    def test_missing_report_is_data_quality_gap(
        self, deriver: MetricDeriver, legacy_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(legacy_raw)
        raw["preflightTestReport"] = {"report": None, "error": "timeout"}
        gap = deriver.preflight(_document(raw))
        assert isinstance(gap, DerivationGap)
        assert gap.data_quality_issue is True


class TestNetworkNew:
    def test_primary_view_is_quality(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        network = deriver.network(new)
        assert network.primary_view == "quality"
        assert isinstance(network.bitrate, DerivationGap)
        assert isinstance(network.preflight, DerivationGap)

    def test_audio_quality_classification(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        audio = deriver.network(new).audio_quality
        assert isinstance(audio, MediaQualityMetrics)
        assert audio.jitter.level is QualityLevel.GOOD  # type: ignore[union-attr]
        assert audio.rtt_avg.value == pytest.approx(45.0)  # type: ignore[union-attr]
        assert audio.bitrate_avg.value == pytest.approx(24_000.0)  # type: ignore[union-attr]
        assert audio.bitrate_avg.level is QualityLevel.WARNING  # type: ignore[union-attr]
        assert audio.bitrate_max.level is QualityLevel.GOOD  # type: ignore[union-attr]
        assert audio.worst_level is QualityLevel.WARNING

    def test_video_bitrate_uses_video_table(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        video = deriver.network(new).video_quality
        assert isinstance(video, MediaQualityMetrics)
        assert video.bitrate_avg.value == pytest.approx(1_200_000.0)  # type: ignore[union-attr]
        assert video.bitrate_avg.level is QualityLevel.GOOD  # type: ignore[union-attr]

    def test_unparseable_value_is_gap(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["qualityResults"]["audio"]["RTT"]["avg"] = "N/A"  # type: ignore[index]
        audio = deriver.network(_document(raw)).audio_quality
        assert isinstance(audio, MediaQualityMetrics)
        assert isinstance(audio.rtt_avg, DerivationGap)
        assert isinstance(audio.rtt_max, ClassifiedValue)

    def test_missing_media_is_gap(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        del raw["qualityResults"]["video"]  # type: ignore[attr-defined]
        network = deriver.network(_document(raw))
        assert isinstance(network.video_quality, DerivationGap)
        assert isinstance(network.audio_quality, MediaQualityMetrics)

    def test_quality_wins_over_bitrate_in_hybrid(
        self, deriver: MetricDeriver, legacy_raw: dict[str, object], new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(legacy_raw)
        raw["qualityResults"] = new_raw["qualityResults"]
        network = deriver.network(_document(raw))
        assert network.primary_view == "quality"
        assert isinstance(network.bitrate, BitrateMetrics)


# ---------------------------------------------------------------------------
# Video
# ---------------------------------------------------------------------------


class TestVideo:
    def test_legacy_video(self, deriver: MetricDeriver, legacy: TestResultsDocument) -> None:
        video = deriver.derive(legacy, Section.VIDEO)
        assert isinstance(video, VideoMetrics)
        assert video.resolution_label == "640 × 480"
        assert video.tier is ResolutionTier.SD
        assert isinstance(video.bitrate_meter_percent, DerivationGap)
        assert isinstance(video.stability_meter_percent, DerivationGap)

    def test_new_video_meters(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        video = deriver.video(new)
        assert video.tier is ResolutionTier.HD
        assert video.bitrate_meter_percent == pytest.approx(24.0)
        assert video.stability_meter_percent == pytest.approx(66.0)

    def test_meters_are_clamped(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["qualityResults"]["video"].update(  # type: ignore[index]
            {"jitter": 80, "packetLoss": 10, "bitrate": {"avg": "9Mbps", "max": "9Mbps"}}
        )
        video = deriver.video(_document(raw))
        assert video.bitrate_meter_percent == 100.0
        assert video.stability_meter_percent == 0.0

    def test_missing_resolution_is_gap(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        del raw["videoTestResults"]["resolution"]  # type: ignore[attr-defined]
        video = deriver.video(_document(raw))
        assert isinstance(video.tier, DerivationGap)
        assert str(video.resolution_label) == "N/A"


# ---------------------------------------------------------------------------
# Device
# ---------------------------------------------------------------------------


class TestDevice:
    def test_legacy_device(self, deriver: MetricDeriver, legacy: TestResultsDocument) -> None:
        device = deriver.derive(legacy, Section.DEVICE)
        assert isinstance(device, DeviceMetrics)
        assert device.browser == "Edge 133.0.0.0"
        assert device.engine == "Blink 133.0.0.0"
        assert device.os == "Mac OS 10.15.7"
        assert device.device == "Apple Macintosh"
        assert device.user_agent.startswith("Mozilla/5.0")

    def test_blank_vendor_falls_back_to_unknown(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        assert deriver.device(new).device == "Unknown"


# ---------------------------------------------------------------------------
# ICE
# ---------------------------------------------------------------------------


class TestIce:
    def test_new_document_has_no_ice_details(
        self, deriver: MetricDeriver, new: TestResultsDocument
    ) -> None:
        gap = deriver.derive(new, Section.ICE)
        assert isinstance(gap, DerivationGap)
        assert "not available" in gap.reason

    def test_selected_pair_endpoints(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        ice = deriver.ice(legacy)
        assert isinstance(ice, IceMetrics)
        assert ice.selected_local == "122.172.81.235:9145"
        assert ice.selected_remote == "52.66.194.1:25929"

    def test_local_remote_split_and_selected_flag(
        self, deriver: MetricDeriver, legacy_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(legacy_raw)
        raw["bitrateTestResults"]["iceCandidateStats"] = [  # type: ignore[index]
            _candidate("IpKyBHTrg", "local-candidate", False, "122.172.81.235", 9145),
            _candidate("other-local", "local-candidate", False, "192.168.1.2", 62313),
            _candidate("IEors1k7K", "remote-candidate", True, "52.66.194.1", 25929),
        ]
        ice = deriver.ice(_document(raw))
        assert isinstance(ice, IceMetrics)
        assert [c.id for c in ice.local_candidates] == ["IpKyBHTrg", "other-local"]
        assert [c.id for c in ice.remote_candidates] == ["IEors1k7K"]
        assert ice.local_candidates[0].selected is True
        assert ice.local_candidates[1].selected is False
        assert ice.remote_candidates[0].protocol == "UDP"
        assert ice.remote_candidates[0].endpoint == "52.66.194.1:25929"

    def test_no_selected_pair(
        self, deriver: MetricDeriver, legacy_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(legacy_raw)
        del raw["bitrateTestResults"]["selectedIceCandidatePairStats"]  # type: ignore[attr-defined]
        ice = deriver.ice(_document(raw))
        assert isinstance(ice, IceMetrics)
        assert isinstance(ice.selected_local, DerivationGap)


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


class TestConnectivity:
    def test_legacy_connectivity(
        self, deriver: MetricDeriver, legacy: TestResultsDocument
    ) -> None:
        connectivity = deriver.connectivity(legacy)
        assert len(connectivity.services) == 8
        assert connectivity.counts[StatusCategory.HEALTHY] == 8
        assert connectivity.all_healthy is True
        assert connectivity.is_new_format is False
        assert connectivity.shows_preflight_stats is True

    def test_new_connectivity(self, deriver: MetricDeriver, new: TestResultsDocument) -> None:
        connectivity = deriver.connectivity(new)
        assert connectivity.is_new_format is True
        assert connectivity.shows_preflight_stats is False
        assert [s.service for s in connectivity.services][0] == "signalConnection"

    def test_unknown_status_is_unhealthy(
        self, deriver: MetricDeriver, new_raw: dict[str, object]
    ) -> None:
        raw = copy.deepcopy(new_raw)
        raw["connectivityResults"] = {
            "signalConnection": "weird",
            "webrtcConnection": "degraded",
            "reconnection": 3,
        }
        connectivity = deriver.connectivity(_document(raw))
        by_service = {s.service: s for s in connectivity.services}
        assert by_service["signalConnection"].category is StatusCategory.UNHEALTHY
        assert by_service["signalConnection"].recognised is False
        assert by_service["webrtcConnection"].category is StatusCategory.DEGRADED
        assert by_service["reconnection"].category is StatusCategory.UNHEALTHY
        assert connectivity.counts[StatusCategory.UNHEALTHY] == 2
        assert connectivity.all_healthy is False


class TestHelpers:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("mediaAcquired", "media acquired"),
            ("connected", "connected"),
            ("iceConnectionStateChanged", "ice connection state changed"),
        ],
    )
    def test_humanize_event_name(self, name: str, expected: str) -> None:
        assert humanize_event_name(name) == expected
