"""Unit tests for SectionReporter."""
from __future__ import annotations

import json

import pytest

from preflight_viewer.importer import DocumentImporter
from preflight_viewer.metrics.deriver import MetricDeriver, Section
from preflight_viewer.metrics.statistics import DerivationGap
from preflight_viewer.report import SectionReporter, to_jsonable


@pytest.fixture()
def reporter() -> SectionReporter:
    return SectionReporter()


@pytest.fixture()
def legacy_results() -> dict[Section, object]:
    imported = DocumentImporter().load_sample("legacy")
    return MetricDeriver().derive_all(imported.document)


class TestRows:
    def test_nested_labels(self, reporter: SectionReporter, legacy_results: dict) -> None:
        rows = dict(reporter.rows(legacy_results[Section.AUDIO]))
        assert rows["device_label"] == "default"
        assert rows["passed"] == "yes"
        assert rows["levels.minimum"] == "3.31"
        assert rows["level_range"] == "in_range"

    def test_gap_rendered_as_na(self, reporter: SectionReporter, legacy_results: dict) -> None:
        rows = dict(reporter.rows(legacy_results[Section.VIDEO]))
        assert rows["bitrate_meter_percent"].startswith("N/A (")
        assert rows["resolution_label"] == "640 × 480"

    def test_sequences_of_records_are_indexed(
        self, reporter: SectionReporter, legacy_results: dict
    ) -> None:
        rows = dict(reporter.rows(legacy_results[Section.CONNECTIVITY]))
        assert rows["services[0].service"] == "groupRooms"
        assert rows["counts.healthy"] == "8"

    def test_precision(self, legacy_results: dict) -> None:
        rows = dict(SectionReporter(precision=0).rows(legacy_results[Section.AUDIO]))
        assert rows["levels.maximum"] == "11"

    def test_negative_precision_rejected(self) -> None:
        with pytest.raises(ValueError):
            SectionReporter(precision=-1)


class TestJson:
    def test_gap_is_explicit(self) -> None:
        payload = to_jsonable(DerivationGap("mos", "MOS not reported"))
        assert payload == {
            "available": False,
            "metric": "mos",
            "reason": "MOS not reported",
            "data_quality_issue": False,
        }

    def test_format_json(self, reporter: SectionReporter, legacy_results: dict) -> None:
        payload = json.loads(reporter.format_json(legacy_results))
        assert set(payload) == {section.value for section in Section}
        assert payload["video"]["tier"] == "SD"
        assert payload["audio"]["timing"]["started_at"].startswith("2025-02-26T")
        assert payload["connectivity"]["counts"]["healthy"] == 8
