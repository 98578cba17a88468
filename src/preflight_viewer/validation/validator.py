"""SchemaValidator — decide whether a decoded JSON value is a test-results document.

The validator never raises on malformed input and never mutates it.  It
returns a :class:`ValidationResult` describing the decision, the detected
schema variant and, on rejection, a human-readable reason.

Variant policies
----------------
STRICT (default)
    The required sections must be present and at least one branch must hold:

    * legacy — ``bitrateTestResults`` and ``preflightTestReport`` are present
      and ``connectivityResults`` contains ``groupRooms`` or ``signalingRegion``;
    * new — ``qualityResults`` is present and ``connectivityResults`` contains
      ``signalConnection`` or ``webrtcConnection``.

    When both branches hold the document is ``hybrid``.
PERMISSIVE
    The required sections must be present, ``connectivityResults`` must be an
    object, and either ``qualityResults`` or one of the legacy sections must
    be present.  Connectivity key names are not inspected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from preflight_viewer.schema.models import ConnectivityStatus

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

REQUIRED_SECTIONS: tuple[str, ...] = (
    "audioTestResults.inputTest",
    "browserInformation",
    "videoTestResults",
)
LEGACY_CONNECTIVITY_KEYS: tuple[str, ...] = ("groupRooms", "signalingRegion")
NEW_CONNECTIVITY_KEYS: tuple[str, ...] = ("signalConnection", "webrtcConnection")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ValidationPolicy(str, Enum):
    """How optional sections are used to recognise a schema variant."""

    STRICT = "strict"
    PERMISSIVE = "permissive"


class SchemaVariant(str, Enum):
    """Which historical document shape an accepted document follows."""

    LEGACY = "legacy"
    NEW = "new"
    HYBRID = "hybrid"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DetectedSections:
    """Presence flags for the optional sections of a document.

    Attributes
    ----------
    bitrate_test_results:
        ``bitrateTestResults`` is present and truthy.
    preflight_test_report:
        ``preflightTestReport`` is present and truthy.
    quality_results:
        ``qualityResults`` is present and truthy.
    connectivity_results:
        ``connectivityResults`` is a JSON object.
    legacy_keys:
        Legacy-only connectivity keys found, in declaration order.
    new_keys:
        New-only connectivity keys found, in declaration order.
    """

    bitrate_test_results: bool
    preflight_test_report: bool
    quality_results: bool
    connectivity_results: bool
    legacy_keys: tuple[str, ...]
    new_keys: tuple[str, ...]

    @property
    def has_legacy_sections(self) -> bool:
        return self.bitrate_test_results and self.preflight_test_report


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`SchemaValidator.validate`.

    Attributes
    ----------
    accepted:
        True when the value is an acceptable test-results document.
    variant:
        Detected :class:`SchemaVariant`; ``None`` when rejected.
    reason:
        Why the value was rejected; ``None`` when accepted.
    sections:
        Optional-section presence flags; ``None`` when the value is not a
        JSON object.
    warnings:
        Non-fatal data-quality findings (unknown status values and the like).
    """

    accepted: bool
    variant: SchemaVariant | None = None
    reason: str | None = None
    sections: DetectedSections | None = None
    warnings: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.accepted


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class SchemaValidator:
    """Classify decoded JSON values as test-results documents.

    Parameters
    ----------
    policy:
        The :class:`ValidationPolicy` used for variant detection.

    Example
    -------
    ::

        validator = SchemaValidator()
        result = validator.validate(json.loads(text))
        if result:
            print(result.variant.value)
        else:
            print(result.reason)
    """

    def __init__(self, policy: ValidationPolicy = ValidationPolicy.STRICT) -> None:
        self._policy = ValidationPolicy(policy)

    @property
    def policy(self) -> ValidationPolicy:
        return self._policy

    def validate(self, raw: object) -> ValidationResult:
        """Validate *raw* and return a :class:`ValidationResult`.

        Parameters
        ----------
        raw:
            Any decoded JSON value.

        Returns
        -------
        ValidationResult
            Accept/reject decision; never raises for wrong shapes.
        """
        if not isinstance(raw, dict):
            return self._reject(
                f"document must be a JSON object, got {_json_type_name(raw)}"
            )

        missing = [path for path in REQUIRED_SECTIONS if not _lookup(raw, path)]
        sections = self.detect_sections(raw)
        if missing:
            return self._reject(
                f"missing required section(s): {', '.join(missing)}", sections
            )

        if self._policy is ValidationPolicy.STRICT:
            variant, reason = self._detect_strict(sections)
        else:
            variant, reason = self._detect_permissive(sections)

        if variant is None:
            return self._reject(reason, sections)

        warnings = tuple(self._collect_warnings(raw))
        for warning in warnings:
            logger.warning("Data-quality warning: %s", warning)
        logger.debug(
            "Accepted document as %s under %s policy", variant.value, self._policy.value
        )
        return ValidationResult(
            accepted=True,
            variant=variant,
            sections=sections,
            warnings=warnings,
        )

    def is_valid(self, raw: object) -> bool:
        """Return True if *raw* would be accepted."""
        return self.validate(raw).accepted

    @staticmethod
    def detect_sections(raw: dict[str, object]) -> DetectedSections:
        """Report which optional sections and connectivity keys *raw* carries."""
        connectivity = raw.get("connectivityResults")
        keys = connectivity if isinstance(connectivity, dict) else {}
        return DetectedSections(
            bitrate_test_results=bool(raw.get("bitrateTestResults")),
            preflight_test_report=bool(raw.get("preflightTestReport")),
            quality_results=bool(raw.get("qualityResults")),
            connectivity_results=isinstance(connectivity, dict),
            legacy_keys=tuple(k for k in LEGACY_CONNECTIVITY_KEYS if k in keys),
            new_keys=tuple(k for k in NEW_CONNECTIVITY_KEYS if k in keys),
        )

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    @staticmethod
    def _detect_strict(
        sections: DetectedSections,
    ) -> tuple[SchemaVariant | None, str]:
        legacy_problems: list[str] = []
        if not sections.bitrate_test_results:
            legacy_problems.append("bitrateTestResults")
        if not sections.preflight_test_report:
            legacy_problems.append("preflightTestReport")
        if not sections.legacy_keys:
            legacy_problems.append(
                "connectivityResults." + "/".join(LEGACY_CONNECTIVITY_KEYS)
            )

        new_problems: list[str] = []
        if not sections.quality_results:
            new_problems.append("qualityResults")
        if not sections.new_keys:
            new_problems.append(
                "connectivityResults." + "/".join(NEW_CONNECTIVITY_KEYS)
            )

        is_legacy = not legacy_problems
        is_new = not new_problems
        if is_legacy and is_new:
            return SchemaVariant.HYBRID, ""
        if is_legacy:
            return SchemaVariant.LEGACY, ""
        if is_new:
            return SchemaVariant.NEW, ""
        return None, (
            "no schema variant matched (legacy is missing "
            f"{', '.join(legacy_problems)}; new is missing {', '.join(new_problems)})"
        )

    @staticmethod
    def _detect_permissive(
        sections: DetectedSections,
    ) -> tuple[SchemaVariant | None, str]:
        if not sections.connectivity_results:
            return None, "missing connectivityResults"
        has_legacy = sections.bitrate_test_results or sections.preflight_test_report
        has_new = sections.quality_results
        if has_legacy and has_new:
            return SchemaVariant.HYBRID, ""
        if has_new:
            return SchemaVariant.NEW, ""
        if has_legacy:
            return SchemaVariant.LEGACY, ""
        return None, (
            "no result sections present (expected qualityResults, "
            "bitrateTestResults or preflightTestReport)"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _collect_warnings(raw: dict[str, object]) -> list[str]:
        warnings: list[str] = []
        connectivity = raw.get("connectivityResults")
        if isinstance(connectivity, dict):
            for service, status in connectivity.items():
                if ConnectivityStatus.from_value(status) is None:
                    shown = (
                        _json_type_name(status)
                        if isinstance(status, (dict, list))
                        else repr(status)
                    )
                    warnings.append(
                        f"connectivityResults.{service} has unrecognised status {shown}"
                    )

        input_test = _lookup(raw, "audioTestResults.inputTest")
        if isinstance(input_test, dict):
            values = input_test.get("values")
            errors = input_test.get("errors")
            if not values and not errors:
                warnings.append(
                    "audioTestResults.inputTest.values is empty but no errors were recorded"
                )
        return warnings

    def _reject(
        self, reason: str, sections: DetectedSections | None = None
    ) -> ValidationResult:
        logger.info("Rejected document (%s policy): %s", self._policy.value, reason)
        return ValidationResult(accepted=False, reason=reason, sections=sections)

    def __repr__(self) -> str:
        return f"SchemaValidator(policy={self._policy.value!r})"


def _lookup(raw: dict[str, object], dotted_path: str) -> object:
    """Follow *dotted_path* through nested objects; ``None`` when any hop is absent."""
    current: object = raw
    for part in dotted_path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _json_type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


__all__ = [
    "DetectedSections",
    "LEGACY_CONNECTIVITY_KEYS",
    "NEW_CONNECTIVITY_KEYS",
    "REQUIRED_SECTIONS",
    "SchemaValidator",
    "SchemaVariant",
    "ValidationPolicy",
    "ValidationResult",
]
