"""Viewer configuration: validation policy and metric thresholds.

Configuration is persisted as YAML for human editing.  Every field has a
default, so an empty file (or no file at all) yields the built-in behaviour.

Example file::

    policy: permissive
    audio_level:
      low: 0.1
      high: 0.9
    bitrate:
      average_good_bps: 500000
      max_good_bps: 1000000
    quality:
      jitter: {warning: 30, critical: 50, unit: ms}
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from preflight_viewer.metrics.deriver import MetricDeriver
from preflight_viewer.metrics.thresholds import (
    AUDIO_LEVEL_HIGH,
    AUDIO_LEVEL_LOW,
    AVERAGE_BITRATE_GOOD_BPS,
    MAX_BITRATE_GOOD_BPS,
    QualityThresholds,
)
from preflight_viewer.validation.validator import SchemaValidator, ValidationPolicy

logger = logging.getLogger(__name__)


class AudioLevelBounds(BaseModel):
    """Exclusive bounds of the acceptable mean audio level (0-1 scale)."""

    low: float = Field(default=AUDIO_LEVEL_LOW, ge=0.0)
    high: float = Field(default=AUDIO_LEVEL_HIGH, le=1.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> AudioLevelBounds:
        if self.low >= self.high:
            raise ValueError(f"low ({self.low}) must be below high ({self.high})")
        return self


class BitrateThresholds(BaseModel):
    """Inclusive lower bounds for a good legacy bitrate test."""

    average_good_bps: float = Field(default=AVERAGE_BITRATE_GOOD_BPS, gt=0)
    max_good_bps: float = Field(default=MAX_BITRATE_GOOD_BPS, gt=0)

    model_config = {"frozen": True}


class ViewerConfig(BaseModel):
    """Top-level viewer configuration.

    Attributes
    ----------
    policy:
        Schema-variant detection policy used by the validator.
    audio_level:
        Bounds for the audio range classification.
    bitrate:
        Legacy bitrate pass/fail thresholds.
    quality:
        Threshold table for jitter, packet loss, RTT and bitrate.
    """

    policy: ValidationPolicy = ValidationPolicy.STRICT
    audio_level: AudioLevelBounds = Field(default_factory=AudioLevelBounds)
    bitrate: BitrateThresholds = Field(default_factory=BitrateThresholds)
    quality: QualityThresholds = Field(default_factory=QualityThresholds)

    model_config = {"frozen": True}

    def make_validator(self) -> SchemaValidator:
        """Return a :class:`SchemaValidator` using this configuration's policy."""
        return SchemaValidator(policy=self.policy)

    def make_deriver(self) -> MetricDeriver:
        """Return a :class:`MetricDeriver` using this configuration's thresholds."""
        return MetricDeriver(
            thresholds=self.quality,
            audio_level_low=self.audio_level.low,
            audio_level_high=self.audio_level.high,
            average_bitrate_good_bps=self.bitrate.average_good_bps,
            max_bitrate_good_bps=self.bitrate.max_good_bps,
        )


def load_config(path: str | Path) -> ViewerConfig:
    """Load a :class:`ViewerConfig` from a YAML file.

    Parameters
    ----------
    path:
        Path to the YAML file.

    Returns
    -------
    ViewerConfig

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file's top level is not a mapping.
    pydantic.ValidationError
        If a value is out of range.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}."
        )
    config = ViewerConfig.model_validate(data)
    logger.debug("Loaded config from %s (policy=%s)", path, config.policy.value)
    return config


def save_config(config: ViewerConfig, path: str | Path) -> Path:
    """Write *config* to *path* as YAML and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            config.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True
        )
    logger.info("Saved config to %s", path)
    return path


__all__ = [
    "AudioLevelBounds",
    "BitrateThresholds",
    "ViewerConfig",
    "load_config",
    "save_config",
]
