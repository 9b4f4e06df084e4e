"""
Streaming configuration models.

This module provides the options that control delta buffering and
raw event capture for a single stream.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ..config import constants


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class StreamingOptions:
    """
    Configuration for streaming behavior.

    Buffering trades latency for fewer, larger ``message_delta`` events.
    The threshold starts at ``delta_initial_threshold`` characters and grows
    by ``delta_threshold_step`` after each flush, up to ``delta_max_threshold``.
    Pending text is also flushed once ``delta_flush_interval_ms`` has elapsed
    since the last flush.
    """

    enable_delta_buffering: bool = True
    """Coalesce visible deltas before emitting them."""

    delta_initial_threshold: int = constants.DELTA_INITIAL_THRESHOLD
    """Characters buffered before the first flush."""

    delta_max_threshold: int = constants.DELTA_MAX_THRESHOLD
    """Upper bound for the growing flush threshold."""

    delta_threshold_step: int = constants.DELTA_THRESHOLD_STEP
    """Threshold growth after each flush."""

    delta_flush_interval_ms: int = constants.DELTA_FLUSH_INTERVAL_MS
    """Maximum time pending text waits before it is flushed."""

    capture_raw_events: bool = False
    """Pass raw vendor events to the request logger on completion."""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.delta_initial_threshold < 1:
            self.delta_initial_threshold = 1
        if self.delta_max_threshold < self.delta_initial_threshold:
            self.delta_max_threshold = self.delta_initial_threshold
        if self.delta_threshold_step < 0:
            self.delta_threshold_step = 0
        if self.delta_flush_interval_ms < 0:
            self.delta_flush_interval_ms = constants.DELTA_FLUSH_INTERVAL_MS

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "StreamingOptions":
        """Create StreamingOptions from a dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered_config = {k: v for k, v in config.items() if k in known_fields}
        return cls(**filtered_config)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StreamingOptions":
        """Create StreamingOptions from ``ENSEMBLE_*`` environment variables."""
        env = os.environ if environ is None else environ
        config: Dict[str, Any] = {}

        int_vars = {
            constants.ENV_DELTA_INITIAL_THRESHOLD: "delta_initial_threshold",
            constants.ENV_DELTA_MAX_THRESHOLD: "delta_max_threshold",
            constants.ENV_DELTA_THRESHOLD_STEP: "delta_threshold_step",
            constants.ENV_DELTA_FLUSH_INTERVAL_MS: "delta_flush_interval_ms",
        }
        for var, name in int_vars.items():
            value = env.get(var)
            if value is None:
                continue
            try:
                config[name] = int(value)
            except ValueError:
                raise ValueError(f"{var} must be an integer, got {value!r}")

        if constants.ENV_DELTA_BUFFERING in env:
            config["enable_delta_buffering"] = _env_bool(env[constants.ENV_DELTA_BUFFERING])
        if constants.ENV_CAPTURE_RAW_EVENTS in env:
            config["capture_raw_events"] = _env_bool(env[constants.ENV_CAPTURE_RAW_EVENTS])

        return cls(**config)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Preset configurations
DEFAULT_OPTIONS = StreamingOptions()

UNBUFFERED_OPTIONS = StreamingOptions(enable_delta_buffering=False)

DEBUG_OPTIONS = StreamingOptions(capture_raw_events=True)
