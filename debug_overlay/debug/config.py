"""
Overlay Configuration.

This module provides configuration options for the overlay, controlling
which runtime facilities are intercepted, how dumps are serialized and
where the error log is written.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DumpStyle = Literal["verbose", "readable", "reconstructable"]


class OverlayConfig(BaseModel):
    """
    Configuration for the debug overlay.

    Configured to accept extra fields so host settings can be passed
    through unchanged. Use default_config() for sensible defaults.

    Attributes:
        enabled: Master switch for capture and rendering
        intercept_errors: Register the error interceptor on startup
        capture_warnings: Hook the warnings machinery
        capture_uncaught: Hook uncaught exceptions
        capture_logging: Forward log records to the interceptor
        report_all: Report every warning, overriding the runtime warning filters
        display_warnings: Also print captured warnings the usual way (stderr)
        stack_skip: Innermost frames dropped from captured backtraces
        default_dump_style: Style used by capture_dump when none is given
        log_file: Error log destination, None to leave logging untouched
        force_indicator: Force the indicator bar on for logged-in users
    """
    model_config = ConfigDict(extra='allow')

    enabled: bool = True

    # Interception
    intercept_errors: bool = True
    capture_warnings: bool = True
    capture_uncaught: bool = True
    capture_logging: bool = False
    report_all: bool = True
    display_warnings: bool = False
    stack_skip: int = Field(default=2, ge=0)

    # Dumps
    default_dump_style: DumpStyle = "verbose"

    # Logging
    log_file: Optional[str] = None

    # Display
    force_indicator: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OverlayConfig":
        """
        Create a config from a dictionary (e.g., from JSON).

        ```json
        {
          "preset": "verbose",
          "log_file": "/var/log/app/debug.log"
        }
        ```

        Args:
            data: Dictionary with configuration values

        Returns:
            OverlayConfig instance

        Raises:
            ValueError: If the preset name is unknown
        """
        if not data:
            return cls()

        data = dict(data)
        preset_name = data.pop("preset", None)
        if preset_name:
            base = get_preset(preset_name).model_dump()
        else:
            base = {}
        base.update(data)
        return cls.model_validate(base)


def default_config() -> OverlayConfig:
    """
    Get the default configuration.

    Returns:
        OverlayConfig with sensible defaults
    """
    return OverlayConfig()


def minimal_config() -> OverlayConfig:
    """
    Get a minimal configuration.

    Only warnings are hooked; uncaught exceptions and logging are left alone.
    """
    return OverlayConfig(
        capture_uncaught=False,
        capture_logging=False,
    )


def verbose_config() -> OverlayConfig:
    """
    Get a verbose configuration.

    Hooks every facility, log records included, and echoes warnings to stderr.
    """
    return OverlayConfig(
        capture_warnings=True,
        capture_uncaught=True,
        capture_logging=True,
        display_warnings=True,
    )


def silent_config() -> OverlayConfig:
    """
    Get a configuration with interception switched off.

    Only explicit dumps are captured.
    """
    return OverlayConfig(
        intercept_errors=False,
        capture_warnings=False,
        capture_uncaught=False,
    )


PRESETS = {
    "default": default_config,
    "minimal": minimal_config,
    "verbose": verbose_config,
    "silent": silent_config,
}


def get_preset(name: str) -> OverlayConfig:
    """
    Get a preset configuration by name.

    Available presets:
    - default: Warnings and uncaught exceptions
    - minimal: Warnings only
    - verbose: Everything, including log records
    - silent: Dumps only

    Raises:
        ValueError: If preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(
            f"Unknown preset '{name}'. Available: {list(PRESETS.keys())}"
        )
    return PRESETS[name]()
