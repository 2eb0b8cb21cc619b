"""Configuration management for fieldview.

Two sections:
- render: default output formatting (identity hash, separators)
- policy: visibility tiers shown by ``of(target)`` when no Include is given

Config resolution order (highest priority first):
1. Programmatic (FieldViewConfig constructed in code, installed with configure())
2. Environment variables (FIELDVIEW_SEPARATOR, FIELDVIEW_EQUALITY, etc.)
3. Config file (~/.config/fieldview/config.json)
4. Hardcoded defaults

Invalid values from the file or environment are logged and ignored.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .core.models import RenderSettings, Visibility

logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "fieldview"
CONFIG_FILE = CONFIG_DIR / "config.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class RenderDefaults:
    """Default formatting applied to every new describer."""

    identity_hash: bool = False
    hash_symbol: str = "@"
    separator: str = ","
    equality: str = "="

    def to_settings(self) -> RenderSettings:
        return RenderSettings(**asdict(self))


@dataclass
class PolicyDefaults:
    """Visibility tiers enabled when ``of(target)`` gets no Include."""

    visibilities: list[str] = field(default_factory=lambda: ["public"])


@dataclass
class FieldViewConfig:
    """Top-level fieldview configuration.

    Examples:
        # Package use, no files needed
        configure(FieldViewConfig(render=RenderDefaults(separator=", ")))

        # Load from ~/.config/fieldview/config.json + env vars
        config = FieldViewConfig.load()
    """

    render: RenderDefaults = field(default_factory=RenderDefaults)
    policy: PolicyDefaults = field(default_factory=PolicyDefaults)

    @classmethod
    def load(cls) -> "FieldViewConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        if val := os.environ.get("FIELDVIEW_IDENTITY_HASH"):
            parsed = _parse_bool(val)
            if parsed is None:
                logger.warning("Invalid FIELDVIEW_IDENTITY_HASH=%r, ignoring", val)
            else:
                config.render.identity_hash = parsed
        if (val := os.environ.get("FIELDVIEW_HASH_SYMBOL")) is not None:
            config.render.hash_symbol = val
        if (val := os.environ.get("FIELDVIEW_SEPARATOR")) is not None:
            config.render.separator = val
        if (val := os.environ.get("FIELDVIEW_EQUALITY")) is not None:
            config.render.equality = val
        if val := os.environ.get("FIELDVIEW_DEFAULT_VISIBILITIES"):
            tiers = _parse_visibilities(val.split(","))
            if tiers is None:
                logger.warning(
                    "Invalid FIELDVIEW_DEFAULT_VISIBILITIES=%r, ignoring", val
                )
            else:
                config.policy.visibilities = tiers

        return config

    def save(self) -> None:
        """Save config to ~/.config/fieldview/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "render": asdict(self.render),
            "policy": asdict(self.policy),
        }


# =============================================================================
# Value parsing
# =============================================================================


def _parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _parse_visibilities(values: Any) -> list[str] | None:
    """Normalize a list of tier names. Returns None if any name is unknown."""
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        return None
    tiers: list[str] = []
    for raw in values:
        name = str(raw).strip().lower()
        if not name:
            continue
        try:
            tier = Visibility(name).value
        except ValueError:
            return None
        if tier not in tiers:
            tiers.append(tier)
    return tiers


def _apply_dict(config: FieldViewConfig, data: dict) -> None:
    """Apply a dict of values onto a FieldViewConfig."""
    if "render" in data and isinstance(data["render"], dict):
        for k, v in data["render"].items():
            if not hasattr(config.render, k):
                logger.warning("Unknown config key render.%s, ignoring", k)
                continue
            if k == "identity_hash":
                parsed = _parse_bool(v)
                if parsed is None:
                    logger.warning("Invalid render.identity_hash=%r, ignoring", v)
                    continue
                v = parsed
            elif not isinstance(v, str):
                logger.warning("Invalid render.%s=%r, ignoring", k, v)
                continue
            setattr(config.render, k, v)
    if "policy" in data and isinstance(data["policy"], dict):
        if "visibilities" in data["policy"]:
            raw = data["policy"]["visibilities"]
            tiers = _parse_visibilities(raw)
            if tiers is None:
                logger.warning("Invalid policy.visibilities=%r, ignoring", raw)
            else:
                config.policy.visibilities = tiers


# =============================================================================
# Global config singleton
# =============================================================================

_config: FieldViewConfig | None = None


def get_config() -> FieldViewConfig:
    """Get the global FieldViewConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = FieldViewConfig.load()
    return _config


def configure(config: FieldViewConfig) -> None:
    """Set the global FieldViewConfig programmatically."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
