"""
YAML → dict config loader.

Loads rule overrides from metrics.yaml (bundled with the package) and
optionally merges user overrides from ~/.lift-tracker/metrics.yaml.

Usage:
    from lift_tracker.core.engine.config_loader import load_metrics_config
    cfg = load_metrics_config()
    min_strength = cfg.get("streak", {}).get("min_strength_sessions", 3)

If a YAML file cannot be parsed it is ignored with a warning and the
Python defaults from config.py apply (no crash).
"""

from __future__ import annotations

import importlib.resources
import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} on any read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(f"Ignoring config file {path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled metrics.yaml, or None if not found."""
    ref = importlib.resources.files("lift_tracker").joinpath("metrics.yaml")
    if ref.is_file():
        with importlib.resources.as_file(ref) as p:
            return p
    candidate = Path(__file__).parent.parent.parent / "metrics.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-tracker/metrics.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-tracker" / "metrics.yaml"
    return p if p.exists() else None


def load_metrics_config() -> dict[str, Any]:
    """
    Load and merge rule configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_tracker/metrics.yaml
    2. User override at ~/.lift-tracker/metrics.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            logger.debug(f"Applying user overrides from {user}")
            config = _deep_merge(config, user_cfg)

    return config
