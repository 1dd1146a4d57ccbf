"""
Configuration — loads settings from .hashline.yaml, environment variables,
and built-in defaults (in that priority order: env > YAML > defaults).
"""

import os

import yaml


_DEFAULTS = {
    "diff_context_threshold": 6,
    "diff_context_lines": 3,
    "include_listing": True,
    "color_diff": False,
    "metrics_enabled": False,
    "metrics_dir": ".hashline",
    "log_dir": ".hashline/logs",
    "metadata_ttl_seconds": 300.0,
}

# Config file search locations
_CONFIG_FILENAMES = [".hashline.yaml", ".hashline.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Editor configuration.

    Settings are resolved in priority order:
    1. Environment variables (``HASHLINE_*``)
    2. .hashline.yaml config file
    3. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return _DEFAULTS[yaml_key]

        def _get_bool(env_key: str, yaml_key: str) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() in ("1", "true", "yes")
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return _DEFAULTS[yaml_key]

        # Unified diff shape
        self.DIFF_CONTEXT_THRESHOLD = _get("HASHLINE_DIFF_CONTEXT_THRESHOLD",
                                           "diff_context_threshold", cast=int)
        self.DIFF_CONTEXT_LINES = _get("HASHLINE_DIFF_CONTEXT_LINES",
                                       "diff_context_lines", cast=int)

        # Success summary
        self.INCLUDE_LISTING = _get_bool("HASHLINE_INCLUDE_LISTING", "include_listing")
        self.COLOR_DIFF = _get_bool("HASHLINE_COLOR_DIFF", "color_diff")

        # Metrics log
        self.METRICS_ENABLED = _get_bool("HASHLINE_METRICS_ENABLED", "metrics_enabled")
        self.METRICS_DIR = _get("HASHLINE_METRICS_DIR", "metrics_dir")

        self.LOG_DIR = _get("HASHLINE_LOG_DIR", "log_dir")

        # Per-call metadata retention
        self.METADATA_TTL_SECONDS = _get("HASHLINE_METADATA_TTL_SECONDS",
                                         "metadata_ttl_seconds", cast=float)

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
