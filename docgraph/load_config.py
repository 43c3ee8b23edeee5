"""Logic for loading and merging configuration files."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from docgraph.deep_merge import deep_merge

DEFAULT_CONFIG: dict[str, Any] = {
    "output_dir": "./docs",
    "package_name": None,
    "repository": None,
    "package_root": ".",
    "base_href": None,
    "markdown": False,
    "exclude": [],
    "summary": False,
    "no_html": False,
    "readme": "README.md",
    "head_html": None,
    "spa": False,
    "sitemap": None,
    "debug": False,
    "extra": [],
}

# Keys that only affect where files land, not what they contain.
_LOCATION_KEYS = ("output_dir", "debug")


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = DEFAULT_CONFIG.copy()
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config


def compute_config_hash(config: dict[str, Any]) -> str:
    """Compute a stable hash of the content-affecting configuration.

    Uses canonical JSON serialization (sorted keys).
    """
    relevant = {k: v for k, v in config.items() if k not in _LOCATION_KEYS}
    config_json = json.dumps(relevant, sort_keys=True, ensure_ascii=True, default=str)
    return hashlib.sha256(config_json.encode("utf-8")).hexdigest()
