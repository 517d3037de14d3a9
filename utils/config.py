from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning an empty dict if it's blank."""
    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_site_selectors(path: Path) -> dict[str, dict[str, Any]]:
    """
    Load the per-site selector table.

    Raises:
        ValueError: If `sites` is not a mapping, or a site has no domains
            or an entry without `css`.
    """
    sites = load_yaml(path).get("sites") or {}
    if not isinstance(sites, dict):
        raise ValueError(f"{path}: 'sites' must be a mapping of site name to selectors")

    for site, config in sites.items():
        if not config or not config.get("domains"):
            raise ValueError(f"{path}: site '{site}' lists no domains")
        for key, entries in config.items():
            if key == "domains":
                continue
            for entry in entries or []:
                if isinstance(entry, dict) and "css" not in entry:
                    raise ValueError(f"{path}: site '{site}' has a {key} entry without 'css'")
    return dict(sites)
