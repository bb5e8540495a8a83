"""
Single source of version: the repo root VERSION file, falling back to the
installed distribution's metadata.
"""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "match-ratings"
UNKNOWN_VERSION = "0.0.0"

# Semantic version pattern (major.minor.patch, optional -pre)
SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$")


def _version_file_path() -> Path:
    # backend/version.py -> repo root
    return Path(__file__).resolve().parent.parent / "VERSION"


def _installed_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


def get_version() -> str:
    """Version from VERSION, else installed metadata, else '0.0.0'."""
    path = _version_file_path()
    if not path.is_file():
        return _installed_version()
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return _installed_version()
    return raw.splitlines()[0].strip() if raw else _installed_version()


def is_semver(s: str) -> bool:
    """Return True if s matches semantic version pattern (e.g. 1.0.0 or 1.0.0-alpha)."""
    return bool(s and SEMVER_PATTERN.match(s.strip()))
