"""
Unit tests for version: get_version, is_semver.
"""

from __future__ import annotations

from version import get_version, is_semver


def test_is_semver_valid() -> None:
    assert is_semver("1.0.0") is True
    assert is_semver("0.0.1") is True
    assert is_semver("1.0.0-alpha") is True
    assert is_semver("2.1.3-beta.1") is True


def test_is_semver_invalid() -> None:
    assert is_semver("") is False
    assert is_semver("1.0") is False
    assert is_semver("v1.0.0") is False
    assert is_semver("1.0.0.1") is False


def test_get_version_is_semver() -> None:
    """VERSION at the repo root (or installed metadata) yields a semantic version."""
    v = get_version()
    assert isinstance(v, str)
    assert is_semver(v)
