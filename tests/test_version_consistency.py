"""Tests for version consistency between pyproject.toml and application code."""

import tomllib
from pathlib import Path

# Path to project root (one level up from tests/)
PROJECT_ROOT = Path(__file__).parent.parent


def _read_pyproject_version() -> str:
    with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]["version"]


class TestVersionConsistency:
    """Verify that all version references use a single source of truth."""

    def test_get_version_returns_string(self):
        from src.version import get_version

        version = get_version()
        assert isinstance(version, str)
        assert len(version) > 0

    def test_get_version_matches_pyproject(self):
        from src.version import get_version

        assert get_version() == _read_pyproject_version()

    def test_dunder_version_matches_pyproject(self):
        from src.version import __version__

        assert __version__ == _read_pyproject_version()
