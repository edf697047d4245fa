"""Single source of truth for the package version.

Reads the version from pyproject.toml at import time using tomllib (stdlib, Python 3.11+).
"""

import tomllib
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_version() -> str:
    """Read and return the version string from pyproject.toml."""
    with open(_PROJECT_ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]["version"]


__version__: str = get_version()
