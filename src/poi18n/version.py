"""Expose the installed ``poi18n`` version to the CLI."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "poi18n"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the packaged version, reading ``pyproject.toml`` for source checkouts."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return _read_version_from_pyproject(PYPROJECT_PATH)


def _read_version_from_pyproject(pyproject_path: Path) -> str:
    if not pyproject_path.exists():  # pragma: no cover - repository invariant
        raise RuntimeError(f"Unable to locate project metadata at {pyproject_path}")

    with pyproject_path.open("rb") as handle:
        project = tomllib.load(handle).get("project", {})

    version = str(project.get("version", "")).strip()
    if not version:
        raise RuntimeError(f"No project version declared in {pyproject_path}")
    return version


__all__ = ["get_project_version"]
