"""Engine version reported alongside every certificate calculation."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final, Iterator

DISTRIBUTION_NAME: Final = "reformtax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version.

    Source checkouts that were never installed have no distribution metadata,
    so the ``[project]`` table of ``pyproject.toml`` is read instead.
    """

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return _version_from_pyproject(PYPROJECT_PATH)


def _project_table(lines: Iterator[str]) -> Iterator[tuple[str, str]]:
    in_project = False
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            in_project = line == "[project]"
            continue
        if in_project and "=" in line:
            key, _, value = line.partition("=")
            yield key.strip(), value.strip()


def _version_from_pyproject(path: Path) -> str:
    if not path.exists():  # pragma: no cover - source checkouts ship pyproject.toml
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    lines = iter(path.read_text(encoding="utf-8").splitlines())
    for key, value in _project_table(lines):
        if key == "version":
            version = value.strip("\"'")
            if version:
                return version
            break

    raise RuntimeError(f"No [project] version declared in {path.name}")


__all__ = ["get_project_version"]
