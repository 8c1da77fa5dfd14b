"""Load the renovation deduction rules published for each tax year.

``data/manifest.yaml`` declares which years exist; each year's thresholds,
caps and program limits live in their own YAML file next to it. Parsed
configurations are frozen pydantic models and are cached per year.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    CategoryRule,
    CategoryRules,
    ConfigurationError,
    ProgramLimits,
    TaxYearManifest,
    TaxYearManifestEntry,
    YearConfiguration,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read ``path`` and require a mapping at the document root."""

    with path.open("r", encoding="utf-8") as handle:
        document = yaml.safe_load(handle)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the top level")
    return document


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Return the parsed list of published tax years."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError(f"Tax year manifest missing: {MANIFEST_FILE.name}")

    try:
        return TaxYearManifest.model_validate(_load_yaml(MANIFEST_FILE))
    except ValidationError as error:
        raise ConfigurationError(f"Invalid tax year manifest: {error}") from error


def _rule_file_for(year: int) -> Path:
    try:
        entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"No deduction rules published for {year}") from exc

    path = CONFIG_DIRECTORY / entry.resolved_filename
    if not path.exists():
        raise FileNotFoundError(f"Deduction rules for {year} missing: {path.name}")
    return path


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Return the deduction rules for ``year``.

    Raises ``FileNotFoundError`` when the year is not published and
    ``ConfigurationError`` when its file does not match the schema.
    """

    document = _load_yaml(_rule_file_for(year))
    document.setdefault("year", year)

    try:
        configuration = YearConfiguration.model_validate(document)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid deduction rules for {year}: {error}") from error

    if configuration.year != year:
        raise ConfigurationError(
            f"Rule file for {year} declares year {configuration.year}"
        )
    return configuration


def available_years() -> Sequence[int]:
    """Return the published tax years in ascending order."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the most recent published tax year."""

    years = available_years()
    if not years:
        raise FileNotFoundError("The tax year manifest does not list any years")
    return years[-1]


def load_default_configuration() -> YearConfiguration:
    """Rules used by the calculators when no configuration is passed in."""

    return load_year_configuration(default_year())


__all__ = [
    "CONFIG_DIRECTORY",
    "CategoryRule",
    "CategoryRules",
    "ConfigurationError",
    "MANIFEST_FILE",
    "ProgramLimits",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "YearConfiguration",
    "available_years",
    "default_year",
    "load_default_configuration",
    "load_manifest",
    "load_year_configuration",
]
