"""Standard unit-price catalogue for pricing renovation work items."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from pydantic import Field, ValidationError, field_validator, model_validator

from reformtax.backend.models.domain import WorkItem

from .schema import ConfigurationError, ImmutableModel
from .year_config import CONFIG_DIRECTORY, _load_yaml

WORK_TYPES_FILE = CONFIG_DIRECTORY / "work_types.yaml"
SOLAR_POWER_GROUP = "solar_power"


class WorkTypeEntry(ImmutableModel):
    """A single priced work type from the statutory master."""

    code: str
    name: str
    unit_price: float
    unit: str
    category: str
    group: str | None = None
    region: str | None = None
    needs_window_ratio: bool = False
    description: str | None = None

    @field_validator("region", mode="before")
    @classmethod
    def _coerce_region(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @model_validator(mode="after")
    def _validate_price(self) -> WorkTypeEntry:
        if self.unit_price < 0:
            raise ConfigurationError(f"Work type '{self.code}' has a negative unit price")
        return self

    def build_item(
        self,
        quantity: float,
        resident_ratio: float | None = None,
        window_area_ratio: float | None = None,
    ) -> WorkItem:
        """Return a work item priced at this entry's standard unit price."""

        if not self.needs_window_ratio:
            window_area_ratio = None
        return WorkItem.create(
            unit_price=self.unit_price,
            quantity=quantity,
            resident_ratio=resident_ratio,
            window_area_ratio=window_area_ratio,
        )


class WorkTypeCatalogue(ImmutableModel):
    """All work type masters keyed by renovation category."""

    entries: Sequence[WorkTypeEntry] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Work type catalogue must be a mapping of categories")
        if "entries" in data:
            return data

        entries: list[dict[str, Any]] = []
        for category, items in data.items():
            if not isinstance(items, list):
                raise ConfigurationError(
                    f"Work types for '{category}' must be provided as a list"
                )
            for item in items:
                if not isinstance(item, Mapping):
                    raise ConfigurationError(
                        f"Work type definitions for '{category}' must be mappings"
                    )
                entries.append({**item, "category": str(category)})
        return {"entries": entries}

    @model_validator(mode="after")
    def _validate_codes(self) -> WorkTypeCatalogue:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.code in seen:
                raise ConfigurationError(f"Duplicate work type code '{entry.code}'")
            seen.add(entry.code)
        return self


@lru_cache(maxsize=1)
def load_work_type_catalogue(path: Path | None = None) -> WorkTypeCatalogue:
    """Load and cache the standard unit-price catalogue."""

    source = path or WORK_TYPES_FILE
    if not source.exists():
        raise FileNotFoundError(f"Work type catalogue not found: {source.name}")

    try:
        return WorkTypeCatalogue.model_validate(_load_yaml(source))
    except ValidationError as error:
        raise ConfigurationError(f"Work type catalogue validation failed: {error}") from error


def get_work_type(code: str) -> WorkTypeEntry:
    """Return the catalogue entry for ``code``; raises ``KeyError`` if unknown."""

    for entry in load_work_type_catalogue().entries:
        if entry.code == code:
            return entry
    raise KeyError(code)


def has_solar_power_work(codes: Iterable[str | None]) -> bool:
    """Return ``True`` when any of ``codes`` is a solar power installation.

    Solar power work raises the energy-saving and long-term housing caps.
    Unknown codes are ignored here; pricing rejects them separately.
    """

    solar_codes = {
        entry.code
        for entry in load_work_type_catalogue().entries
        if entry.group == SOLAR_POWER_GROUP
    }
    return any(code in solar_codes for code in codes if code)


def work_types_for(category: str) -> tuple[WorkTypeEntry, ...]:
    """Return the catalogue entries registered for ``category``."""

    return tuple(
        entry for entry in load_work_type_catalogue().entries if entry.category == category
    )


__all__ = [
    "WORK_TYPES_FILE",
    "WorkTypeCatalogue",
    "WorkTypeEntry",
    "SOLAR_POWER_GROUP",
    "get_work_type",
    "has_solar_power_work",
    "load_work_type_catalogue",
    "work_types_for",
]
