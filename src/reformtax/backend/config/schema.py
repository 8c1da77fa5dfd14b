"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    model_validator,
)
from typing_extensions import Self

from reformtax.backend.models.domain import RenovationCategory


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class CategoryRule(ImmutableModel):
    """Qualifying threshold and caps applied to a single renovation category.

    ``threshold`` is compared with a strict greater-than against the
    post-subsidy amount; ``None`` means the category always qualifies.
    ``cap`` of ``None`` leaves the deductible amount uncapped. ``solar_cap``
    replaces ``cap`` when the certificate declares a solar power installation.
    """

    threshold: float | None = None
    cap: float | None = None
    solar_cap: float | None = None
    applies_window_ratio: bool = False
    label_key: str | None = None

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if self.threshold is not None and self.threshold < 0:
            raise ConfigurationError("Qualifying thresholds must be non-negative")
        if self.cap is not None and self.cap < 0:
            raise ConfigurationError("Category caps must be non-negative")
        if self.solar_cap is not None:
            if self.cap is None:
                raise ConfigurationError("'solar_cap' requires a base 'cap'")
            if self.solar_cap < self.cap:
                raise ConfigurationError("'solar_cap' cannot be lower than 'cap'")
        return self

    def cap_for(self, has_solar_panel: bool) -> float | None:
        if has_solar_panel and self.solar_cap is not None:
            return self.solar_cap
        return self.cap


class CategoryRules(ImmutableModel):
    """Rules for every renovation category keyed by category identifier."""

    seismic: CategoryRule
    barrier_free: CategoryRule
    energy_saving: CategoryRule
    cohabitation: CategoryRule
    childcare: CategoryRule
    long_term_housing_or: CategoryRule
    long_term_housing_and: CategoryRule
    other_renovation: CategoryRule

    @model_validator(mode="after")
    def _validate_other_renovation(self) -> Self:
        other = self.other_renovation
        if other.threshold is not None or other.cap is not None:
            raise ConfigurationError(
                "'other_renovation' must not define a threshold or cap"
            )
        return self

    def for_category(self, category: RenovationCategory | str) -> CategoryRule:
        key = RenovationCategory(category).value
        return getattr(self, key)


class ProgramLimits(ImmutableModel):
    """Program-wide amounts that apply across categories."""

    total_deduction_limit: float = 10_000_000
    housing_loan_minimum_cost: float = 1_000_000

    @model_validator(mode="after")
    def _validate_limits(self) -> Self:
        if self.total_deduction_limit <= 0:
            raise ConfigurationError("'total_deduction_limit' must be positive")
        if self.housing_loan_minimum_cost < 0:
            raise ConfigurationError("'housing_loan_minimum_cost' must be non-negative")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    categories: CategoryRules
    limits: ProgramLimits = Field(default_factory=ProgramLimits)

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        categories = prepared.get("categories")
        if not isinstance(categories, Mapping):
            raise ConfigurationError("Configuration must include a 'categories' section")

        missing = [
            category.value
            for category in RenovationCategory
            if not isinstance(categories.get(category.value), Mapping)
        ]
        if missing:
            raise ConfigurationError(
                f"Category configuration missing for: {', '.join(missing)}"
            )

        if prepared.get("limits") is None:
            prepared["limits"] = {}

        return prepared

    def rule_for(self, category: RenovationCategory | str) -> CategoryRule:
        return self.categories.for_category(category)


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "CategoryRule",
    "CategoryRules",
    "ConfigurationError",
    "ImmutableModel",
    "ProgramLimits",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
]
