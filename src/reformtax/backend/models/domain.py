"""Value objects exchanged between the aggregator, calculators and optimizer.

Every object here is immutable and created fresh per calculation. None of the
constructors validate business plausibility; callers supply already-validated
numbers and the calculators clamp where the rules require it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class RenovationCategory(str, Enum):
    """Renovation categories with their own deduction rule."""

    SEISMIC = "seismic"
    BARRIER_FREE = "barrier_free"
    ENERGY_SAVING = "energy_saving"
    COHABITATION = "cohabitation"
    CHILDCARE = "childcare"
    LONG_TERM_HOUSING_OR = "long_term_housing_or"
    LONG_TERM_HOUSING_AND = "long_term_housing_and"
    OTHER_RENOVATION = "other_renovation"


class LongTermHousingMode(str, Enum):
    """Legal grouping for the long-term excellent housing credit."""

    OR = "or"
    AND = "and"

    @property
    def category(self) -> RenovationCategory:
        if self is LongTermHousingMode.AND:
            return RenovationCategory.LONG_TERM_HOUSING_AND
        return RenovationCategory.LONG_TERM_HOUSING_OR


_DEFAULT_RATIO = 1.0


@dataclass(frozen=True)
class WorkItem:
    """One priced line of work within a single renovation category."""

    unit_price: float
    quantity: float
    resident_ratio: float = _DEFAULT_RATIO
    window_area_ratio: float = _DEFAULT_RATIO

    @classmethod
    def create(
        cls,
        unit_price: float,
        quantity: float,
        resident_ratio: float | None = None,
        window_area_ratio: float | None = None,
    ) -> WorkItem:
        """Build an item, substituting ``1.0`` for omitted ratios."""

        return cls(
            unit_price=unit_price,
            quantity=quantity,
            resident_ratio=_DEFAULT_RATIO if resident_ratio is None else resident_ratio,
            window_area_ratio=(
                _DEFAULT_RATIO if window_area_ratio is None else window_area_ratio
            ),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WorkItem:
        """Build an item from a snake_case or camelCase mapping."""

        def _pick(snake: str, camel: str) -> Any:
            value = data.get(snake)
            if value is None:
                value = data.get(camel)
            return value

        return cls.create(
            unit_price=_pick("unit_price", "unitPrice"),
            quantity=_pick("quantity", "quantity"),
            resident_ratio=_pick("resident_ratio", "residentRatio"),
            window_area_ratio=_pick("window_area_ratio", "windowAreaRatio"),
        )


@dataclass(frozen=True)
class RenovationCalculation:
    """Audited result of applying one category rule to an aggregated total."""

    total_cost: int
    after_subsidy: int
    deductible_amount: int
    max_deduction: int
    excess_amount: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class CombinedRenovations:
    """Per-category calculations supplied to the combination optimizer."""

    seismic: RenovationCalculation | None = None
    barrier_free: RenovationCalculation | None = None
    energy: RenovationCalculation | None = None
    cohabitation: RenovationCalculation | None = None
    childcare: RenovationCalculation | None = None
    other: RenovationCalculation | None = None
    long_term_housing_or: RenovationCalculation | None = None
    long_term_housing_and: RenovationCalculation | None = None

    def get(self, name: str) -> RenovationCalculation | None:
        return getattr(self, name)


@dataclass(frozen=True)
class PatternTotals:
    """Sums of one candidate grouping across its member categories."""

    pattern: str
    total: int = 0
    max_deduction: int = 0
    excess: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OptimalCombinationResult:
    """Final certificate figures selected across the candidate groupings."""

    total_deductible: int
    max_control_amount: int
    excess_amount: int
    remaining: int
    final_deductible: int
    five_percent_deductible: int
    selected_pattern: str
    patterns: tuple[PatternTotals, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["patterns"] = [entry.as_dict() for entry in self.patterns]
        return payload


@dataclass(frozen=True)
class CertificateCostSummary:
    """Work cost totals per category and the combined post-subsidy figure."""

    category_totals: Mapping[str, float]
    total_work_cost: float
    subsidy_amount: float
    deductible_amount: float
    meets_housing_loan_requirement: bool
    housing_loan_minimum_cost: float

    def total_for(self, category: str) -> float:
        return self.category_totals.get(category, 0.0)

    def as_dict(self) -> dict[str, Any]:
        return {
            "category_totals": dict(self.category_totals),
            "total_work_cost": self.total_work_cost,
            "subsidy_amount": self.subsidy_amount,
            "deductible_amount": self.deductible_amount,
            "meets_housing_loan_requirement": self.meets_housing_loan_requirement,
            "housing_loan_minimum_cost": self.housing_loan_minimum_cost,
        }


__all__ = [
    "CertificateCostSummary",
    "CombinedRenovations",
    "LongTermHousingMode",
    "OptimalCombinationResult",
    "PatternTotals",
    "RenovationCalculation",
    "RenovationCategory",
    "WorkItem",
]
