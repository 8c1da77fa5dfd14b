"""Certificate-level work cost totals and statutory classification rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from reformtax.backend.config.year_config import (
    YearConfiguration,
    load_default_configuration,
)
from reformtax.backend.localization import Translator
from reformtax.backend.models.domain import CertificateCostSummary

from .utils import clamp_non_negative, round_yen

# Work categories in statutory order with their classification number. The
# childcare and other renovation categories share classification No. 6.
WORK_CLASSIFICATIONS: tuple[tuple[str, int], ...] = (
    ("seismic", 1),
    ("barrier_free", 2),
    ("energy_saving", 3),
    ("cohabitation", 4),
    ("long_term_housing", 5),
    ("other_renovation", 6),
    ("childcare", 6),
)

WORK_CATEGORIES: tuple[str, ...] = tuple(category for category, _ in WORK_CLASSIFICATIONS)


def classification_number(category: str) -> int:
    for name, number in WORK_CLASSIFICATIONS:
        if name == category:
            return number
    raise KeyError(category)


def _sum_amounts(amounts: Iterable[float] | None) -> float:
    if not amounts:
        return 0.0
    return float(sum(amounts))


def calculate_certificate_cost(
    works: Mapping[str, Iterable[float] | None],
    subsidy_amount: float = 0.0,
    *,
    config: YearConfiguration | None = None,
) -> CertificateCostSummary:
    """Total calculated line amounts per work category and across the certificate.

    ``works`` maps work categories to the already-calculated amounts of their
    lines. Unknown categories raise ``KeyError``.
    """

    configuration = config if config is not None else load_default_configuration()

    unknown = sorted(set(works) - set(WORK_CATEGORIES))
    if unknown:
        raise KeyError(f"Unknown work categories: {', '.join(unknown)}")

    category_totals = {
        category: _sum_amounts(works.get(category)) for category in WORK_CATEGORIES
    }
    total_work_cost = sum(category_totals.values())
    deductible_amount = clamp_non_negative(total_work_cost - subsidy_amount)
    minimum = configuration.limits.housing_loan_minimum_cost

    return CertificateCostSummary(
        category_totals=category_totals,
        total_work_cost=total_work_cost,
        subsidy_amount=subsidy_amount,
        deductible_amount=deductible_amount,
        meets_housing_loan_requirement=deductible_amount >= minimum,
        housing_loan_minimum_cost=minimum,
    )


def work_type_breakdown(
    summary: CertificateCostSummary, translator: Translator
) -> list[dict[str, Any]]:
    """Return one row per statutory classification (No. 1 to No. 6)."""

    rows: list[dict[str, Any]] = []
    for number in range(1, 6):
        category = WORK_CATEGORIES[number - 1]
        amount = summary.total_for(category)
        rows.append(
            {
                "classification": translator(f"classifications.{number}"),
                "classification_number": number,
                "label": translator(f"categories.{category}"),
                "amount": amount,
                "has_work": amount > 0,
            }
        )

    other = summary.total_for("other_renovation")
    childcare = summary.total_for("childcare")
    rows.append(
        {
            "classification": translator("classifications.6"),
            "classification_number": 6,
            "label": translator("classifications.6.label"),
            "amount": other + childcare,
            "has_work": other > 0 or childcare > 0,
            "sub_items": [
                {"label": translator("categories.other_renovation"), "amount": other},
                {"label": translator("categories.childcare"), "amount": childcare},
            ],
        }
    )
    return rows


def validate_housing_loan_eligibility(
    summary: CertificateCostSummary, translator: Translator
) -> str | None:
    """Return a message explaining why the housing loan deduction cannot apply."""

    if summary.total_work_cost == 0:
        return translator("eligibility.no_cost")

    if not summary.meets_housing_loan_requirement:
        return translator(
            "eligibility.housing_loan_minimum",
            minimum=round_yen(summary.housing_loan_minimum_cost),
            current=round_yen(summary.deductible_amount),
        )

    return None


__all__ = [
    "WORK_CATEGORIES",
    "WORK_CLASSIFICATIONS",
    "calculate_certificate_cost",
    "classification_number",
    "validate_housing_loan_eligibility",
    "work_type_breakdown",
]
