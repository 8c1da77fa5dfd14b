"""Per-category deduction calculators.

Every category follows the same five steps: subtract the subsidy, gate the
result on the qualifying threshold, apply the cap, derive the excess and round
the audited figures. Only the rule parameters differ, and those come from the
tax year configuration.
"""

from __future__ import annotations

from collections.abc import Iterable

from reformtax.backend.config.year_config import (
    CategoryRule,
    YearConfiguration,
    load_default_configuration,
)
from reformtax.backend.models.domain import (
    LongTermHousingMode,
    RenovationCalculation,
    RenovationCategory,
    WorkItem,
)

from .utils import clamp_non_negative, round_yen
from .work_items import sum_work_items


def _resolve_config(config: YearConfiguration | None) -> YearConfiguration:
    return config if config is not None else load_default_configuration()


def resolve_cap(rule: CategoryRule, has_solar_panel: bool = False) -> float | None:
    """Return the cap that applies to ``rule`` for the solar installation flag."""

    return rule.cap_for(has_solar_panel)


def apply_category_rule(
    total_cost: float,
    subsidy_amount: float,
    rule: CategoryRule,
    *,
    has_solar_panel: bool = False,
) -> RenovationCalculation:
    """Apply ``rule`` to an unrounded ``total_cost``."""

    after_subsidy = total_cost - subsidy_amount

    if rule.threshold is None:
        deductible = clamp_non_negative(after_subsidy)
    else:
        # A post-subsidy amount equal to the threshold does not qualify.
        deductible = after_subsidy if after_subsidy > rule.threshold else 0.0

    cap = resolve_cap(rule, has_solar_panel)
    max_deduction = deductible if cap is None else min(deductible, cap)
    excess = clamp_non_negative(deductible - max_deduction)

    return RenovationCalculation(
        total_cost=round_yen(total_cost),
        after_subsidy=round_yen(after_subsidy),
        deductible_amount=round_yen(deductible),
        max_deduction=round_yen(max_deduction),
        excess_amount=round_yen(excess),
    )


def calculate_category_from_total(
    category: RenovationCategory | str,
    total_cost: float,
    subsidy_amount: float,
    *,
    has_solar_panel: bool = False,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    """Calculate a category from an already aggregated total cost."""

    rule = _resolve_config(config).rule_for(category)
    return apply_category_rule(
        total_cost, subsidy_amount, rule, has_solar_panel=has_solar_panel
    )


def calculate_category(
    category: RenovationCategory | str,
    items: Iterable[WorkItem],
    subsidy_amount: float,
    *,
    has_solar_panel: bool = False,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    """Aggregate ``items`` and apply the rule configured for ``category``."""

    rule = _resolve_config(config).rule_for(category)
    total_cost = sum_work_items(items, apply_window_ratio=rule.applies_window_ratio)
    return apply_category_rule(
        total_cost, subsidy_amount, rule, has_solar_panel=has_solar_panel
    )


def calculate_seismic(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    return calculate_category(
        RenovationCategory.SEISMIC, items, subsidy_amount, config=config
    )


def calculate_barrier_free(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    return calculate_category(
        RenovationCategory.BARRIER_FREE, items, subsidy_amount, config=config
    )


def calculate_energy(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    has_solar_panel: bool = False,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    """Energy-saving work; window items are scaled by their window area ratio."""

    return calculate_category(
        RenovationCategory.ENERGY_SAVING,
        items,
        subsidy_amount,
        has_solar_panel=has_solar_panel,
        config=config,
    )


def calculate_cohabitation(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    return calculate_category(
        RenovationCategory.COHABITATION, items, subsidy_amount, config=config
    )


def calculate_childcare(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    return calculate_category(
        RenovationCategory.CHILDCARE, items, subsidy_amount, config=config
    )


def calculate_long_term_housing(
    items: Iterable[WorkItem],
    subsidy_amount: float,
    mode: LongTermHousingMode | str = LongTermHousingMode.OR,
    has_solar_panel: bool = False,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    """Long-term excellent housing work under the ``or`` or ``and`` grouping."""

    category = LongTermHousingMode(mode).category
    return calculate_category(
        category,
        items,
        subsidy_amount,
        has_solar_panel=has_solar_panel,
        config=config,
    )


def calculate_other_renovation(
    total_cost: float,
    subsidy_amount: float,
    *,
    config: YearConfiguration | None = None,
) -> RenovationCalculation:
    """Other renovation work is entered as a total and is never capped."""

    return calculate_category_from_total(
        RenovationCategory.OTHER_RENOVATION,
        total_cost,
        subsidy_amount,
        config=config,
    )


__all__ = [
    "apply_category_rule",
    "calculate_barrier_free",
    "calculate_category",
    "calculate_category_from_total",
    "calculate_childcare",
    "calculate_cohabitation",
    "calculate_energy",
    "calculate_long_term_housing",
    "calculate_other_renovation",
    "calculate_seismic",
    "resolve_cap",
]
