"""Select the optimal grouping of relief schemes for a certificate.

Three legally defined groupings compete. Each sums the deductible amount, the
capped deduction and the excess of its member categories; the best capped
deduction becomes the 10% credit figure and the leftover capacity feeds the
supplementary 5% credit.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from reformtax.backend.config.year_config import (
    YearConfiguration,
    load_default_configuration,
)
from reformtax.backend.models.domain import (
    CombinedRenovations,
    OptimalCombinationResult,
    PatternTotals,
)

from .utils import clamp_non_negative, round_yen

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombinationPattern:
    """A candidate grouping of categories.

    ``priority`` orders patterns when their totals tie: the highest priority
    pattern whose total matches the winning total supplies the excess amount.
    """

    id: str
    categories: tuple[str, ...]
    priority: int


GENERAL_PATTERN = CombinationPattern(
    id="general",
    categories=("seismic", "barrier_free", "energy", "cohabitation", "childcare"),
    priority=1,
)
LONG_TERM_OR_PATTERN = CombinationPattern(
    id="long_term_or",
    categories=("barrier_free", "cohabitation", "long_term_housing_or", "childcare"),
    priority=2,
)
LONG_TERM_AND_PATTERN = CombinationPattern(
    id="long_term_and",
    categories=("barrier_free", "cohabitation", "long_term_housing_and", "childcare"),
    priority=3,
)

# Seismic and energy work are folded into the long-term housing figure, so the
# long-term patterns leave them out.
PATTERNS: tuple[CombinationPattern, ...] = (
    GENERAL_PATTERN,
    LONG_TERM_OR_PATTERN,
    LONG_TERM_AND_PATTERN,
)


def sum_pattern(
    pattern: CombinationPattern, renovations: CombinedRenovations
) -> PatternTotals:
    """Sum the audited figures of ``pattern``'s categories present in ``renovations``."""

    total = 0
    max_deduction = 0
    excess = 0
    for name in pattern.categories:
        calculation = renovations.get(name)
        if calculation is None:
            continue
        total += calculation.deductible_amount
        max_deduction += calculation.max_deduction
        excess += calculation.excess_amount

    return PatternTotals(
        pattern=pattern.id, total=total, max_deduction=max_deduction, excess=excess
    )


def select_excess_pattern(
    pattern_totals: Sequence[PatternTotals],
    total_deductible: float,
    patterns: Sequence[CombinationPattern] = PATTERNS,
) -> PatternTotals:
    """Return the pattern whose excess accompanies ``total_deductible``.

    Patterns are checked from highest to lowest priority; the first with a
    positive total equal to ``total_deductible`` wins. Without a match the
    lowest priority pattern is used.
    """

    by_id = {entry.pattern: entry for entry in pattern_totals}
    ranked = sorted(patterns, key=lambda pattern: pattern.priority, reverse=True)

    for pattern in ranked:
        totals = by_id.get(pattern.id)
        if totals is None:
            continue
        if totals.total == total_deductible and totals.total > 0:
            return totals

    fallback = ranked[-1]
    return by_id.get(fallback.id, PatternTotals(pattern=fallback.id))


def calculate_optimal_combination(
    renovations: CombinedRenovations,
    *,
    config: YearConfiguration | None = None,
) -> OptimalCombinationResult:
    """Pick the best grouping and derive the final certificate figures."""

    configuration = config if config is not None else load_default_configuration()
    total_limit = configuration.limits.total_deduction_limit

    pattern_totals = tuple(sum_pattern(pattern, renovations) for pattern in PATTERNS)

    # Both maxima are taken independently across the patterns.
    max_control_amount = max(entry.max_deduction for entry in pattern_totals)
    total_deductible = max(entry.total for entry in pattern_totals)

    selected = select_excess_pattern(pattern_totals, total_deductible)
    excess_amount = selected.excess

    if max_control_amount > total_limit:
        _LOGGER.debug(
            "Capped deduction %s exceeds program limit %s",
            max_control_amount,
            total_limit,
        )
        max_control_amount = total_limit

    remaining = clamp_non_negative(total_limit - max_control_amount)

    other_deductible = (
        renovations.other.deductible_amount if renovations.other is not None else 0
    )

    if total_deductible <= 0:
        final_deductible = 0
    elif excess_amount + other_deductible > 0:
        final_deductible = min(total_deductible, excess_amount + other_deductible)
    else:
        # Nothing overflowed a cap and no other work: the whole cost is the basis.
        final_deductible = total_deductible

    five_percent_deductible = min(final_deductible, remaining)

    return OptimalCombinationResult(
        total_deductible=round_yen(total_deductible),
        max_control_amount=round_yen(max_control_amount),
        excess_amount=round_yen(excess_amount),
        remaining=round_yen(remaining),
        final_deductible=round_yen(final_deductible),
        five_percent_deductible=round_yen(five_percent_deductible),
        selected_pattern=selected.pattern,
        patterns=pattern_totals,
    )


__all__ = [
    "CombinationPattern",
    "GENERAL_PATTERN",
    "LONG_TERM_AND_PATTERN",
    "LONG_TERM_OR_PATTERN",
    "PATTERNS",
    "calculate_optimal_combination",
    "select_excess_pattern",
    "sum_pattern",
]
