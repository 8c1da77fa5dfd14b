"""Unit coverage for the combination optimizer."""

from __future__ import annotations

from reformtax.backend.config.year_config import YearConfiguration
from reformtax.backend.models import (
    CombinedRenovations,
    PatternTotals,
    RenovationCalculation,
    WorkItem,
)
from reformtax.backend.services.calculators import (
    PATTERNS,
    calculate_optimal_combination,
    calculate_other_renovation,
    calculate_seismic,
)
from reformtax.backend.services.calculators.combination import (
    select_excess_pattern,
    sum_pattern,
)


def _calc(deductible: int, cap: int | None = None) -> RenovationCalculation:
    capped = deductible if cap is None else min(deductible, cap)
    return RenovationCalculation(
        total_cost=deductible,
        after_subsidy=deductible,
        deductible_amount=deductible,
        max_deduction=capped,
        excess_amount=deductible - capped,
    )


def test_empty_certificate_yields_zero_figures(config: YearConfiguration) -> None:
    result = calculate_optimal_combination(CombinedRenovations(), config=config)

    assert result.total_deductible == 0
    assert result.max_control_amount == 0
    assert result.excess_amount == 0
    assert result.remaining == 10_000_000
    assert result.final_deductible == 0
    assert result.five_percent_deductible == 0
    assert result.selected_pattern == "general"


def test_general_pattern_wins_without_long_term_housing(
    config: YearConfiguration,
) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(2_500_000, 2_500_000),
        barrier_free=_calc(2_000_000, 2_000_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.max_control_amount == 4_500_000
    assert result.total_deductible == 4_500_000
    assert result.remaining == 5_500_000
    assert result.selected_pattern == "general"


def test_no_overflow_uses_total_as_five_percent_basis(
    config: YearConfiguration,
) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(1_200_000, 2_500_000),
        energy=_calc(800_000, 2_500_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.excess_amount == 0
    assert result.final_deductible == result.total_deductible == 2_000_000
    assert result.five_percent_deductible == 2_000_000


def test_excess_limits_five_percent_basis(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(3_000_000, 2_500_000),
        barrier_free=_calc(600_000, 2_000_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 3_600_000
    assert result.max_control_amount == 3_100_000
    assert result.excess_amount == 500_000
    assert result.final_deductible == 500_000
    assert result.five_percent_deductible == 500_000


def test_other_renovation_feeds_five_percent_basis(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(1_000_000, 2_500_000),
        other=calculate_other_renovation(300_000, 0, config=config),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 1_000_000
    assert result.final_deductible == 300_000


def test_other_renovation_alone_does_not_create_a_basis(
    config: YearConfiguration,
) -> None:
    renovations = CombinedRenovations(
        other=calculate_other_renovation(2_000_000, 0, config=config)
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 0
    assert result.final_deductible == 0


def test_global_ceiling_clamps_capped_amount(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(2_600_000, 2_500_000),
        barrier_free=_calc(2_100_000, 2_000_000),
        energy=_calc(2_600_000, 2_500_000),
        cohabitation=_calc(2_600_000, 2_500_000),
        childcare=_calc(2_600_000, 2_500_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.max_control_amount == 10_000_000
    assert result.remaining == 0
    assert result.five_percent_deductible == 0
    assert result.final_deductible == 500_000


def test_long_term_and_pattern_wins_ties(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        barrier_free=_calc(700_000, 2_000_000),
        long_term_housing_or=_calc(3_000_000, 2_500_000),
        long_term_housing_and=_calc(3_000_000, 5_000_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 3_700_000
    assert result.max_control_amount == 3_700_000
    assert result.selected_pattern == "long_term_and"
    assert result.excess_amount == 0
    assert result.final_deductible == 3_700_000


def test_long_term_or_pattern_supplies_excess(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        seismic=_calc(900_000, 2_500_000),
        long_term_housing_or=_calc(3_000_000, 2_500_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 3_000_000
    assert result.max_control_amount == 2_500_000
    assert result.selected_pattern == "long_term_or"
    assert result.excess_amount == 500_000
    assert result.final_deductible == 500_000


def test_maxima_are_taken_independently(config: YearConfiguration) -> None:
    # The general pattern has the larger total, the "and" pattern the larger
    # capped amount.
    renovations = CombinedRenovations(
        seismic=_calc(6_000_000, 2_500_000),
        long_term_housing_and=_calc(4_000_000, 5_000_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert result.total_deductible == 6_000_000
    assert result.max_control_amount == 4_000_000
    assert result.selected_pattern == "general"
    assert result.excess_amount == 3_500_000


def test_pattern_totals_are_exposed(config: YearConfiguration) -> None:
    renovations = CombinedRenovations(
        barrier_free=_calc(600_000, 2_000_000),
        childcare=_calc(700_000, 2_500_000),
    )

    result = calculate_optimal_combination(renovations, config=config)

    assert [entry.pattern for entry in result.patterns] == [
        "general",
        "long_term_or",
        "long_term_and",
    ]
    assert all(entry.total == 1_300_000 for entry in result.patterns)
    assert result.selected_pattern == "long_term_and"
    assert result.as_dict()["patterns"][0] == {
        "pattern": "general",
        "total": 1_300_000,
        "max_deduction": 1_300_000,
        "excess": 0,
    }


def test_sum_pattern_skips_missing_categories() -> None:
    general = PATTERNS[0]

    totals = sum_pattern(general, CombinedRenovations(cohabitation=_calc(900_000)))

    assert totals == PatternTotals(
        pattern="general", total=900_000, max_deduction=900_000, excess=0
    )


def test_select_excess_pattern_falls_back_to_general() -> None:
    totals = [
        PatternTotals(pattern="general", total=0, excess=0),
        PatternTotals(pattern="long_term_or", total=0, excess=0),
        PatternTotals(pattern="long_term_and", total=0, excess=0),
    ]

    assert select_excess_pattern(totals, 0).pattern == "general"


def test_combination_is_deterministic(config: YearConfiguration) -> None:
    items = [WorkItem.create(unit_price=333, quantity=9000, resident_ratio=0.5)]
    renovations = CombinedRenovations(seismic=calculate_seismic(items, 0, config=config))

    first = calculate_optimal_combination(renovations, config=config)
    second = calculate_optimal_combination(renovations, config=config)

    assert first == second
    assert first.total_deductible == 1_498_500
