"""Domain-specific calculation helpers."""

from .categories import (
    apply_category_rule,
    calculate_barrier_free,
    calculate_category,
    calculate_category_from_total,
    calculate_childcare,
    calculate_cohabitation,
    calculate_energy,
    calculate_long_term_housing,
    calculate_other_renovation,
    calculate_seismic,
    resolve_cap,
)
from .certificate_cost import (
    calculate_certificate_cost,
    validate_housing_loan_eligibility,
    work_type_breakdown,
)
from .combination import PATTERNS, calculate_optimal_combination
from .utils import clamp_non_negative, decimal_to_number, round_yen
from .work_items import aggregate_work_items, sum_work_items, work_item_amount

__all__ = [
    "PATTERNS",
    "aggregate_work_items",
    "apply_category_rule",
    "calculate_barrier_free",
    "calculate_category",
    "calculate_category_from_total",
    "calculate_certificate_cost",
    "calculate_childcare",
    "calculate_cohabitation",
    "calculate_energy",
    "calculate_long_term_housing",
    "calculate_optimal_combination",
    "calculate_other_renovation",
    "calculate_seismic",
    "clamp_non_negative",
    "decimal_to_number",
    "resolve_cap",
    "round_yen",
    "sum_work_items",
    "validate_housing_loan_eligibility",
    "work_item_amount",
    "work_type_breakdown",
]
