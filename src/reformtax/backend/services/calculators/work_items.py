"""Work-item aggregation shared by the category calculators."""

from __future__ import annotations

from collections.abc import Iterable

from reformtax.backend.models.domain import WorkItem

from .utils import round_yen


def work_item_amount(item: WorkItem, *, apply_window_ratio: bool = False) -> float:
    """Return the cost contribution of a single line item."""

    amount = item.unit_price * item.quantity * item.resident_ratio
    if apply_window_ratio:
        amount *= item.window_area_ratio
    return amount


def sum_work_items(
    items: Iterable[WorkItem], *, apply_window_ratio: bool = False
) -> float:
    """Sum item contributions without rounding.

    Category calculators compare the unrounded sum against their thresholds,
    so rounding is left to the final result fields.
    """

    total = 0.0
    for item in items:
        total += work_item_amount(item, apply_window_ratio=apply_window_ratio)
    return total


def aggregate_work_items(
    items: Iterable[WorkItem], *, apply_window_ratio: bool = False
) -> int:
    """Reduce ``items`` to a single total cost in whole yen."""

    return round_yen(sum_work_items(items, apply_window_ratio=apply_window_ratio))


__all__ = ["aggregate_work_items", "sum_work_items", "work_item_amount"]
