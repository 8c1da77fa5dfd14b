#!/usr/bin/env python3
"""Collect baseline timing figures for the certificate calculation service."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from reformtax.backend.services.calculation_service import calculate_certificate  # noqa: E402

SAMPLE_PAYLOAD = {
    "year": 2025,
    "locale": "ja",
    "has_solar_panel": True,
    "seismic": {
        "items": [
            {"work_type_code": "seismic_wood_foundation", "quantity": 60},
            {"work_type_code": "seismic_wood_wall", "quantity": 95},
        ],
        "subsidy_amount": 300000,
    },
    "barrier_free": {"total_cost": 650000},
    "energy_saving": {
        "items": [
            {
                "work_type_code": "es_glass_all_regions",
                "quantity": 110,
                "window_area_ratio": 0.18,
            },
            {"work_type_code": "es_solar_power", "quantity": 4},
        ]
    },
    "childcare": {"items": [{"unit_price": 180000, "quantity": 4}]},
    "other_renovation": {"total_cost": 420000},
}


def measure_backend(iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated certificate calculations."""

    payload = dict(SAMPLE_PAYLOAD)
    calculate_certificate(payload)  # Warm cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_certificate(payload)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("REFORMTAX_PROFILE_ITERATIONS", "200"))
    report = {"backend": measure_backend(iterations)}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
