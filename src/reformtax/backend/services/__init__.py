"""Service-layer helpers for the ReformTax backend."""

from .calculation_service import calculate_certificate

__all__ = ["calculate_certificate"]
