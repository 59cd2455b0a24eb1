"""
Calculator registry: maps add-on pricing models to calculator classes.
"""

from .flat import FlatAddonCalculator
from .percentage import PercentageAddonCalculator
from .per_unit import PerUnitAddonCalculator
from .custom import CustomAddonCalculator
from .base import BaseAddonCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "FLAT": FlatAddonCalculator,
    "FIXED_FEE": FlatAddonCalculator,  # legacy name still present in older catalog rows
    "PERCENTAGE": PercentageAddonCalculator,
    "PER_UNIT": PerUnitAddonCalculator,
    "CUSTOM": CustomAddonCalculator,
}


def _model_key(pricing_model) -> str:
    return str(getattr(pricing_model, "value", pricing_model) or "").upper()


def get_addon_calculator(pricing_model) -> BaseAddonCalculator:
    """Returns an instance of the calculator for a pricing model, or raises ValueError."""
    key = _model_key(pricing_model)
    if key not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for pricing model: {pricing_model}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[key]()


def has_addon_calculator(pricing_model) -> bool:
    """Check if a calculator exists for a pricing model."""
    return _model_key(pricing_model) in CALCULATOR_REGISTRY


def list_pricing_models() -> list[str]:
    """List all registered pricing models."""
    return list(CALCULATOR_REGISTRY.keys())
