"""
Abstract base class for all add-on pricing calculators.

Input: add-on dict (from the product configuration) + pricing context
Output: AddonLine dict {addon_id, name, cost, formula}
"""

import logging
import math
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseAddonCalculator(ABC):
    """All pricing-model calculators inherit from this."""

    @abstractmethod
    def calculate(self, addon: dict, context: dict) -> dict:
        """
        Takes one add-on and the pricing context for the job.

        context keys:
            quantity             — pieces produced (display quantity)
            base_price           — paper × sides × coating × size × quantity
            adjusted_base_price  — base price after broker/modifier adjustments
            after_turnaround     — adjusted base × turnaround multiplier
            paper_type           — "cardstock" | "text" | "specialty"
            total_weight         — job weight in lbs
            selection            — the customer's selection for this add-on

        Returns an AddonLine dict.
        """
        pass

    # --- Helper methods for all calculators ---

    def config(self, addon: dict) -> dict:
        return addon.get("configuration") or {}

    def parse_number(self, value, default: float = 0.0) -> float:
        """Parse a numeric value from configuration or user input."""
        if value is None:
            return default
        try:
            return float(str(value).strip())
        except (ValueError, TypeError):
            logger.debug("Unparseable number %r, using %s", value, default)
            return default

    def parse_int(self, value, default: int = 0) -> int:
        """Parse an integer from configuration or user input."""
        if value is None:
            return default
        try:
            return int(float(str(value).strip()))
        except (ValueError, TypeError):
            return default

    def setup_plus_per_piece(self, base_fee: float, per_piece_rate: float, quantity: int) -> float:
        """base_fee + per_piece_rate × quantity. The CUSTOM default formula."""
        return base_fee + per_piece_rate * quantity

    def bundles_for(self, quantity: int, items_per_bundle: int) -> int:
        """Bundles needed for a run. Always rounds up; a partial bundle is still a bundle."""
        if items_per_bundle <= 0:
            return 0
        return math.ceil(quantity / items_per_bundle)

    def money(self, amount: float) -> str:
        return f"${amount:,.2f}"

    def make_addon_line(self, addon: dict, cost: float, formula: str) -> dict:
        """Build an AddonLine dict."""
        return {
            "addon_id": addon.get("id"),
            "name": addon.get("name", ""),
            "pricing_model": addon.get("pricing_model"),
            "cost": round(cost, 2),
            "formula": formula,
        }
