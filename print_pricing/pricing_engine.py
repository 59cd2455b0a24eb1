"""
Pricing Engine.

Turns a product configuration and a customer's selections into a PriceQuote.
Pure math. No database, no I/O.

    base_price        = paper $/sq in × sides × coating × size × quantity
    adjusted_base     = base_price − broker discount ± base modifiers (tagline, exact size)
    after_turnaround  = adjusted_base × turnaround multiplier
    total_price       = after_turnaround + add-ons

Input: product config dict (catalog.product_to_config) + selections dict
Output: PriceQuote dict
"""

import logging

from .calculators.registry import get_addon_calculator
from .calculators.percentage import PercentageAddonCalculator
from .options import OptionSetBuilder, _find
from .weights import weight_from_dimensions

logger = logging.getLogger(__name__)


class InvalidSelectionError(ValueError):
    """Selections fall outside the product's option set."""

    def __init__(self, errors: list):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class PricingEngine:
    """
    Stateless price calculator for configurable print products.
    """

    # Standard quantities at or above this price on the displayed value
    EXACT_QUANTITY_THRESHOLD = 5000

    def __init__(self):
        self.options = OptionSetBuilder()

    def calculate(self, product: dict, selections: dict) -> dict:
        """
        Price one configuration.

        Args:
            product: product config dict (quantities, sizes, paper_stocks,
                     turnarounds, addons, custom bounds, defaults)
            selections: {
                "quantity_id" | "custom_quantity",
                "size_id" | "custom_width" + "custom_height",
                "paper_stock_id", "coating_id", "sides",
                "turnaround_id",
                "addons": [{"addon_id", "units"?, "choice"?, "scores"?, "items_per_bundle"?}],
                "broker_discount_pct": float,
            }

        Returns:
            PriceQuote dict: unit_price, total_price, total_weight, turnaround_days,
            base_price, adjusted_base_price, turnaround_cost, after_turnaround,
            addons_total, adjustments, addons, notes, selections.

        Raises:
            InvalidSelectionError when the selections fail validation.
        """
        selections = self.options.apply_defaults(product, selections)
        errors = self.options.validate(product, selections)
        if errors:
            raise InvalidSelectionError(errors)

        paper = _find(product.get("paper_stocks"), selections.get("paper_stock_id"))
        coating = _find(paper.get("coatings"), selections.get("coating_id"))
        turnaround = _find(product.get("turnarounds"), selections.get("turnaround_id"))

        display_quantity, calc_quantity = self._resolve_quantity(product, selections)
        width, height, size_value = self._resolve_size(product, selections)
        sides_multiplier = self._sides_multiplier(paper, selections.get("sides", "single"))
        coating_multiplier = (coating or {}).get("price_multiplier") or 1.0

        base_price = self._calculate_base_price(
            paper.get("price_per_sq_in", 0.0), sides_multiplier, coating_multiplier,
            size_value, calc_quantity,
        )
        total_weight = weight_from_dimensions(
            paper.get("weight_per_sq_in"), width, height, display_quantity,
        )

        selected = [
            (_find(product.get("addons"), entry.get("addon_id")), entry)
            for entry in selections.get("addons") or []
        ]
        modifiers = [(a, e) for a, e in selected if (a.get("configuration") or {}).get("modifies_base")]
        extras = [(a, e) for a, e in selected if not (a.get("configuration") or {}).get("modifies_base")]

        context = {
            "quantity": display_quantity,
            "base_price": base_price,
            "adjusted_base_price": base_price,
            "after_turnaround": base_price,
            "paper_type": paper.get("paper_type"),
            "total_weight": total_weight,
        }
        notes = []

        adjusted_base, adjustments = self._apply_adjustments(
            base_price, selections.get("broker_discount_pct"), modifiers, context, notes,
        )

        multiplier = self._turnaround_multiplier(turnaround)
        after_turnaround = self._apply_turnaround(adjusted_base, multiplier)

        context["adjusted_base_price"] = adjusted_base
        context["after_turnaround"] = after_turnaround
        addon_lines = self._calculate_addons(extras, context)
        addons_total = round(sum(line["cost"] for line in addon_lines), 2)

        total_price = round(after_turnaround + addons_total, 2)
        unit_price = round(total_price / display_quantity, 4) if display_quantity else 0.0
        turnaround_days = self._turnaround_days(turnaround, [a for a, _ in selected])

        logger.debug(
            "Priced product %s: base=%.2f adjusted=%.2f x%.2f total=%.2f",
            product.get("id"), base_price, adjusted_base, multiplier, total_price,
        )

        return {
            "product_id": product.get("id"),
            "quantity": display_quantity,
            "calculation_quantity": calc_quantity,
            "width": width,
            "height": height,
            "size_value": size_value,
            "paper_stock": paper.get("name"),
            "coating": (coating or {}).get("name"),
            "sides": selections.get("sides", "single"),
            "sides_multiplier": sides_multiplier,
            "coating_multiplier": coating_multiplier,
            "turnaround": turnaround.get("name"),
            "turnaround_multiplier": multiplier,
            "base_price": round(base_price, 2),
            "adjustments": adjustments,
            "adjusted_base_price": round(adjusted_base, 2),
            "turnaround_cost": round(after_turnaround - adjusted_base, 2),
            "after_turnaround": round(after_turnaround, 2),
            "addons": addon_lines,
            "addons_total": addons_total,
            "total_price": total_price,
            "unit_price": unit_price,
            "total_weight": total_weight,
            "turnaround_days": turnaround_days,
            "notes": notes,
            "selections": selections,
        }

    def price_turnaround_options(self, product: dict, selections: dict) -> list:
        """
        Price the same configuration under every turnaround the product offers.
        Tiers that can't run the selected coating are left out.
        """
        results = []
        for turnaround in product.get("turnarounds", []):
            trial = dict(selections or {})
            trial["turnaround_id"] = turnaround.get("id")
            try:
                quote = self.calculate(product, trial)
            except InvalidSelectionError:
                continue
            results.append({
                "turnaround_id": turnaround.get("id"),
                "name": turnaround.get("name"),
                "turnaround_days": quote["turnaround_days"],
                "total_price": quote["total_price"],
            })
        return results

    # --- Steps ---

    def _resolve_quantity(self, product: dict, selections: dict):
        """
        Returns (display_quantity, calculation_quantity).

        Custom quantities price as entered. Standard quantities at or above
        5000 price on the displayed value; below it, on the adjustment value
        if one is set, else the calculation value.
        """
        if selections.get("custom_quantity") is not None:
            quantity = int(selections["custom_quantity"])
            return quantity, quantity

        entry = _find(product.get("quantities"), selections.get("quantity_id"))
        display = int(entry.get("display_value"))
        if display >= self.EXACT_QUANTITY_THRESHOLD:
            return display, display
        if entry.get("adjustment_value") is not None:
            return display, int(entry["adjustment_value"])
        if entry.get("calculation_value"):
            return display, int(entry["calculation_value"])
        return display, display

    def _resolve_size(self, product: dict, selections: dict):
        """
        Returns (width, height, size_value).
        Standard sizes price on their pre-calculated value when one is set.
        """
        if selections.get("custom_width") is not None:
            width = float(selections["custom_width"])
            height = float(selections["custom_height"])
            return width, height, width * height

        size = _find(product.get("sizes"), selections.get("size_id"))
        width = float(size.get("width"))
        height = float(size.get("height"))
        pre_calculated = size.get("pre_calculated_value")
        return width, height, float(pre_calculated) if pre_calculated else width * height

    def _sides_multiplier(self, paper: dict, sides: str) -> float:
        if sides == "double":
            return paper.get("double_sided_multiplier") or 1.0
        return 1.0

    def _calculate_base_price(self, price_per_sq_in: float, sides_multiplier: float,
                              coating_multiplier: float, size_value: float, quantity: int) -> float:
        """paper × sides × coating × size × quantity."""
        return price_per_sq_in * sides_multiplier * coating_multiplier * size_value * quantity

    def _apply_adjustments(self, base_price: float, broker_discount_pct, modifiers: list,
                           context: dict, notes: list):
        """
        Broker discount first, then base modifiers: those on the base price before
        those on the adjusted base, selection order within each group.
        A modifier flagged excluded_for_brokers is skipped once a broker discount applied.
        Returns (adjusted_base_price, adjustments).
        """
        adjustments = []
        running = base_price

        broker_pct = float(broker_discount_pct or 0.0)
        broker_applied = broker_pct > 0
        if broker_applied:
            amount = base_price * broker_pct / 100.0
            running -= amount
            adjustments.append({
                "name": "Broker Discount",
                "amount": round(-amount, 2),
                "formula": f"-{broker_pct:g}% of base price",
            })

        for addon, entry in self._order_modifiers(modifiers):
            cfg = addon.get("configuration") or {}
            if broker_applied and cfg.get("excluded_for_brokers"):
                notes.append(f"{addon.get('name')} not applied: broker discount already applied.")
                continue
            if PercentageAddonCalculator().resolve_target(cfg.get("applies_to")) == "after_turnaround":
                logger.warning(
                    "Base modifier %s applies to after_turnaround, which is not known before the "
                    "turnaround step. Pricing it on the base price.", addon.get("name"),
                )
                notes.append(f"{addon.get('name')} priced on the base price.")
            calculator = get_addon_calculator(addon.get("pricing_model"))
            line = calculator.calculate(addon, dict(context, adjusted_base_price=running, selection=entry))
            running += line["cost"]
            adjustments.append({"name": line["name"], "amount": line["cost"], "formula": line["formula"]})

        return running, adjustments

    def _order_modifiers(self, modifiers: list) -> list:
        """Modifiers on the base price run first so the result does not depend on selection order."""
        targets = PercentageAddonCalculator()

        def rank(pair):
            cfg = pair[0].get("configuration") or {}
            return 1 if targets.resolve_target(cfg.get("applies_to")) == "adjusted_base_price" else 0

        return sorted(modifiers, key=rank)

    def _turnaround_multiplier(self, turnaround: dict) -> float:
        multiplier = turnaround.get("price_multiplier")
        if multiplier is None or multiplier <= 0:
            logger.warning("Turnaround %s has no usable multiplier, pricing at 1.0", turnaround.get("name"))
            return 1.0
        return float(multiplier)

    def _apply_turnaround(self, adjusted_base: float, multiplier: float) -> float:
        """adjusted_base × multiplier. The multiplier already includes the base; never add it back."""
        return adjusted_base * multiplier

    def _calculate_addons(self, extras: list, context: dict) -> list:
        """One AddonLine per selected add-on, zero-cost lines kept for display."""
        lines = []
        for addon, entry in extras:
            calculator = get_addon_calculator(addon.get("pricing_model"))
            lines.append(calculator.calculate(addon, dict(context, selection=entry)))
        return lines

    def _turnaround_days(self, turnaround: dict, addons: list) -> int:
        """Slowest day of the tier plus every add-on's extra production days."""
        extra = sum(int(a.get("additional_turnaround_days") or 0) for a in addons)
        return int(turnaround.get("days_max") or 0) + extra


def format_breakdown(quote: dict) -> list:
    """Display lines for a PriceQuote, used by the admin price-test screen."""
    lines = [
        f"Base: ${quote['base_price']:,.2f}",
        f"  ({quote['size_value']:g} sq in × {quote['calculation_quantity']:,} qty × "
        f"{quote['sides_multiplier']:g}x sides × {quote['coating_multiplier']:g}x coating)",
    ]
    for adj in quote.get("adjustments", []):
        sign = "+" if adj["amount"] >= 0 else "-"
        lines.append(f"{adj['name']}: {sign}${abs(adj['amount']):,.2f} ({adj['formula']})")
    if quote.get("adjustments"):
        lines.append(f"Adjusted base: ${quote['adjusted_base_price']:,.2f}")
    lines.append(
        f"Turnaround: {quote['turnaround']} ({quote['turnaround_multiplier']:g}x) "
        f"→ ${quote['after_turnaround']:,.2f}"
    )
    for line in quote.get("addons", []):
        lines.append(f"  {line['name']}: ${line['cost']:,.2f} ({line['formula']})")
    if quote.get("addons"):
        lines.append(f"Add-ons: ${quote['addons_total']:,.2f}")
    lines.append(f"Total: ${quote['total_price']:,.2f}")
    lines.append(f"Unit price: ${quote['unit_price']:,.4f}")
    lines.append(f"Weight: {quote['total_weight']:g} lbs")
    lines.append(f"Ships in: {quote['turnaround_days']} business days")
    return lines
