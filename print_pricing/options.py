"""
Option Set Builder: the valid choices for a product and the checks that
keep a customer's selections inside them.

Works on the plain product configuration dict (see catalog.product_to_config),
never on ORM rows.
"""

import logging
import math

from .config import settings

logger = logging.getLogger(__name__)

SIDES = ("single", "double")


def _find(items: list, item_id):
    """Look up a catalog entry by id. Ids compare as strings since JSON may send either form."""
    if item_id is None:
        return None
    for item in items or []:
        if str(item.get("id")) == str(item_id):
            return item
    return None


def _is_increment(value: float, increment: float) -> bool:
    steps = value / increment
    return abs(steps - round(steps)) < 1e-9


class OptionSetBuilder:
    """
    Builds the valid option set for a product and validates selections against it.
    """

    def build(self, product: dict) -> dict:
        """
        Returns:
            {
                product_id, product_name,
                quantities: [...], custom_quantity: {min, max} | None,
                sizes: [...], custom_size: {...} | None,
                paper_stocks: [{..., coatings: [...], sides: [...]}],
                turnarounds: [...],
                addons: [...],
                defaults: {quantity, size, paper_stock, coating, sides, turnaround, addons},
            }
        """
        paper_stocks = []
        for stock in product.get("paper_stocks", []):
            paper_stocks.append({
                "id": stock.get("id"),
                "name": stock.get("name"),
                "paper_type": stock.get("paper_type"),
                "coatings": [
                    {"id": c.get("id"), "name": c.get("name")} for c in stock.get("coatings", [])
                ],
                "sides": [
                    {"id": "single", "multiplier": 1.0},
                    {"id": "double", "multiplier": stock.get("double_sided_multiplier") or 1.0},
                ],
            })

        return {
            "product_id": product.get("id"),
            "product_name": product.get("name"),
            "quantities": [
                {"id": q.get("id"), "value": q.get("display_value")}
                for q in product.get("quantities", [])
            ],
            "custom_quantity": product.get("custom_quantity"),
            "sizes": [
                {"id": s.get("id"), "name": s.get("name"), "width": s.get("width"), "height": s.get("height")}
                for s in product.get("sizes", [])
            ],
            "custom_size": product.get("custom_size"),
            "paper_stocks": paper_stocks,
            "turnarounds": [
                {
                    "id": t.get("id"),
                    "name": t.get("name"),
                    "days_min": t.get("days_min", 0),
                    "days_max": t.get("days_max", 0),
                    "price_multiplier": t.get("price_multiplier", 1.0),
                    "restricted_coatings": t.get("restricted_coatings") or [],
                }
                for t in product.get("turnarounds", [])
            ],
            "addons": [
                {
                    "id": a.get("id"),
                    "name": a.get("name"),
                    "pricing_model": a.get("pricing_model"),
                    "additional_turnaround_days": a.get("additional_turnaround_days", 0),
                    "choices": sorted((a.get("configuration") or {}).get("choices", {}).keys()),
                }
                for a in product.get("addons", [])
            ],
            "defaults": self.resolve_defaults(product),
        }

    def resolve_defaults(self, product: dict) -> dict:
        """Explicit product defaults, falling back to the first entry of each list."""
        explicit = product.get("defaults") or {}

        def first_id(key):
            items = product.get(key) or []
            return items[0].get("id") if items else None

        paper_id = explicit.get("paper_stock", first_id("paper_stocks"))
        coating_id = self.default_coating(product, paper_id)

        return {
            "quantity": explicit.get("quantity", first_id("quantities")),
            "size": explicit.get("size", first_id("sizes")),
            "paper_stock": paper_id,
            "coating": coating_id,
            "sides": explicit.get("sides", "single"),
            "turnaround": explicit.get("turnaround", first_id("turnarounds")),
            "addons": list(explicit.get("addons") or []),
        }

    def apply_defaults(self, product: dict, selections: dict) -> dict:
        """Fill selections the customer left out with the product defaults."""
        defaults = self.resolve_defaults(product)
        filled = dict(selections or {})
        if filled.get("quantity_id") is None and filled.get("custom_quantity") is None:
            filled["quantity_id"] = defaults["quantity"]
        if filled.get("size_id") is None and filled.get("custom_width") is None \
                and filled.get("custom_height") is None:
            filled["size_id"] = defaults["size"]
        if filled.get("paper_stock_id") is None:
            filled["paper_stock_id"] = defaults["paper_stock"]
        if filled.get("coating_id") is None:
            filled["coating_id"] = self.default_coating(product, filled["paper_stock_id"])
        filled.setdefault("sides", defaults["sides"])
        if filled.get("turnaround_id") is None:
            filled["turnaround_id"] = defaults["turnaround"]
        if filled.get("addons") is None:
            filled["addons"] = [{"addon_id": a} for a in defaults["addons"]]
        return filled

    def default_coating(self, product: dict, paper_stock_id):
        """
        Coating used when none was picked: the product's default coating if the
        stock carries it, else the stock's first coating.
        """
        paper = _find(product.get("paper_stocks"), paper_stock_id)
        if paper is None:
            return None
        coatings = paper.get("coatings") or []
        explicit = (product.get("defaults") or {}).get("coating")
        if _find(coatings, explicit) is not None:
            return explicit
        return coatings[0].get("id") if coatings else None

    # --- Validation ---

    def validate(self, product: dict, selections: dict) -> list:
        """
        Check selections against the product's option set.
        Returns a list of error messages; empty means valid.
        """
        errors = []
        errors.extend(self._validate_quantity(product, selections))
        errors.extend(self._validate_size(product, selections))

        paper = _find(product.get("paper_stocks"), selections.get("paper_stock_id"))
        coating = None
        if paper is None:
            errors.append("Paper stock is required" if selections.get("paper_stock_id") is None
                          else f"Invalid paper stock: {selections.get('paper_stock_id')}")
        elif selections.get("coating_id") is not None:
            coating = _find(paper.get("coatings"), selections.get("coating_id"))
            if coating is None:
                errors.append(
                    f"Coating {selections.get('coating_id')} is not available on {paper.get('name')}"
                )

        if selections.get("sides", "single") not in SIDES:
            errors.append('Sides must be either "single" or "double"')

        turnaround = _find(product.get("turnarounds"), selections.get("turnaround_id"))
        if turnaround is None:
            errors.append("Turnaround time is required" if selections.get("turnaround_id") is None
                          else f"Invalid turnaround: {selections.get('turnaround_id')}")
        elif coating is not None and coating.get("name") in (turnaround.get("restricted_coatings") or []):
            errors.append(f"{turnaround.get('name')} turnaround is not available with {coating.get('name')}")

        errors.extend(self._validate_addons(product, selections))
        errors.extend(self._validate_broker_discount(selections.get("broker_discount_pct")))

        if errors:
            logger.info("Rejected selections for product %s: %s", product.get("id"), errors)
        return errors

    def _validate_broker_discount(self, value) -> list:
        if value is None:
            return []
        try:
            value = float(value)
        except (ValueError, TypeError):
            return [f"Broker discount must be a number. Received: {value}"]
        if not 0 <= value <= 100:
            return [f"Broker discount must be between 0 and 100 percent. Received: {value:g}"]
        return []

    def _validate_quantity(self, product: dict, selections: dict) -> list:
        custom = selections.get("custom_quantity")
        if custom is None:
            if _find(product.get("quantities"), selections.get("quantity_id")) is None:
                if selections.get("quantity_id") is None:
                    return ["Quantity is required"]
                return [f"Invalid quantity: {selections.get('quantity_id')}"]
            return []

        bounds = product.get("custom_quantity")
        if bounds is None:
            return ["Custom quantities are not offered for this product"]
        errors = self.validate_custom_quantity(custom)
        if errors:
            return errors
        custom = int(custom)
        lo, hi = bounds.get("min"), bounds.get("max")
        if lo is not None and custom < lo:
            errors.append(f"Quantity must be at least {lo}")
        if hi is not None and custom > hi:
            errors.append(f"Quantity must be at most {hi}")
        return errors

    def validate_custom_quantity(self, value) -> list:
        """Positive, and above the step a whole multiple of it (5000 by default)."""
        step = settings.CUSTOM_QUANTITY_STEP
        try:
            value = int(value)
        except (ValueError, TypeError):
            return [f"Custom quantity must be a whole number. Received: {value}"]
        if value <= 0:
            return ["Custom quantity must be greater than 0"]
        if value > step and value % step != 0:
            lower = (value // step) * step
            upper = math.ceil(value / step) * step
            return [
                f"Custom quantities above {step} must be in increments of {step}. "
                f"Received: {value}. Try {lower:,} or {upper:,}"
            ]
        return []

    def _validate_size(self, product: dict, selections: dict) -> list:
        width, height = selections.get("custom_width"), selections.get("custom_height")
        if width is None and height is None:
            if _find(product.get("sizes"), selections.get("size_id")) is None:
                if selections.get("size_id") is None:
                    return ["Size is required"]
                return [f"Invalid size: {selections.get('size_id')}"]
            return []

        bounds = product.get("custom_size")
        if bounds is None:
            return ["Custom sizes are not offered for this product"]
        if width is None or height is None:
            return ["Custom size requires both width and height"]
        errors = self.validate_custom_size(width, height)
        if errors:
            return errors
        width, height = float(width), float(height)
        for label, value, lo, hi in (
            ("Width", width, bounds.get("min_width"), bounds.get("max_width")),
            ("Height", height, bounds.get("min_height"), bounds.get("max_height")),
        ):
            if lo is not None and value < lo:
                errors.append(f'{label} must be at least {lo:g}"')
            if hi is not None and value > hi:
                errors.append(f'{label} must be at most {hi:g}"')
        return errors

    def validate_custom_size(self, width, height) -> list:
        """Positive, quarter-inch steps."""
        increment = settings.CUSTOM_SIZE_INCREMENT
        errors = []
        for label, value in (("Width", width), ("Height", height)):
            try:
                value = float(value)
            except (ValueError, TypeError):
                errors.append(f"{label} must be a number. Received: {value}")
                continue
            if value <= 0:
                errors.append(f"{label} must be greater than 0")
            elif not _is_increment(value, increment):
                lower = math.floor(value / increment) * increment
                upper = math.ceil(value / increment) * increment
                errors.append(
                    f'{label} must be in {increment:g} inch increments. Try {lower:g}" or {upper:g}"'
                )
        return errors

    def _validate_addons(self, product: dict, selections: dict) -> list:
        errors = []
        selected = selections.get("addons") or []
        seen = set()
        chosen = []
        for entry in selected:
            addon_id = entry.get("addon_id")
            addon = _find(product.get("addons"), addon_id)
            if addon is None:
                errors.append(f"Add-on {addon_id} is not available for this product")
                continue
            if str(addon_id) in seen:
                errors.append(f"{addon.get('name')} selected more than once")
                continue
            seen.add(str(addon_id))
            chosen.append(addon)

            cfg = addon.get("configuration") or {}
            choices = cfg.get("choices")
            if choices is not None and entry.get("choice") not in choices:
                errors.append(
                    f"{addon.get('name')} requires a choice: {', '.join(sorted(choices))}"
                )

            min_size = cfg.get("min_size")
            if min_size:
                width, height = self.selected_dimensions(product, selections)
                if width is not None and not self._fits_min_size(width, height, min_size):
                    errors.append(
                        f"{addon.get('name')} requires a print size of at least "
                        f"{min_size.get('width'):g}x{min_size.get('height'):g}"
                    )

        chosen_names = {a.get("name") for a in chosen}
        chosen_ids = {str(a.get("id")) for a in chosen}
        for addon in chosen:
            for other in (addon.get("configuration") or {}).get("conflicts_with", []):
                if str(other) in chosen_ids or other in chosen_names:
                    errors.append(f"{addon.get('name')} conflicts with {other}")
        return errors

    def _fits_min_size(self, width: float, height: float, min_size: dict) -> bool:
        """Either orientation counts: a 6x5 sheet folds like a 5x6."""
        min_w = min_size.get("width", 0)
        min_h = min_size.get("height", 0)
        return (width >= min_w and height >= min_h) or (width >= min_h and height >= min_w)

    def selected_dimensions(self, product: dict, selections: dict):
        """Physical (width, height) of the selected size, or (None, None)."""
        if selections.get("custom_width") is not None and selections.get("custom_height") is not None:
            try:
                return float(selections["custom_width"]), float(selections["custom_height"])
            except (ValueError, TypeError):
                return None, None
        size = _find(product.get("sizes"), selections.get("size_id"))
        if size is None:
            return None, None
        return float(size.get("width")), float(size.get("height"))
