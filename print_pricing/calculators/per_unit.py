from .base import BaseAddonCalculator


class PerUnitAddonCalculator(BaseAddonCalculator):
    """Optional setup fee plus a price per unit. Units default to the order quantity."""

    def calculate(self, addon: dict, context: dict) -> dict:
        cfg = self.config(addon)
        setup_fee = self.parse_number(cfg.get("setup_fee"))
        price_per_unit = self.parse_number(cfg.get("price_per_unit"))
        selection = context.get("selection") or {}
        units = self.parse_int(selection.get("units"), default=context.get("quantity", 0))
        unit_type = cfg.get("unit_type", "piece")

        cost = setup_fee + price_per_unit * units
        if setup_fee > 0:
            formula = f"{self.money(setup_fee)} setup + ${price_per_unit:g} × {units} {unit_type}s"
        else:
            formula = f"${price_per_unit:g} × {units} {unit_type}s"
        return self.make_addon_line(addon, cost, formula)
