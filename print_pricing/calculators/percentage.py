from .base import BaseAddonCalculator


class PercentageAddonCalculator(BaseAddonCalculator):
    """
    Percentage of a running price.

    configuration:
        percentage   — e.g. 10 for 10%, negative for a discount
        applies_to   — "base_price" (default) | "adjusted_base_price" | "after_turnaround"
        modifies_base — True when the add-on changes the base before turnaround
    """

    APPLIES_TO = {
        "base_price": "base_price",
        "base_paper_print_price": "base_price",
        "adjusted_base_price": "adjusted_base_price",
        "after_turnaround": "after_turnaround",
        "total": "after_turnaround",
    }

    def calculate(self, addon: dict, context: dict) -> dict:
        cfg = self.config(addon)
        percentage = self.parse_number(cfg.get("percentage"))
        target = self.resolve_target(cfg.get("applies_to"))
        amount = self.parse_number(context.get(target))
        cost = amount * percentage / 100.0
        formula = f"{percentage:g}% of {target.replace('_', ' ')} ({self.money(amount)})"
        return self.make_addon_line(addon, cost, formula)

    def resolve_target(self, applies_to) -> str:
        return self.APPLIES_TO.get(str(applies_to or "base_price"), "base_price")
