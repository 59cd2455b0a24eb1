"""
CUSTOM add-on pricing: the formulas that don't fit FLAT / PERCENTAGE / PER_UNIT.

The first configuration key that matches picks the formula:

    choices              — named price list (design services); selection["choice"]
    text_paper/card_stock — per paper type {base_fee, per_piece_rate} (folding)
    price_per_bundle     — ceil(quantity / items_per_bundle) × price (banding, shrink wrap)
    price_per_box        — shipping boxes × price (postal delivery)
    tiers                — volume tiers, each {min_quantity, base_fee, per_piece_rate}
    per_score_rate       — base_fee + per_score_rate × scores × quantity (score only)
    (default)            — base_fee + per_piece_rate × quantity
"""

from .base import BaseAddonCalculator
from ..weights import boxes_for_weight


class CustomAddonCalculator(BaseAddonCalculator):

    DEFAULT_ITEMS_PER_BUNDLE = 100

    def calculate(self, addon: dict, context: dict) -> dict:
        cfg = self.config(addon)
        quantity = self.parse_int(context.get("quantity"))
        selection = context.get("selection") or {}

        if "choices" in cfg:
            return self._price_choice(addon, cfg, selection)
        if "text_paper" in cfg or "card_stock" in cfg:
            return self._price_by_paper_type(addon, cfg, quantity, context.get("paper_type"))
        if "price_per_bundle" in cfg:
            return self._price_bundles(addon, cfg, quantity, selection)
        if "price_per_box" in cfg:
            return self._price_boxes(addon, cfg, context.get("total_weight", 0.0))
        if cfg.get("tiers"):
            return self._price_tiered(addon, cfg, quantity)
        if "per_score_rate" in cfg:
            return self._price_scores(addon, cfg, quantity, selection)

        base_fee = self.parse_number(cfg.get("base_fee"))
        per_piece_rate = self.parse_number(cfg.get("per_piece_rate"))
        cost = self.setup_plus_per_piece(base_fee, per_piece_rate, quantity)
        return self.make_addon_line(
            addon, cost,
            f"{self.money(base_fee)} setup + ${per_piece_rate:g}/pc × {quantity}",
        )

    def _price_choice(self, addon: dict, cfg: dict, selection: dict) -> dict:
        choices = cfg.get("choices") or {}
        choice = selection.get("choice")
        if choice not in choices:
            raise ValueError(
                f"{addon.get('name')}: unknown choice {choice!r}. "
                f"Available: {list(choices.keys())}"
            )
        price = self.parse_number(choices[choice])
        return self.make_addon_line(addon, price, f"{choice}: {self.money(price)}")

    def _price_by_paper_type(self, addon: dict, cfg: dict, quantity: int, paper_type) -> dict:
        key = "text_paper" if paper_type == "text" else "card_stock"
        rates = cfg.get(key) or cfg.get("card_stock") or cfg.get("text_paper") or {}
        base_fee = self.parse_number(rates.get("base_fee"))
        per_piece_rate = self.parse_number(rates.get("per_piece_rate"))
        cost = self.setup_plus_per_piece(base_fee, per_piece_rate, quantity)
        label = "Text paper" if key == "text_paper" else "Card stock"
        return self.make_addon_line(
            addon, cost,
            f"{label}: {self.money(base_fee)} + ${per_piece_rate:g}/pc × {quantity}",
        )

    def _price_bundles(self, addon: dict, cfg: dict, quantity: int, selection: dict) -> dict:
        default_per_bundle = self.parse_int(
            cfg.get("default_items_per_bundle"), default=self.DEFAULT_ITEMS_PER_BUNDLE,
        )
        items_per_bundle = self.parse_int(selection.get("items_per_bundle"), default=default_per_bundle)
        price_per_bundle = self.parse_number(cfg.get("price_per_bundle"))
        bundles = self.bundles_for(quantity, items_per_bundle)
        cost = bundles * price_per_bundle
        return self.make_addon_line(
            addon, cost, f"{bundles} bundles × {self.money(price_per_bundle)}",
        )

    def _price_boxes(self, addon: dict, cfg: dict, total_weight: float) -> dict:
        price_per_box = self.parse_number(cfg.get("price_per_box"))
        boxes = boxes_for_weight(self.parse_number(total_weight))
        cost = boxes * price_per_box
        return self.make_addon_line(addon, cost, f"{boxes} boxes × {self.money(price_per_box)}")

    def _price_tiered(self, addon: dict, cfg: dict, quantity: int) -> dict:
        tiers = sorted(cfg["tiers"], key=lambda t: self.parse_int(t.get("min_quantity")))
        tier = tiers[0]
        for candidate in tiers:
            if quantity >= self.parse_int(candidate.get("min_quantity")):
                tier = candidate
            else:
                break
        base_fee = self.parse_number(tier.get("base_fee"))
        per_piece_rate = self.parse_number(tier.get("per_piece_rate"))
        cost = self.setup_plus_per_piece(base_fee, per_piece_rate, quantity)
        return self.make_addon_line(
            addon, cost,
            f"Tier {self.parse_int(tier.get('min_quantity'))}+: "
            f"{self.money(base_fee)} + ${per_piece_rate:g}/pc × {quantity}",
        )

    def _price_scores(self, addon: dict, cfg: dict, quantity: int, selection: dict) -> dict:
        base_fee = self.parse_number(cfg.get("base_fee"))
        per_score_rate = self.parse_number(cfg.get("per_score_rate"))
        scores = max(self.parse_int(selection.get("scores"), default=1), 1)
        cost = base_fee + per_score_rate * scores * quantity
        return self.make_addon_line(
            addon, cost,
            f"{self.money(base_fee)} + ${per_score_rate:g} × {scores} scores × {quantity}",
        )
