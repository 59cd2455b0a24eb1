from .base import BaseAddonCalculator


class FlatAddonCalculator(BaseAddonCalculator):
    """Fixed fee regardless of quantity: Digital Proof, QR Code."""

    def calculate(self, addon: dict, context: dict) -> dict:
        price = self.parse_number(self.config(addon).get("price"))
        return self.make_addon_line(addon, price, f"Flat fee: {self.money(price)}")
