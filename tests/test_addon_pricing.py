"""
Add-on pricing tests — one calculator per pricing model, plus the registry.

Tests:
1-2.   FLAT
3-5.   PERCENTAGE — applies_to targets, discounts
6-7.   PER_UNIT — setup fee, units default to quantity
8-17.  CUSTOM — default formula across quantities, tiers, bundles, boxes,
       choices, scores, paper-type rates
18-22. Registry lookups

No database. Calculators are pure math on dicts.
"""

import pytest

from print_pricing.calculators.flat import FlatAddonCalculator
from print_pricing.calculators.percentage import PercentageAddonCalculator
from print_pricing.calculators.per_unit import PerUnitAddonCalculator
from print_pricing.calculators.custom import CustomAddonCalculator
from print_pricing.calculators.registry import (
    get_addon_calculator, has_addon_calculator, list_pricing_models,
)
from print_pricing.models import PricingModel


# --- Test fixtures ---

def _addon(pricing_model, configuration, name="Test Add-on", addon_id=1):
    return {
        "id": addon_id,
        "name": name,
        "pricing_model": pricing_model,
        "configuration": configuration,
        "additional_turnaround_days": 0,
    }


def _context(quantity=1000, base_price=200.0, adjusted=None, after=None,
             paper_type="cardstock", total_weight=50.0, selection=None):
    adjusted = base_price if adjusted is None else adjusted
    return {
        "quantity": quantity,
        "base_price": base_price,
        "adjusted_base_price": adjusted,
        "after_turnaround": adjusted if after is None else after,
        "paper_type": paper_type,
        "total_weight": total_weight,
        "selection": selection or {},
    }


# ============================================================
# FLAT
# ============================================================

def test_flat_fee_ignores_quantity():
    calc = FlatAddonCalculator()
    addon = _addon("FLAT", {"price": 5.00}, name="Digital Proof")
    small = calc.calculate(addon, _context(quantity=100))
    large = calc.calculate(addon, _context(quantity=50000))
    assert small["cost"] == 5.00
    assert large["cost"] == 5.00
    assert small["name"] == "Digital Proof"


def test_flat_line_shape():
    line = FlatAddonCalculator().calculate(_addon("FLAT", {"price": 12.5}, addon_id=7), _context())
    assert set(line.keys()) == {"addon_id", "name", "pricing_model", "cost", "formula"}
    assert line["addon_id"] == 7
    assert "$12.50" in line["formula"]


# ============================================================
# PERCENTAGE
# ============================================================

def test_percentage_of_base_price():
    calc = PercentageAddonCalculator()
    addon = _addon("PERCENTAGE", {"percentage": 10, "applies_to": "base_price"})
    line = calc.calculate(addon, _context(base_price=200.0, adjusted=150.0, after=300.0))
    assert line["cost"] == 20.00


def test_percentage_targets():
    calc = PercentageAddonCalculator()
    ctx = _context(base_price=200.0, adjusted=150.0, after=300.0)
    adjusted = calc.calculate(_addon("PERCENTAGE", {"percentage": 10, "applies_to": "adjusted_base_price"}), ctx)
    after = calc.calculate(_addon("PERCENTAGE", {"percentage": 10, "applies_to": "after_turnaround"}), ctx)
    total_alias = calc.calculate(_addon("PERCENTAGE", {"percentage": 10, "applies_to": "total"}), ctx)
    default = calc.calculate(_addon("PERCENTAGE", {"percentage": 10}), ctx)
    assert adjusted["cost"] == 15.00
    assert after["cost"] == 30.00
    assert total_alias["cost"] == 30.00
    assert default["cost"] == 20.00


def test_percentage_discount_is_negative():
    calc = PercentageAddonCalculator()
    line = calc.calculate(_addon("PERCENTAGE", {"percentage": -5, "applies_to": "base_price"}),
                          _context(base_price=200.0))
    assert line["cost"] == -10.00


# ============================================================
# PER_UNIT
# ============================================================

def test_per_unit_with_setup_fee():
    calc = PerUnitAddonCalculator()
    addon = _addon("PER_UNIT", {"setup_fee": 20.0, "price_per_unit": 0.02, "unit_type": "hole"})
    line = calc.calculate(addon, _context(quantity=1000, selection={"units": 3000}))
    assert line["cost"] == pytest.approx(80.00)
    assert "3000 holes" in line["formula"]


def test_per_unit_units_default_to_quantity():
    calc = PerUnitAddonCalculator()
    addon = _addon("PER_UNIT", {"price_per_unit": 0.05})
    line = calc.calculate(addon, _context(quantity=1000))
    assert line["cost"] == pytest.approx(50.00)


# ============================================================
# CUSTOM
# ============================================================

@pytest.mark.parametrize("quantity", [100, 1000, 5000, 25000])
def test_custom_default_is_base_fee_plus_per_piece(quantity):
    """cost = base_fee + per_piece_rate × quantity at every quantity."""
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"base_fee": 20.0, "per_piece_rate": 0.01}, name="Perforation")
    line = calc.calculate(addon, _context(quantity=quantity))
    assert line["cost"] == pytest.approx(round(20.0 + 0.01 * quantity, 2))


def test_custom_eddm_rate():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"base_fee": 50.0, "per_piece_rate": 0.239})
    line = calc.calculate(addon, _context(quantity=5000))
    assert line["cost"] == pytest.approx(1245.00)


def test_custom_tiers_pick_highest_reached():
    calc = CustomAddonCalculator()
    # Deliberately out of order; tiers are sorted by min_quantity
    addon = _addon("CUSTOM", {"tiers": [
        {"min_quantity": 5000, "base_fee": 10.0, "per_piece_rate": 0.01},
        {"min_quantity": 0, "base_fee": 20.0, "per_piece_rate": 0.02},
        {"min_quantity": 1000, "base_fee": 15.0, "per_piece_rate": 0.015},
    ]})
    assert calc.calculate(addon, _context(quantity=500))["cost"] == pytest.approx(30.00)
    assert calc.calculate(addon, _context(quantity=1000))["cost"] == pytest.approx(30.00)
    assert calc.calculate(addon, _context(quantity=10000))["cost"] == pytest.approx(110.00)


def test_custom_tiers_below_first_tier_use_first():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"tiers": [
        {"min_quantity": 100, "base_fee": 20.0, "per_piece_rate": 0.02},
        {"min_quantity": 1000, "base_fee": 15.0, "per_piece_rate": 0.015},
    ]})
    assert calc.calculate(addon, _context(quantity=50))["cost"] == pytest.approx(21.00)


def test_custom_bundles_round_up():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"price_per_bundle": 0.75, "default_items_per_bundle": 100}, name="Banding")
    line = calc.calculate(addon, _context(quantity=1050))
    assert line["cost"] == pytest.approx(8.25)  # 11 bundles
    assert line["formula"].startswith("11 bundles")


def test_custom_bundles_customer_bundle_size():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"price_per_bundle": 0.75, "default_items_per_bundle": 100})
    line = calc.calculate(addon, _context(quantity=1050, selection={"items_per_bundle": 250}))
    assert line["cost"] == pytest.approx(3.75)  # 5 bundles


def test_custom_boxes_from_weight():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"price_per_box": 30.0}, name="Postal Delivery (DDU)")
    assert calc.calculate(addon, _context(total_weight=84.0))["cost"] == pytest.approx(90.00)
    assert calc.calculate(addon, _context(total_weight=72.0))["cost"] == pytest.approx(60.00)
    assert calc.calculate(addon, _context(total_weight=0.0))["cost"] == pytest.approx(30.00)


def test_custom_choices():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"choices": {"upload_artwork": 0.0, "standard_two_sides": 135.0}})
    line = calc.calculate(addon, _context(selection={"choice": "standard_two_sides"}))
    assert line["cost"] == 135.00
    free = calc.calculate(addon, _context(selection={"choice": "upload_artwork"}))
    assert free["cost"] == 0.0


def test_custom_unknown_choice_raises():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"choices": {"upload_artwork": 0.0}}, name="Design Services")
    with pytest.raises(ValueError, match="Design Services"):
        calc.calculate(addon, _context(selection={"choice": "logo_redesign"}))


def test_custom_scores():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {"base_fee": 17.0, "per_score_rate": 0.01}, name="Score Only")
    two = calc.calculate(addon, _context(quantity=1000, selection={"scores": 2}))
    default = calc.calculate(addon, _context(quantity=1000))
    assert two["cost"] == pytest.approx(37.00)
    assert default["cost"] == pytest.approx(27.00)


def test_custom_paper_type_rates():
    calc = CustomAddonCalculator()
    addon = _addon("CUSTOM", {
        "text_paper": {"base_fee": 0.17, "per_piece_rate": 0.01},
        "card_stock": {"base_fee": 0.34, "per_piece_rate": 0.02},
    }, name="Folding")
    text = calc.calculate(addon, _context(quantity=1000, paper_type="text"))
    card = calc.calculate(addon, _context(quantity=1000, paper_type="cardstock"))
    specialty = calc.calculate(addon, _context(quantity=1000, paper_type="specialty"))
    assert text["cost"] == pytest.approx(10.17)
    assert card["cost"] == pytest.approx(20.34)
    assert specialty["cost"] == card["cost"]


# ============================================================
# REGISTRY
# ============================================================

def test_registry_returns_calculators():
    assert isinstance(get_addon_calculator("FLAT"), FlatAddonCalculator)
    assert isinstance(get_addon_calculator("PERCENTAGE"), PercentageAddonCalculator)
    assert isinstance(get_addon_calculator("PER_UNIT"), PerUnitAddonCalculator)
    assert isinstance(get_addon_calculator("CUSTOM"), CustomAddonCalculator)


def test_registry_accepts_enum_and_lowercase():
    assert isinstance(get_addon_calculator(PricingModel.CUSTOM), CustomAddonCalculator)
    assert isinstance(get_addon_calculator("flat"), FlatAddonCalculator)


def test_registry_legacy_fixed_fee():
    assert isinstance(get_addon_calculator("FIXED_FEE"), FlatAddonCalculator)


def test_registry_unknown_model_raises():
    with pytest.raises(ValueError, match="No calculator registered"):
        get_addon_calculator("BOGUS")
    assert not has_addon_calculator("BOGUS")
    assert not has_addon_calculator(None)


def test_list_pricing_models():
    models = list_pricing_models()
    for name in ("FLAT", "PERCENTAGE", "PER_UNIT", "CUSTOM"):
        assert name in models
