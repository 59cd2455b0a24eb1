"""
ORM → product configuration dict.

The pricing engine and option builder only see plain dicts, so the same
math runs against catalog rows, API payloads, and test fixtures.
"""

from . import models


def _enum_value(value):
    return getattr(value, "value", value)


def paper_stock_to_dict(stock: models.PaperStock) -> dict:
    return {
        "id": stock.id,
        "name": stock.name,
        "paper_type": _enum_value(stock.paper_type),
        "price_per_sq_in": stock.price_per_sq_in,
        "weight_per_sq_in": stock.weight_per_sq_in,
        "double_sided_multiplier": stock.double_sided_multiplier or 1.0,
        "coatings": [
            {"id": c.id, "name": c.name, "price_multiplier": c.price_multiplier or 1.0}
            for c in stock.coatings
        ],
    }


def addon_to_dict(addon: models.AddOn) -> dict:
    return {
        "id": addon.id,
        "name": addon.name,
        "pricing_model": _enum_value(addon.pricing_model),
        "configuration": dict(addon.configuration or {}),
        "additional_turnaround_days": addon.additional_turnaround_days or 0,
    }


def turnaround_to_dict(turnaround: models.TurnaroundTime) -> dict:
    return {
        "id": turnaround.id,
        "name": turnaround.name,
        "days_min": turnaround.days_min or 0,
        "days_max": turnaround.days_max or 0,
        "price_multiplier": turnaround.price_multiplier if turnaround.price_multiplier is not None else 1.0,
        "restricted_coatings": list(turnaround.restricted_coatings or []),
    }


def product_to_config(product: models.Product) -> dict:
    """Flatten a Product and its catalog relations into the engine's config dict."""
    custom_quantity = None
    if product.custom_quantity_min is not None or product.custom_quantity_max is not None:
        custom_quantity = {"min": product.custom_quantity_min, "max": product.custom_quantity_max}

    custom_size = None
    if any(v is not None for v in (product.custom_width_min, product.custom_width_max,
                                   product.custom_height_min, product.custom_height_max)):
        custom_size = {
            "min_width": product.custom_width_min,
            "max_width": product.custom_width_max,
            "min_height": product.custom_height_min,
            "max_height": product.custom_height_max,
        }

    return {
        "id": product.id,
        "name": product.name,
        "quantities": [
            {
                "id": q.id,
                "display_value": q.display_value,
                "calculation_value": q.calculation_value,
                "adjustment_value": q.adjustment_value,
            }
            for q in product.quantities
        ],
        "custom_quantity": custom_quantity,
        "sizes": [
            {
                "id": s.id,
                "name": s.name,
                "width": s.width,
                "height": s.height,
                "pre_calculated_value": s.pre_calculated_value,
            }
            for s in product.sizes
        ],
        "custom_size": custom_size,
        "paper_stocks": [paper_stock_to_dict(p) for p in product.paper_stocks if p.is_active],
        "turnarounds": [turnaround_to_dict(t) for t in product.turnarounds if t.is_active],
        "addons": [addon_to_dict(a) for a in product.addons if a.is_active],
        "defaults": dict(product.defaults_json or {}),
    }
