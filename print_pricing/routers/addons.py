from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..calculators.percentage import PercentageAddonCalculator
from ..calculators.registry import has_addon_calculator
from ..database import get_db

router = APIRouter(prefix="/addons", tags=["addons"])

FLAT = models.PricingModel.FLAT
PERCENTAGE = models.PricingModel.PERCENTAGE
PER_UNIT = models.PricingModel.PER_UNIT
CUSTOM = models.PricingModel.CUSTOM

# Default add-ons, prices from the shop's published add-on sheet
DEFAULT_ADDONS = {
    "Digital Proof": {
        "pricing_model": FLAT, "configuration": {"price": 5.00},
        "additional_turnaround_days": 0, "sort_order": 1,
    },
    "Our Tagline": {
        # 5% off the base print price; brokers already have their own discount
        "pricing_model": PERCENTAGE,
        "configuration": {"percentage": -5, "applies_to": "base_price",
                          "modifies_base": True, "excluded_for_brokers": True},
        "additional_turnaround_days": 0, "sort_order": 2,
    },
    "Exact Size": {
        "pricing_model": PERCENTAGE,
        "configuration": {"percentage": 12.5, "applies_to": "adjusted_base_price", "modifies_base": True},
        "additional_turnaround_days": 0, "sort_order": 3,
    },
    "Color Critical": {
        "pricing_model": PERCENTAGE, "configuration": {"percentage": 10, "applies_to": "base_price"},
        "additional_turnaround_days": 1, "sort_order": 4,
    },
    "Perforation": {
        "pricing_model": CUSTOM, "configuration": {"base_fee": 20.00, "per_piece_rate": 0.01},
        "additional_turnaround_days": 1, "sort_order": 5,
    },
    "Score Only": {
        "pricing_model": CUSTOM, "configuration": {"base_fee": 17.00, "per_score_rate": 0.01},
        "additional_turnaround_days": 1, "sort_order": 6,
    },
    "Folding": {
        "pricing_model": CUSTOM,
        "configuration": {
            "text_paper": {"base_fee": 0.17, "per_piece_rate": 0.01},
            "card_stock": {"base_fee": 0.34, "per_piece_rate": 0.02},  # includes the basic score
            "min_size": {"width": 5, "height": 6},
        },
        "additional_turnaround_days": 3, "sort_order": 7,
    },
    "Corner Rounding": {
        "pricing_model": CUSTOM, "configuration": {"base_fee": 20.00, "per_piece_rate": 0.01},
        "additional_turnaround_days": 1, "sort_order": 8,
    },
    "Variable Data": {
        "pricing_model": CUSTOM, "configuration": {"base_fee": 60.00, "per_piece_rate": 0.02},
        "additional_turnaround_days": 1, "sort_order": 9,
    },
    "Design Services": {
        "pricing_model": CUSTOM,
        "configuration": {"choices": {
            "upload_artwork": 0.00,
            "standard_one_side": 90.00,
            "standard_two_sides": 135.00,
            "rush_one_side": 160.00,
            "rush_two_sides": 240.00,
            "minor_changes": 22.50,
            "major_changes": 45.00,
        }},
        "additional_turnaround_days": 0, "sort_order": 10,
    },
    "Banding": {
        "pricing_model": CUSTOM,
        "configuration": {"price_per_bundle": 0.75, "default_items_per_bundle": 100},
        "additional_turnaround_days": 1, "sort_order": 11,
    },
    "Shrink Wrapping": {
        "pricing_model": CUSTOM,
        "configuration": {"price_per_bundle": 0.30, "default_items_per_bundle": 100},
        "additional_turnaround_days": 1, "sort_order": 12,
    },
    "QR Code": {
        "pricing_model": FLAT, "configuration": {"price": 5.00},
        "additional_turnaround_days": 0, "sort_order": 13,
    },
    "Postal Delivery (DDU)": {
        "pricing_model": CUSTOM, "configuration": {"price_per_box": 30.00},
        "additional_turnaround_days": 1, "sort_order": 14,
    },
    "EDDM Process & Postage": {
        "pricing_model": CUSTOM, "configuration": {"base_fee": 50.00, "per_piece_rate": 0.239},
        "additional_turnaround_days": 2, "sort_order": 15,
    },
    "Wafer Seal": {
        "pricing_model": PER_UNIT, "configuration": {"price_per_unit": 0.05, "unit_type": "piece"},
        "additional_turnaround_days": 1, "sort_order": 16,
    },
    "Hole Drilling": {
        "pricing_model": PER_UNIT,
        "configuration": {"setup_fee": 20.00, "price_per_unit": 0.02, "unit_type": "hole"},
        "additional_turnaround_days": 1, "sort_order": 17,
    },
}


def check_modifier_config(configuration) -> None:
    """Base modifiers run before the turnaround step, so they can't target after_turnaround."""
    cfg = configuration or {}
    if cfg.get("modifies_base") and \
            PercentageAddonCalculator().resolve_target(cfg.get("applies_to")) == "after_turnaround":
        raise HTTPException(
            status_code=422,
            detail="A base modifier must apply to base_price or adjusted_base_price, not after_turnaround",
        )


def seed_addons(db: Session) -> int:
    seeded = 0
    for name, data in DEFAULT_ADDONS.items():
        existing = db.query(models.AddOn).filter(models.AddOn.name == name).first()
        if not existing:
            db.add(models.AddOn(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    """Seed default add-ons. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_addons(db)}


@router.get("/", response_model=List[schemas.AddOn])
def list_addons(db: Session = Depends(get_db)):
    return db.query(models.AddOn).order_by(models.AddOn.sort_order).all()


@router.post("/", response_model=schemas.AddOn)
def create_addon(addon: schemas.AddOnCreate, db: Session = Depends(get_db)):
    if not has_addon_calculator(addon.pricing_model):
        raise HTTPException(status_code=422, detail=f"Unsupported pricing model: {addon.pricing_model}")
    check_modifier_config(addon.configuration)
    if db.query(models.AddOn).filter(models.AddOn.name == addon.name).first():
        raise HTTPException(status_code=409, detail="Add-on already exists")
    db_addon = models.AddOn(**addon.model_dump())
    db.add(db_addon)
    db.commit()
    db.refresh(db_addon)
    return db_addon


@router.patch("/{addon_id}", response_model=schemas.AddOn)
def update_addon(addon_id: int, update: schemas.AddOnUpdate, db: Session = Depends(get_db)):
    addon = db.query(models.AddOn).filter(models.AddOn.id == addon_id).first()
    if not addon:
        raise HTTPException(status_code=404, detail="Add-on not found")
    data = update.model_dump(exclude_unset=True)
    if "configuration" in data:
        check_modifier_config(data["configuration"])
    for field, value in data.items():
        setattr(addon, field, value)
    db.commit()
    db.refresh(addon)
    return addon
