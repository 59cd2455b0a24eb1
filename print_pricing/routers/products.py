from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..catalog import product_to_config
from ..database import get_db
from ..options import OptionSetBuilder
from ..pricing_engine import PricingEngine

router = APIRouter(prefix="/products", tags=["products"])


def get_product_or_404(product_id: int, db: Session) -> models.Product:
    product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _load_by_ids(db: Session, model, ids: List[int], label: str) -> list:
    if not ids:
        return []
    rows = db.query(model).filter(model.id.in_(ids)).all()
    found = {r.id for r in rows}
    missing = [i for i in ids if i not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"{label} not found: {missing}")
    by_id = {r.id: r for r in rows}
    return [by_id[i] for i in ids]


@router.post("/", response_model=schemas.Product)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    if db.query(models.Product).filter(models.Product.name == product.name).first():
        raise HTTPException(status_code=409, detail="Product already exists")

    data = product.model_dump(exclude={
        "sizes", "quantities", "paper_stock_ids", "addon_ids", "turnaround_ids", "defaults",
    })
    db_product = models.Product(**data, defaults_json=product.defaults)
    db_product.sizes = [models.ProductSize(**s.model_dump()) for s in product.sizes]
    db_product.quantities = [models.ProductQuantity(**q.model_dump()) for q in product.quantities]
    db_product.paper_stocks = _load_by_ids(db, models.PaperStock, product.paper_stock_ids, "Paper stocks")
    db_product.addons = _load_by_ids(db, models.AddOn, product.addon_ids, "Add-ons")
    db_product.turnarounds = _load_by_ids(db, models.TurnaroundTime, product.turnaround_ids, "Turnarounds")

    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


@router.get("/", response_model=List[schemas.Product])
def list_products(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return db.query(models.Product).order_by(models.Product.name).offset(skip).limit(limit).all()


@router.get("/{product_id}", response_model=schemas.Product)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_product_or_404(product_id, db)


@router.get("/{product_id}/options")
def get_product_options(product_id: int, db: Session = Depends(get_db)):
    """Valid option set for the storefront configurator, with a price per turnaround for the defaults."""
    config = product_to_config(get_product_or_404(product_id, db))
    option_set = OptionSetBuilder().build(config)
    option_set["turnaround_prices"] = PricingEngine().price_turnaround_options(config, {})
    return option_set
