from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db
from ..weights import paper_weight

router = APIRouter(prefix="/paper-stocks", tags=["paper-stocks"])

# Default stocks. Price per sq in includes the shop's markup over vendor cost
DEFAULT_PAPER_STOCKS = {
    "14pt C2S Cardstock": {
        "paper_type": models.PaperType.CARDSTOCK, "price_per_sq_in": 0.00145833333,
        "weight_per_sq_in": paper_weight("14pt_c2s_cardstock"), "double_sided_multiplier": 1.0,
        "sort_order": 1, "coatings": [("High Gloss UV", 1.0), ("Matte Aqueous", 1.0), ("No Coating", 1.0)],
    },
    "16pt C2S Cardstock": {
        "paper_type": models.PaperType.CARDSTOCK, "price_per_sq_in": 0.0016,
        "weight_per_sq_in": paper_weight("16pt_c2s_cardstock"), "double_sided_multiplier": 1.0,
        "sort_order": 2, "coatings": [("High Gloss UV", 1.0), ("Matte Aqueous", 1.0), ("No Coating", 1.0)],
    },
    "12pt C1S Cardstock": {
        "paper_type": models.PaperType.CARDSTOCK, "price_per_sq_in": 0.0013,
        "weight_per_sq_in": paper_weight("12pt_c1s_cardstock"), "double_sided_multiplier": 1.0,
        "sort_order": 3, "coatings": [("High Gloss UV One Side", 1.0), ("No Coating", 1.0)],
    },
    "100lb Gloss Text": {
        "paper_type": models.PaperType.TEXT, "price_per_sq_in": 0.002,
        "weight_per_sq_in": paper_weight("100lb_gloss_text"), "double_sided_multiplier": 1.75,
        "sort_order": 4, "coatings": [("Gloss Aqueous", 1.0), ("No Coating", 1.0)],
    },
    "100lb Uncoated Text": {
        "paper_type": models.PaperType.TEXT, "price_per_sq_in": 0.0019,
        "weight_per_sq_in": paper_weight("100lb_uncoated_text"), "double_sided_multiplier": 1.75,
        "sort_order": 5, "coatings": [("No Coating", 1.0)],
    },
    "18pt Premium Cardstock": {
        "paper_type": models.PaperType.SPECIALTY, "price_per_sq_in": 0.0024,
        "weight_per_sq_in": paper_weight("18pt_premium_cardstock"), "double_sided_multiplier": 1.0,
        "sort_order": 6, "coatings": [("Soft Touch Matte", 1.15), ("No Coating", 1.0)],
    },
}


def seed_paper_stocks(db: Session) -> int:
    """Add any default stock that isn't already in the catalog. Returns rows added."""
    seeded = 0
    for name, data in DEFAULT_PAPER_STOCKS.items():
        existing = db.query(models.PaperStock).filter(models.PaperStock.name == name).first()
        if existing:
            continue
        fields = {k: v for k, v in data.items() if k != "coatings"}
        stock = models.PaperStock(name=name, **fields)
        stock.coatings = [
            models.Coating(name=c_name, price_multiplier=mult, sort_order=i)
            for i, (c_name, mult) in enumerate(data["coatings"])
        ]
        db.add(stock)
        seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    """Seed default paper stocks. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_paper_stocks(db)}


@router.get("/", response_model=List[schemas.PaperStock])
def list_paper_stocks(db: Session = Depends(get_db)):
    return db.query(models.PaperStock).order_by(models.PaperStock.sort_order).all()


@router.post("/", response_model=schemas.PaperStock)
def create_paper_stock(stock: schemas.PaperStockCreate, db: Session = Depends(get_db)):
    if db.query(models.PaperStock).filter(models.PaperStock.name == stock.name).first():
        raise HTTPException(status_code=409, detail="Paper stock already exists")
    data = stock.model_dump(exclude={"coatings"})
    db_stock = models.PaperStock(**data)
    db_stock.coatings = [models.Coating(**c.model_dump()) for c in stock.coatings]
    db.add(db_stock)
    db.commit()
    db.refresh(db_stock)
    return db_stock


@router.patch("/{stock_id}", response_model=schemas.PaperStock)
def update_paper_stock(stock_id: int, update: schemas.PaperStockUpdate, db: Session = Depends(get_db)):
    stock = db.query(models.PaperStock).filter(models.PaperStock.id == stock_id).first()
    if not stock:
        raise HTTPException(status_code=404, detail="Paper stock not found")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(stock, field, value)
    db.commit()
    db.refresh(stock)
    return stock
