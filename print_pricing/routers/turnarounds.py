from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/turnarounds", tags=["turnarounds"])

# Multiplier is the whole price factor: 1.25 means base × 1.25, not base + base × 1.25
DEFAULT_TURNAROUNDS = {
    "Economy": {"days_min": 5, "days_max": 7, "price_multiplier": 1.0, "sort_order": 1},
    "Standard": {"days_min": 2, "days_max": 3, "price_multiplier": 1.25, "sort_order": 2},
    "Next Day": {"days_min": 1, "days_max": 1, "price_multiplier": 1.75, "sort_order": 3,
                 "restricted_coatings": ["High Gloss UV", "Soft Touch Matte"]},
    "Same Day": {"days_min": 0, "days_max": 0, "price_multiplier": 2.5, "sort_order": 4,
                 "restricted_coatings": ["High Gloss UV", "High Gloss UV One Side", "Soft Touch Matte"]},
}


def seed_turnarounds(db: Session) -> int:
    seeded = 0
    for name, data in DEFAULT_TURNAROUNDS.items():
        existing = db.query(models.TurnaroundTime).filter(models.TurnaroundTime.name == name).first()
        if not existing:
            db.add(models.TurnaroundTime(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    """Seed default turnaround tiers. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_turnarounds(db)}


@router.get("/", response_model=List[schemas.Turnaround])
def list_turnarounds(db: Session = Depends(get_db)):
    return db.query(models.TurnaroundTime).order_by(models.TurnaroundTime.sort_order).all()


@router.post("/", response_model=schemas.Turnaround)
def create_turnaround(turnaround: schemas.TurnaroundCreate, db: Session = Depends(get_db)):
    if turnaround.price_multiplier <= 0:
        raise HTTPException(status_code=422, detail="price_multiplier must be greater than 0")
    if db.query(models.TurnaroundTime).filter(models.TurnaroundTime.name == turnaround.name).first():
        raise HTTPException(status_code=409, detail="Turnaround already exists")
    db_turnaround = models.TurnaroundTime(**turnaround.model_dump())
    db.add(db_turnaround)
    db.commit()
    db.refresh(db_turnaround)
    return db_turnaround
