from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import paper_stocks, turnarounds, addons, products, pricing

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("print_pricing")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Print Pricing API",
    description=f"Print product pricing and option sets for {settings.COMPANY_NAME}",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(paper_stocks.router, prefix="/api")
app.include_router(turnarounds.router, prefix="/api")
app.include_router(addons.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "print-pricing"}


@app.on_event("startup")
def auto_seed():
    """Auto-seed paper stocks, turnaround tiers and add-ons on first run."""
    if not settings.AUTO_SEED:
        return
    from .database import SessionLocal
    db = SessionLocal()
    try:
        counts = {
            "paper_stocks": paper_stocks.seed_paper_stocks(db),
            "turnarounds": turnarounds.seed_turnarounds(db),
            "addons": addons.seed_addons(db),
        }
        if any(counts.values()):
            logger.info(f"Seeded catalog: {counts}")
    finally:
        db.close()
