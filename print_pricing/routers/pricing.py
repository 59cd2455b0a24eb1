import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from .. import schemas
from ..catalog import product_to_config
from ..database import get_db
from ..pricing_engine import PricingEngine, InvalidSelectionError, format_breakdown
from .products import get_product_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/calculate")
def calculate_price(request: schemas.PriceRequest, db: Session = Depends(get_db)):
    """
    Price a product configuration.

    Either product_id (catalog product) or product (inline config, used by the
    admin price-test step) must be given.
    """
    if request.product is not None:
        config = request.product
    elif request.product_id is not None:
        config = product_to_config(get_product_or_404(request.product_id, db))
    else:
        raise HTTPException(status_code=422, detail="product_id or product is required")

    selections = request.selections.model_dump(exclude_none=True)
    try:
        quote = PricingEngine().calculate(config, selections)
    except InvalidSelectionError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except ValueError as e:
        # Unknown pricing model or choice on a catalog row
        logger.warning("Pricing failed for product %s: %s", config.get("id"), e)
        raise HTTPException(status_code=422, detail={"errors": [str(e)]})
    except (TypeError, KeyError) as e:
        # Inline product config missing a size or quantity field
        logger.warning("Malformed product config for product %s: %r", config.get("id"), e)
        raise HTTPException(status_code=422, detail={"errors": [f"Invalid product configuration: {e!r}"]})

    quote["breakdown"] = format_breakdown(quote)
    return quote
