# Paper weight constants, lb per square inch of a single sheet
# Source: mill data sheets for the stocks the shop runs, checked against scale weights

from .config import settings

PAPER_WEIGHTS = {
    "14pt_c2s_cardstock": 0.0035,
    "16pt_c2s_cardstock": 0.0040,
    "12pt_c1s_cardstock": 0.0030,
    "100lb_gloss_text": 0.0025,
    "100lb_uncoated_text": 0.0028,
    "18pt_premium_cardstock": 0.0055,
    "80lb_gloss_text": 0.0022,
    "13oz_vinyl_banner": 0.0060,
}

# Standard box limit for shipping splits
MAX_BOX_WEIGHT_LBS = 36.0


def paper_weight(stock_key: str) -> float:
    """Weight per square inch for a stock key, or the configured default."""
    return PAPER_WEIGHTS.get(stock_key, settings.DEFAULT_PAPER_WEIGHT_PER_SQ_IN)


def sq_in_from_dimensions(width_in: float, height_in: float) -> float:
    """Square inches of a single piece."""
    return round(width_in * height_in, 4)


def weight_from_dimensions(weight_per_sq_in: float, width_in: float,
                           height_in: float, quantity: int) -> float:
    """
    Total job weight in lbs.

    weight_per_sq_in × width × height × quantity. Uses the physical
    size of the piece, never the pricing size value.
    """
    if weight_per_sq_in is None or weight_per_sq_in <= 0:
        weight_per_sq_in = settings.DEFAULT_PAPER_WEIGHT_PER_SQ_IN
    return round(weight_per_sq_in * width_in * height_in * quantity, 2)


def boxes_for_weight(total_weight_lbs: float, max_box_lbs: float = MAX_BOX_WEIGHT_LBS) -> int:
    """Number of shipping boxes for a job. Always at least one."""
    if total_weight_lbs <= 0:
        return 1
    full, rest = divmod(total_weight_lbs, max_box_lbs)
    return int(full) + (1 if rest > 0 else 0)
