from pydantic import BaseModel
from typing import Optional, List, Any, Dict
from datetime import datetime
from .models import PricingModel, PaperType


class CoatingBase(BaseModel):
    name: str
    price_multiplier: float = 1.0
    sort_order: int = 0

class Coating(CoatingBase):
    id: int
    class Config:
        from_attributes = True

class PaperStockBase(BaseModel):
    name: str
    paper_type: PaperType = PaperType.CARDSTOCK
    price_per_sq_in: float
    weight_per_sq_in: Optional[float] = None
    double_sided_multiplier: float = 1.0
    is_active: bool = True
    sort_order: int = 0

class PaperStockCreate(PaperStockBase):
    coatings: List[CoatingBase] = []

class PaperStockUpdate(BaseModel):
    price_per_sq_in: Optional[float] = None
    weight_per_sq_in: Optional[float] = None
    double_sided_multiplier: Optional[float] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class PaperStock(PaperStockBase):
    id: int
    coatings: List[Coating] = []
    updated_at: datetime
    class Config:
        from_attributes = True

class AddOnBase(BaseModel):
    name: str
    description: Optional[str] = None
    pricing_model: PricingModel
    configuration: Dict[str, Any] = {}
    additional_turnaround_days: int = 0
    is_active: bool = True
    sort_order: int = 0

class AddOnCreate(AddOnBase):
    pass

class AddOnUpdate(BaseModel):
    description: Optional[str] = None
    pricing_model: Optional[PricingModel] = None
    configuration: Optional[Dict[str, Any]] = None
    additional_turnaround_days: Optional[int] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class AddOn(AddOnBase):
    id: int
    updated_at: datetime
    class Config:
        from_attributes = True

class TurnaroundBase(BaseModel):
    name: str
    days_min: int = 0
    days_max: int = 0
    price_multiplier: float = 1.0
    restricted_coatings: List[str] = []
    is_active: bool = True
    sort_order: int = 0

class TurnaroundCreate(TurnaroundBase):
    pass

class Turnaround(TurnaroundBase):
    id: int
    class Config:
        from_attributes = True

class ProductSizeBase(BaseModel):
    name: str
    width: float
    height: float
    pre_calculated_value: Optional[float] = None
    sort_order: int = 0

class ProductSize(ProductSizeBase):
    id: int
    class Config:
        from_attributes = True

class ProductQuantityBase(BaseModel):
    display_value: int
    calculation_value: Optional[int] = None
    adjustment_value: Optional[int] = None
    sort_order: int = 0

class ProductQuantity(ProductQuantityBase):
    id: int
    class Config:
        from_attributes = True

class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    custom_quantity_min: Optional[int] = None
    custom_quantity_max: Optional[int] = None
    custom_width_min: Optional[float] = None
    custom_width_max: Optional[float] = None
    custom_height_min: Optional[float] = None
    custom_height_max: Optional[float] = None
    is_active: bool = True

class ProductCreate(ProductBase):
    sizes: List[ProductSizeBase] = []
    quantities: List[ProductQuantityBase] = []
    paper_stock_ids: List[int] = []
    addon_ids: List[int] = []
    turnaround_ids: List[int] = []
    defaults: Dict[str, Any] = {}

class Product(ProductBase):
    id: int
    sizes: List[ProductSize] = []
    quantities: List[ProductQuantity] = []
    paper_stocks: List[PaperStock] = []
    addons: List[AddOn] = []
    turnarounds: List[Turnaround] = []
    created_at: datetime
    class Config:
        from_attributes = True

# --- Pricing ---

class AddOnSelection(BaseModel):
    addon_id: Any
    units: Optional[int] = None
    choice: Optional[str] = None
    scores: Optional[int] = None
    items_per_bundle: Optional[int] = None

class Selections(BaseModel):
    quantity_id: Optional[Any] = None
    custom_quantity: Optional[int] = None
    size_id: Optional[Any] = None
    custom_width: Optional[float] = None
    custom_height: Optional[float] = None
    paper_stock_id: Optional[Any] = None
    coating_id: Optional[Any] = None
    sides: Optional[str] = None
    turnaround_id: Optional[Any] = None
    addons: Optional[List[AddOnSelection]] = None
    broker_discount_pct: Optional[float] = None

class PriceRequest(BaseModel):
    product_id: Optional[int] = None
    product: Optional[Dict[str, Any]] = None  # inline config for admin price tests
    selections: Selections = Selections()
