from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Enum, Boolean, JSON, Table
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class PricingModel(str, enum.Enum):
    FLAT = "FLAT"
    PERCENTAGE = "PERCENTAGE"
    PER_UNIT = "PER_UNIT"
    CUSTOM = "CUSTOM"


class PaperType(str, enum.Enum):
    CARDSTOCK = "cardstock"
    TEXT = "text"
    SPECIALTY = "specialty"


# --- Association tables ---

product_paper_stocks = Table(
    "product_paper_stocks",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id"), primary_key=True),
    Column("paper_stock_id", Integer, ForeignKey("paper_stocks.id"), primary_key=True),
)

product_addons = Table(
    "product_addons",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id"), primary_key=True),
    Column("addon_id", Integer, ForeignKey("addons.id"), primary_key=True),
)

product_turnarounds = Table(
    "product_turnarounds",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id"), primary_key=True),
    Column("turnaround_id", Integer, ForeignKey("turnaround_times.id"), primary_key=True),
)


# --- Catalog ---

class PaperStock(Base):
    """Physical paper/material, priced and weighed per square inch."""
    __tablename__ = "paper_stocks"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    paper_type = Column(Enum(PaperType), default=PaperType.CARDSTOCK)
    price_per_sq_in = Column(Float, nullable=False)
    weight_per_sq_in = Column(Float, nullable=True)  # lb/sq in, falls back to settings default
    double_sided_multiplier = Column(Float, default=1.0)  # 1.75 for text papers
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    coatings = relationship("Coating", back_populates="paper_stock", cascade="all, delete-orphan",
                            order_by="Coating.sort_order")


class Coating(Base):
    __tablename__ = "coatings"

    id = Column(Integer, primary_key=True, index=True)
    paper_stock_id = Column(Integer, ForeignKey("paper_stocks.id"), nullable=False)
    name = Column(String, nullable=False)
    price_multiplier = Column(Float, default=1.0)
    sort_order = Column(Integer, default=0)

    paper_stock = relationship("PaperStock", back_populates="coatings")


class AddOn(Base):
    """Optional print-job modifier. configuration shape depends on pricing_model."""
    __tablename__ = "addons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    pricing_model = Column(Enum(PricingModel), nullable=False)
    configuration = Column(JSON, default=dict)
    additional_turnaround_days = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TurnaroundTime(Base):
    """Production-speed tier. Multiplies the base price, sets the day count."""
    __tablename__ = "turnaround_times"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    days_min = Column(Integer, default=0)
    days_max = Column(Integer, default=0)
    price_multiplier = Column(Float, default=1.0)
    restricted_coatings = Column(JSON, default=list)  # coating names this tier can't run
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    # Custom quantity/size bounds; null means custom entry is not offered
    custom_quantity_min = Column(Integer, nullable=True)
    custom_quantity_max = Column(Integer, nullable=True)
    custom_width_min = Column(Float, nullable=True)
    custom_width_max = Column(Float, nullable=True)
    custom_height_min = Column(Float, nullable=True)
    custom_height_max = Column(Float, nullable=True)
    defaults_json = Column(JSON, default=dict)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sizes = relationship("ProductSize", back_populates="product", cascade="all, delete-orphan",
                         order_by="ProductSize.sort_order")
    quantities = relationship("ProductQuantity", back_populates="product", cascade="all, delete-orphan",
                              order_by="ProductQuantity.sort_order")
    paper_stocks = relationship("PaperStock", secondary=product_paper_stocks, order_by="PaperStock.sort_order")
    addons = relationship("AddOn", secondary=product_addons, order_by="AddOn.sort_order")
    turnarounds = relationship("TurnaroundTime", secondary=product_turnarounds,
                               order_by="TurnaroundTime.sort_order")


class ProductSize(Base):
    __tablename__ = "product_sizes"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    name = Column(String, nullable=False)
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    # Pricing value used instead of width × height when set
    pre_calculated_value = Column(Float, nullable=True)
    sort_order = Column(Integer, default=0)

    product = relationship("Product", back_populates="sizes")


class ProductQuantity(Base):
    __tablename__ = "product_quantities"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    display_value = Column(Integer, nullable=False)  # What the customer sees
    calculation_value = Column(Integer, nullable=True)  # What pricing uses below 5000
    adjustment_value = Column(Integer, nullable=True)  # Optional override of calculation_value
    sort_order = Column(Integer, default=0)

    product = relationship("Product", back_populates="quantities")
