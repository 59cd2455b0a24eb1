"""
Shared test fixtures — SQLite test database, test client, seeded catalog, sample product config.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set env before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["AUTO_SEED"] = "false"

from print_pricing.database import Base, get_db
from print_pricing.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_client(client):
    """Test client with the default paper stocks, turnarounds and add-ons seeded."""
    for path in ("/api/paper-stocks/seed", "/api/turnarounds/seed", "/api/addons/seed"):
        resp = client.get(path)
        assert resp.status_code == 200
    return client


def sample_product():
    """
    Postcard product config: the plain dict the pricing engine works on.

    Prices are round numbers so expected totals can be worked out by hand.
    """
    return {
        "id": 1,
        "name": "Postcards",
        "quantities": [
            {"id": 10, "display_value": 100, "calculation_value": 100, "adjustment_value": None},
            {"id": 11, "display_value": 500, "calculation_value": 500, "adjustment_value": 400},
            {"id": 12, "display_value": 1000, "calculation_value": 1000, "adjustment_value": None},
            {"id": 13, "display_value": 5000, "calculation_value": 4000, "adjustment_value": 4500},
        ],
        "custom_quantity": {"min": 50, "max": 100000},
        "sizes": [
            {"id": 20, "name": "4x6", "width": 4.0, "height": 6.0, "pre_calculated_value": None},
            {"id": 21, "name": "5x7", "width": 5.0, "height": 7.0, "pre_calculated_value": 36.0},
            {"id": 22, "name": "8.5x11", "width": 8.5, "height": 11.0, "pre_calculated_value": None},
        ],
        "custom_size": {"min_width": 2.0, "max_width": 12.0, "min_height": 2.0, "max_height": 18.0},
        "paper_stocks": [
            {
                "id": 30, "name": "14pt C2S Cardstock", "paper_type": "cardstock",
                "price_per_sq_in": 0.001, "weight_per_sq_in": 0.0035, "double_sided_multiplier": 1.0,
                "coatings": [
                    {"id": 300, "name": "High Gloss UV", "price_multiplier": 1.0},
                    {"id": 301, "name": "No Coating", "price_multiplier": 1.0},
                ],
            },
            {
                "id": 31, "name": "100lb Gloss Text", "paper_type": "text",
                "price_per_sq_in": 0.002, "weight_per_sq_in": 0.0025, "double_sided_multiplier": 1.75,
                "coatings": [
                    {"id": 310, "name": "Gloss Aqueous", "price_multiplier": 1.0},
                ],
            },
            {
                "id": 32, "name": "18pt Premium Cardstock", "paper_type": "specialty",
                "price_per_sq_in": 0.002, "weight_per_sq_in": None, "double_sided_multiplier": 1.0,
                "coatings": [
                    {"id": 320, "name": "Soft Touch Matte", "price_multiplier": 1.5},
                ],
            },
        ],
        "turnarounds": [
            {"id": 40, "name": "Economy", "days_min": 5, "days_max": 7, "price_multiplier": 1.0,
             "restricted_coatings": []},
            {"id": 41, "name": "Standard", "days_min": 2, "days_max": 3, "price_multiplier": 1.25,
             "restricted_coatings": []},
            {"id": 42, "name": "Same Day", "days_min": 0, "days_max": 0, "price_multiplier": 2.0,
             "restricted_coatings": ["High Gloss UV"]},
        ],
        "addons": [
            {"id": 50, "name": "Digital Proof", "pricing_model": "FLAT",
             "configuration": {"price": 5.0}, "additional_turnaround_days": 0},
            {"id": 51, "name": "Our Tagline", "pricing_model": "PERCENTAGE",
             "configuration": {"percentage": -5, "applies_to": "base_price",
                               "modifies_base": True, "excluded_for_brokers": True},
             "additional_turnaround_days": 0},
            {"id": 52, "name": "Exact Size", "pricing_model": "PERCENTAGE",
             "configuration": {"percentage": 12.5, "applies_to": "adjusted_base_price",
                               "modifies_base": True},
             "additional_turnaround_days": 0},
            {"id": 53, "name": "Perforation", "pricing_model": "CUSTOM",
             "configuration": {"base_fee": 20.0, "per_piece_rate": 0.01},
             "additional_turnaround_days": 1},
            {"id": 54, "name": "Folding", "pricing_model": "CUSTOM",
             "configuration": {
                 "text_paper": {"base_fee": 0.17, "per_piece_rate": 0.01},
                 "card_stock": {"base_fee": 0.34, "per_piece_rate": 0.02},
                 "min_size": {"width": 5, "height": 6},
             },
             "additional_turnaround_days": 3},
            {"id": 55, "name": "Design Services", "pricing_model": "CUSTOM",
             "configuration": {"choices": {"upload_artwork": 0.0, "standard_one_side": 90.0}},
             "additional_turnaround_days": 0},
            {"id": 56, "name": "Hole Drilling", "pricing_model": "PER_UNIT",
             "configuration": {"setup_fee": 20.0, "price_per_unit": 0.02, "unit_type": "hole"},
             "additional_turnaround_days": 1},
            {"id": 57, "name": "Color Critical", "pricing_model": "PERCENTAGE",
             "configuration": {"percentage": 10, "applies_to": "after_turnaround"},
             "additional_turnaround_days": 1},
            {"id": 58, "name": "Rush Proof", "pricing_model": "FLAT",
             "configuration": {"price": 15.0, "conflicts_with": ["Digital Proof"]},
             "additional_turnaround_days": 0},
        ],
        "defaults": {"quantity": 12, "size": 20, "paper_stock": 30, "coating": 301, "turnaround": 40},
    }


@pytest.fixture
def product():
    return sample_product()
