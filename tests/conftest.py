import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import main


@pytest.fixture
def mongo(monkeypatch):
    mock_db = mongomock.MongoClient()["kalmar_test"]
    database.ensure_indexes(mock_db)
    monkeypatch.setattr(database, "db", mock_db)
    monkeypatch.setattr(main, "db", mock_db)
    return mock_db


@pytest.fixture
def client(mongo):
    return TestClient(main.app)


@pytest.fixture
def shipping():
    return {
        "shipping_address": {
            "full_name": "Jane Doe",
            "email": "jane@printshop.io",
            "contact_no": "+46 70 123 45 67",
            "street": "Storgatan 1",
            "city": "Kalmar",
            "state": "Kalmar lan",
            "zip_code": "39231",
            "country": "SE",
        },
        "shipping_method": {"type": "Standard", "cost": 4.9, "estimated_delivery": "3-5 days"},
        "payment": {"amount": 64.8, "currency": "usd", "status": "paid", "intent_id": "pi_123"},
    }


@pytest.fixture
def order_payload(shipping):
    return {
        "customer_email": "jane@printshop.io",
        "items": [
            {
                "product_id": "64b7f0c2a1b2c3d4e5f60718",
                "name": "Classic Tee",
                "size": "M",
                "color": "black",
                "quantity": 2,
                "price": 19.95,
            }
        ],
        **shipping,
    }


@pytest.fixture
def cart_item():
    return {
        "product_id": "64b7f0c2a1b2c3d4e5f60718",
        "name": "Classic Tee",
        "price": 19.95,
        "image": "https://cdn.printshop.io/tee.png",
        "color": "white",
        "print_type": "DTG",
        "material": "Cotton",
        "sizes": [{"size": "S", "quantity": 1}, {"size": "L", "quantity": 3}],
        "total_quantity": 4,
    }
