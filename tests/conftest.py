"""
Shared fixtures.

The MongoDB database is swapped for an in-memory mongomock database per
test; routes, services and the store helpers all run for real.
"""
import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import database
from main import app


@pytest.fixture
def mongo_db(monkeypatch):
    """Fresh in-memory database with the production indexes."""
    db = mongomock.MongoClient().db
    monkeypatch.setattr(database, "db", db)
    database.ensure_indexes()
    return db


@pytest.fixture
def test_client(mongo_db):
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def catalog_items(mongo_db):
    """Seed catalog, returned as {name: id string}."""
    docs = [
        {"name": "Mug", "price": 5, "category": "Kitchen", "photo": "/img/mug.png"},
        {"name": "Plate", "price": 7.5, "category": "kitchen", "photo": "/img/plate.png"},
        {"name": "Running Shoes", "price": 80, "category": "Shoes", "photo": "/img/run.png"},
        {"name": "Boots", "price": 120, "category": "winter shoes", "photo": "/img/boots.png"},
        {"name": "Hat", "price": 15, "category": "Accessories", "photo": "/img/hat.png"},
    ]
    result = mongo_db["item"].insert_many(docs)
    return {doc["name"]: str(oid) for doc, oid in zip(docs, result.inserted_ids)}


@pytest.fixture
def user_id():
    return str(ObjectId())


@pytest.fixture
def signup_data():
    return {
        "email": "ana@example.com",
        "password": "secret-1",
        "name": "Ana",
        "postCode": "10115",
        "address": "1 Main Street",
    }
