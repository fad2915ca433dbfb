"""
Pytest fixtures for the rental & inventory backend tests.

Provides an in-memory test database, a test client, and catalog/supplier/user
fixtures.
"""

from decimal import Decimal

import pytest
from app import create_app
from app.extensions import db
from app.models import Category, Product, Supplier, User


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'LEDGER_RETRY_BACKOFF': 0.01,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def category(db_session):
    category = Category(name="Tools", description="Tools and equipment")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: create a product with a starting quantity and threshold."""
    counter = {"n": 0}

    def _make(quantity=10, min_stock=5, code=None, name=None, category=None):
        counter["n"] += 1
        product = Product(
            code=code or f"PRD-{counter['n']:03d}",
            name=name or f"Product {counter['n']}",
            unit_price=Decimal("10.00"),
            quantity=quantity,
            initial_quantity=quantity,
            min_stock=min_stock,
            category_id=category.id if category else None,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture(scope='function')
def product(make_product):
    """Product with quantity 10 and min stock 5."""
    return make_product(quantity=10, min_stock=5, code="FI-001", name="Industrial Drill")


@pytest.fixture(scope='function')
def supplier(db_session):
    supplier = Supplier(name="ABC Equipment Rentals", email="contact@abc.example", phone="555-0100")
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture(scope='function')
def user(db_session):
    # Hash content is irrelevant for ledger tests
    user = User(username="stockkeeper", password="x", name="Stock Keeper", email="stock@example.com")
    db_session.add(user)
    db_session.commit()
    return user
