"""
Pytest fixtures for Tillpoint backend tests.

Provides an in-memory SQLite app with a fakeredis cache, per-test cleanup,
seeded users/catalog rows and token helpers.
"""

from decimal import Decimal

import fakeredis
import pytest

from tillpoint import create_app
from tillpoint.extensions import cache, db
from tillpoint.services import category_service, payment_service, product_service, user_service

PASSWORD = "password123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'CACHE_CLIENT': fakeredis.FakeRedis(),
        'BCRYPT_ROUNDS': 4,
        'SECRET_KEY': 'test-secret-key',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table and the cache before each test."""
    with app.app_context():
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        cache.flush()

        yield db.session

        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def redis_client(app):
    """The fakeredis instance behind the cache extension."""
    return app.config['CACHE_CLIENT']


@pytest.fixture(scope='function')
def admin_user(db_session):
    return user_service.register(
        name="Admin", email="admin@tillpoint.test", password=PASSWORD, role="admin"
    )


@pytest.fixture(scope='function')
def cashier_user(db_session):
    return user_service.register(
        name="Cashier", email="cashier@tillpoint.test", password=PASSWORD
    )


@pytest.fixture(scope='function')
def category(db_session):
    return category_service.create_category(name="Beverages")


@pytest.fixture(scope='function')
def product(db_session, category):
    """Coffee at 10.00 with 5 in stock."""
    return product_service.create_product(
        category_id=category["id"],
        name="Coffee",
        image="coffee.png",
        price=Decimal("10.00"),
        stock=5,
    )


@pytest.fixture(scope='function')
def second_product(db_session, category):
    """Tea at 4.50 with 20 in stock."""
    return product_service.create_product(
        category_id=category["id"],
        name="Tea",
        image="tea.png",
        price=Decimal("4.50"),
        stock=20,
    )


@pytest.fixture(scope='function')
def payment(db_session):
    return payment_service.create_payment(name="Cash", type="CASH")


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/v1/users/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json['data']['token']
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user["email"]))


@pytest.fixture(scope='function')
def cashier_headers(client, cashier_user):
    return auth_headers(get_auth_token(client, cashier_user["email"]))
