from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.core.errors import NotFoundError
from backoffice.db import Base, init_db
from backoffice.models import ClientProfile, Product, Promotion


# --- DB setup for tests: one in-memory database per test ---


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fixed_now():
    return datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def products(db):
    rows = [
        Product(name="Espresso beans 1kg", price=Decimal("100.00"), image="img/beans.png"),
        Product(name="Milk frother", price=Decimal("100.00")),
        Product(name="Paper filters", price=Decimal("10.00")),
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def client(db):
    profile = ClientProfile(user_id="user-1", name="Ana Ruiz", email="ana@example.com", phone="600111222")
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def other_client(db):
    profile = ClientProfile(user_id="user-2", name="Luis Gil", email="luis@example.com")
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def add_promotion(db):
    def _add(pct, products=None, **kw) -> Promotion:
        promo = Promotion(
            name=kw.pop("name", f"{pct}% off"),
            discount_pct=Decimal(str(pct)),
            products=list(products or []),
            **kw,
        )
        db.add(promo)
        db.commit()
        return promo

    return _add


# --- In-memory collaborators for engine/service tests without a database ---


class FakeCatalog:
    def __init__(self, prices):
        self.prices = {k: Decimal(str(v)) for k, v in prices.items()}
        self.calls = []

    def get_unit_price(self, product_id):
        self.calls.append(product_id)
        if product_id not in self.prices:
            raise NotFoundError("Product", product_id)
        return self.prices[product_id]


class FakePromotions:
    def __init__(self, terms=None):
        self.terms = list(terms or [])

    def find_active(self):
        return list(self.terms)


@pytest.fixture
def fake_catalog():
    return FakeCatalog({1: "100.00", 2: "100.00", 3: "10.00"})


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def make_promotions():
    return FakePromotions
