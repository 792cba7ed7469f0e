from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from sales.models import Product

BUSINESS_DAY = date(2025, 3, 14)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def small_pupusa(db):
    return Product.objects.create(name="Pupusa pequeña", unit_price=Decimal("0.50"), promotion_eligible=True)


@pytest.fixture
def revuelta(db):
    return Product.objects.create(name="Revuelta", unit_price=Decimal("1.25"))


@pytest.fixture
def refresco(db):
    # coma en el nombre: el CSV debe citarlo
    return Product.objects.create(name="Refresco, natural", unit_price=Decimal("1.00"))


@pytest.fixture
def catalog(small_pupusa, revuelta, refresco):
    return {"small": small_pupusa, "revuelta": revuelta, "refresco": refresco}
