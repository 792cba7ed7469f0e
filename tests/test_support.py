"""Tests de piezas de soporte: handler de errores, formulario del admin y endpoints de salud."""

from decimal import Decimal

import pytest
from django import forms
from django.db import IntegrityError
from django.db.models import ProtectedError

from sales.exceptions import AmountTooLargeError, UnknownProductError, api_exception_handler
from sales.forms import ProductAdminForm, _parse_price
from sales.models import Product


class TestExceptionHandler:

    def test_protected_error(self):
        resp = api_exception_handler(ProtectedError("en uso", set()), {})
        assert resp.status_code == 400
        assert "No se puede eliminar" in resp.data["detail"]

    def test_integrity_error(self):
        resp = api_exception_handler(IntegrityError("UNIQUE constraint failed"), {})
        assert resp.status_code == 400
        assert resp.data == {"detail": "Registro duplicado."}

    def test_unknown_product(self):
        resp = api_exception_handler(UnknownProductError({9, 3}), {})
        assert resp.status_code == 400
        assert resp.data == {"items": [{"product_id": "Inexistente: 3"}, {"product_id": "Inexistente: 9"}]}

    def test_amount_too_large(self):
        resp = api_exception_handler(AmountTooLargeError("total", Decimal("100000000.00")), {})
        assert resp.status_code == 400
        assert resp.data == {"total": "Monto demasiado grande: 100000000.00"}

    def test_other_errors_fall_through(self):
        assert api_exception_handler(ValueError("x"), {}) is None


class TestParsePrice:

    @pytest.mark.parametrize("raw,expected", [
        ("0.50", "0.50"),
        ("0,50", "0.50"),
        ("$ 1.25", "1.25"),
        ("1,234.50", "1234.50"),
        ("1.234,50", "1234.50"),
        ("2", "2.00"),
        ("0.005", "0.01"),
    ])
    def test_accepted_formats(self, raw, expected):
        assert _parse_price(raw) == Decimal(expected)

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "0", "-1.00", "NaN"])
    def test_rejected(self, raw):
        with pytest.raises(forms.ValidationError):
            _parse_price(raw)


@pytest.mark.django_db
class TestProductAdminForm:

    def test_saves_parsed_price(self):
        form = ProductAdminForm(data={"name": "Pupusa grande", "promotion_eligible": "", "price_input": "1,50"})
        assert form.is_valid(), form.errors
        product = form.save()
        assert product.unit_price == Decimal("1.50")
        assert product.promotion_eligible is False

    def test_initial_price_from_instance(self, revuelta):
        form = ProductAdminForm(instance=revuelta)
        assert form.fields["price_input"].initial == "1.25"

    def test_invalid_price(self):
        form = ProductAdminForm(data={"name": "X", "price_input": "gratis"})
        assert not form.is_valid()
        assert "price_input" in form.errors
        assert not Product.objects.exists()


@pytest.mark.django_db
class TestHealth:

    @pytest.mark.parametrize("url", ["/api/health", "/api/health/"])
    def test_health(self, client, url):
        resp = client.get(url)
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_index_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["orders"] == "/api/orders/"
