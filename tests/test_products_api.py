"""Tests HTTP de /api/products/ (catálogo)."""

import logging
from decimal import Decimal

import pytest

from sales import services
from sales.models import Product

from .conftest import BUSINESS_DAY


pytestmark = pytest.mark.django_db

URL = "/api/products/"


class TestProducts:

    def test_create(self, api_client):
        resp = api_client.post(
            URL, {"name": "Pupusa de queso", "unit_price": "0.50", "promotion_eligible": True}, format="json"
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["unit_price"] == "0.50"
        assert body["price_formatted"] == "$0.50"
        assert body["promotion_eligible"] is True

    def test_list_sorted_by_name(self, api_client, catalog):
        names = [p["name"] for p in api_client.get(URL).json()]
        assert names == ["Pupusa pequeña", "Refresco, natural", "Revuelta"]

    def test_search(self, api_client, catalog):
        names = [p["name"] for p in api_client.get(URL, {"search": "revu"}).json()]
        assert names == ["Revuelta"]

    @pytest.mark.parametrize("price", ["0", "-1.00", "abc"])
    def test_invalid_price(self, api_client, price):
        resp = api_client.post(URL, {"name": "X", "unit_price": price}, format="json")
        assert resp.status_code == 400
        assert "unit_price" in resp.json()

    def test_blank_name(self, api_client):
        resp = api_client.post(URL, {"name": "   ", "unit_price": "1.00"}, format="json")
        assert resp.status_code == 400

    def test_duplicate_name(self, api_client, revuelta):
        resp = api_client.post(URL, {"name": "Revuelta", "unit_price": "1.00"}, format="json")
        assert resp.status_code == 400
        assert "name" in resp.json()

    def test_update_does_not_touch_history(self, api_client, catalog):
        order = services.create_order(
            business_day=BUSINESS_DAY, items=[{"product_id": catalog["revuelta"].pk, "quantity": 2}]
        )

        resp = api_client.patch(f"{URL}{catalog['revuelta'].pk}/", {"unit_price": "2.00"}, format="json")

        assert resp.status_code == 200
        order.refresh_from_db()
        assert order.total == Decimal("2.50")

    def test_delete_unused(self, api_client, refresco):
        assert api_client.delete(f"{URL}{refresco.pk}/").status_code == 204
        assert not Product.objects.filter(pk=refresco.pk).exists()

    def test_delete_used_in_orders_is_blocked(self, api_client, catalog):
        services.create_order(business_day=BUSINESS_DAY, items=[{"product_id": catalog["small"].pk, "quantity": 3}])

        resp = api_client.delete(f"{URL}{catalog['small'].pk}/")

        assert resp.status_code == 400
        assert "detail" in resp.json()
        assert Product.objects.filter(pk=catalog["small"].pk).exists()

    def test_delete_logs_product_id(self, api_client, refresco, caplog, monkeypatch):
        # el logger "sales" no propaga a root en settings; caplog escucha en root
        monkeypatch.setattr(logging.getLogger("sales"), "propagate", True)
        pk = refresco.pk

        with caplog.at_level(logging.INFO, logger="sales.views"):
            api_client.delete(f"{URL}{pk}/")

        assert f"Producto #{pk} eliminado" in caplog.messages
