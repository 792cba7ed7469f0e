"""Tests HTTP de /api/open-days/ — sin registro el día se asume abierto."""

import pytest

from sales.models import OpenDay


pytestmark = pytest.mark.django_db

URL = "/api/open-days/"


class TestOpenDays:

    def test_missing_day_is_open(self, api_client):
        resp = api_client.get(f"{URL}2025-03-14/")
        assert resp.status_code == 200
        assert resp.json()["is_open"] is True
        assert "note" in resp.json()
        assert OpenDay.is_open_on("2025-03-14") is True

    def test_put_upserts(self, api_client):
        first = api_client.put(f"{URL}2025-03-16/", {"is_open": False}, format="json")
        assert first.status_code == 201
        assert first.json()["is_open"] is False
        assert OpenDay.is_open_on("2025-03-16") is False

        second = api_client.put(f"{URL}2025-03-16/", {"is_open": True}, format="json")
        assert second.status_code == 200
        assert OpenDay.objects.filter(date="2025-03-16").count() == 1
        assert api_client.get(f"{URL}2025-03-16/").json()["is_open"] is True

    @pytest.mark.parametrize("value", ["false", 0, None])
    def test_put_requires_boolean(self, api_client, value):
        resp = api_client.put(f"{URL}2025-03-16/", {"is_open": value}, format="json")
        assert resp.status_code == 400
        assert not OpenDay.objects.exists()

    def test_invalid_date(self, api_client):
        assert api_client.get(f"{URL}2025-13-40/").status_code == 400
        assert api_client.get(f"{URL}hoy/").status_code == 404

    def test_bulk_skips_invalid_entries(self, api_client):
        payload = {"dates": [
            {"date": "2025-03-01", "is_open": False},
            {"date": "2025-03-02", "is_open": True},
            {"date": "01/03/2025", "is_open": False},
            {"date": "2025-03-03", "is_open": "no"},
        ]}

        resp = api_client.post(URL, payload, format="json")

        assert resp.status_code == 200
        assert resp.json()["count"] == 2
        assert OpenDay.objects.count() == 2

    def test_bulk_requires_list(self, api_client):
        assert api_client.post(URL, {"dates": []}, format="json").status_code == 400
        assert api_client.post(URL, {}, format="json").status_code == 400

    def test_list_with_range(self, api_client):
        for day, is_open in [("2025-03-01", True), ("2025-03-05", False), ("2025-03-10", True)]:
            OpenDay.objects.create(date=day, is_open=is_open)

        body = api_client.get(URL, {"start_date": "2025-03-02", "end_date": "2025-03-10"}).json()

        assert body["count"] == 2
        assert [d["date"] for d in body["results"]] == ["2025-03-10", "2025-03-05"]

        only_end = api_client.get(URL, {"end_date": "2025-03-01"}).json()
        assert [d["date"] for d in only_end["results"]] == ["2025-03-01"]

    def test_delete(self, api_client):
        OpenDay.objects.create(date="2025-03-05", is_open=False)

        assert api_client.delete(f"{URL}2025-03-05/").status_code == 204
        assert api_client.delete(f"{URL}2025-03-05/").status_code == 404
        assert OpenDay.is_open_on("2025-03-05") is True
