"""
Unit tests for the public bike catalog endpoints.
"""
import pytest

from bikeride import models


class TestBrowseBikes:
    """Tests for GET /bikes/."""

    def test_browse_only_available(self, client, sample_bikes):
        response = client.get("/bikes/")
        assert response.status_code == 200
        data = response.json()
        names = [b["name"] for b in data["items"]]
        assert "Broken Tandem" not in names
        assert data["count"] == 3

    def test_browse_default_sort_by_name(self, client, sample_bikes):
        response = client.get("/bikes/")
        names = [b["name"] for b in response.json()["items"]]
        assert names == ["Aero Road", "City Cruiser", "Volt E-Bike"]

    def test_browse_search(self, client, sample_bikes):
        response = client.get("/bikes/", params={"search": "CARBON"})
        data = response.json()
        assert data["count"] == 1
        assert data["items"][0]["name"] == "Aero Road"

    def test_browse_type_filter(self, client, sample_bikes):
        response = client.get("/bikes/", params={"type": "electric"})
        data = response.json()
        assert [b["name"] for b in data["items"]] == ["Volt E-Bike"]

    def test_browse_sort_price_high(self, client, sample_bikes):
        response = client.get("/bikes/", params={"sort": "price-high"})
        rates = [b["hourly_rate"] for b in response.json()["items"]]
        assert rates == [15.0, 11.0, 8.0]

    def test_browse_types_from_available_fleet(self, client, sample_bikes):
        response = client.get("/bikes/", params={"type": "road"})
        types = response.json()["types"]
        assert sorted(types) == ["City", "Electric", "Road"]

    def test_browse_lists_legacy_rows(self, client, db_session):
        """Test stored bikes outside the admin input rules still render."""
        bike = models.Bike(name="Old Rockhopper", type="mountain", hourly_rate=0.0, daily_rate=0.0)
        db_session.add(bike)
        db_session.commit()

        response = client.get("/bikes/", params={"type": "Mountain"})
        assert response.status_code == 200
        assert [b["name"] for b in response.json()["items"]] == ["Old Rockhopper"]

        detail = client.get(f"/bikes/{bike.id}")
        assert detail.status_code == 200
        assert detail.json()["type"] == "mountain"

    def test_browse_empty(self, client):
        response = client.get("/bikes/")
        assert response.status_code == 200
        assert response.json() == {"items": [], "count": 0, "types": []}


class TestBikeDetails:
    """Tests for single bike lookups and helpers."""

    def test_get_bike(self, client, sample_bike):
        response = client.get(f"/bikes/{sample_bike.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Trail Blazer"
        assert data["bike_number"] == "MT-001"

    def test_get_missing_bike(self, client):
        response = client.get("/bikes/4242")
        assert response.status_code == 404

    def test_featured_limited_to_available(self, client, sample_bikes):
        response = client.get("/bikes/featured")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 3
        assert all(b["is_available"] for b in data)

    def test_bike_types(self, client):
        response = client.get("/bikes/types")
        assert response.status_code == 200
        assert "Mountain" in response.json()
        assert len(response.json()) == 8
