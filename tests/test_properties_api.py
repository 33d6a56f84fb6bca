"""Tests for the property listing routes."""

import json

from conftest import OWNER_ID, auth_headers, property_row


class TestListProperties:
    """Tests for GET /properties."""

    def test_lists_newest_first_with_cover_image(self, client, backend):
        backend.on("GET", "properties", [
            property_row(id="prop-2", images=[]),
            property_row(id="prop-1"),
        ])

        r = client.get("/api/v1/properties")
        assert r.status_code == 200
        data = r.json()
        assert data["count"] == 2
        assert data["properties"][0]["cover_image"].startswith("https://images.unsplash.com/")
        assert data["properties"][1]["cover_image"] == "https://img.example.com/1.jpg"

        [request] = backend.calls("GET", "properties")
        assert request.url.params["order"] == "created_at.desc"

    def test_filters_are_delegated(self, client, backend):
        r = client.get(
            "/api/v1/properties",
            params={"min_price": 100000, "max_price": 500000, "min_bedrooms": 2},
        )
        assert r.status_code == 200

        [request] = backend.calls("GET", "properties")
        assert request.url.params["and"] == "(price.gte.100000.0,price.lte.500000.0)"
        assert request.url.params["bedrooms"] == "gte.2"

    def test_inverted_price_range_is_rejected(self, client):
        r = client.get("/api/v1/properties", params={"min_price": 5, "max_price": 1})
        assert r.status_code == 400

    def test_backend_outage_is_bad_gateway(self, client, backend):
        backend.on("GET", "properties", {"message": "boom"}, status_code=500)

        r = client.get("/api/v1/properties")
        assert r.status_code == 502


class TestPropertyDetails:
    """Tests for GET /properties/{id}."""

    def test_stored_coordinates_skip_geocoding(self, client, backend, geocoder):
        backend.on("GET", "properties", [property_row(latitude=39.1, longitude=-89.6)])

        r = client.get("/api/v1/properties/prop-1")
        assert r.status_code == 200
        data = r.json()
        assert data["location"] == {"latitude": 39.1, "longitude": -89.6}
        assert "marker=39.1%2C-89.6" in data["map_embed_url"]
        assert geocoder.requests == []

        [request] = backend.calls("GET", "properties")
        assert request.url.params["id"] == "eq.prop-1"

    def test_address_is_geocoded_when_coordinates_missing(self, client, backend, geocoder):
        backend.on("GET", "properties", [property_row()])

        r = client.get("/api/v1/properties/prop-1")
        assert r.status_code == 200
        assert r.json()["location"] == {"latitude": 39.1, "longitude": -89.6}
        assert len(geocoder.requests) == 1

    def test_geocoding_failure_leaves_location_empty(self, client, backend, geocoder):
        backend.on("GET", "properties", [property_row()])
        geocoder.status_code = 500

        r = client.get("/api/v1/properties/prop-1")
        assert r.status_code == 200
        assert r.json()["location"] is None
        assert r.json()["map_embed_url"] is None

    def test_missing_property(self, client, backend):
        backend.on("GET", "properties", [])

        r = client.get("/api/v1/properties/nope")
        assert r.status_code == 404


class TestCreateProperty:
    """Tests for POST /properties."""

    PAYLOAD = {
        "title": "Beautiful House in Downtown",
        "description": "Describe your property...",
        "price": 299999,
        "address": "100 Main St, Springfield",
        "bedrooms": 3,
        "bathrooms": 2,
        "square_feet": 2000,
        "images": ["https://img.example.com/1.jpg", "  "],
    }

    def test_requires_authentication(self, client):
        r = client.post("/api/v1/properties", json=self.PAYLOAD)
        assert r.status_code in (401, 403)

    def test_rejects_invalid_token(self, client):
        r = client.post(
            "/api/v1/properties",
            json=self.PAYLOAD,
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert r.status_code == 401

    def test_creates_listing_owned_by_current_user(self, client, backend):
        backend.on("POST", "properties", lambda request: [property_row(id="prop-9")], status_code=201)

        r = client.post("/api/v1/properties", json=self.PAYLOAD, headers=auth_headers(OWNER_ID))
        assert r.status_code == 201
        assert r.json()["id"] == "prop-9"

        [request] = backend.calls("POST", "properties")
        assert request.headers["Prefer"] == "return=representation"
        assert request.headers["Authorization"].startswith("Bearer ")
        [row] = json.loads(request.content)
        assert row["owner_id"] == OWNER_ID
        assert row["images"] == ["https://img.example.com/1.jpg"]
        assert "latitude" not in row

    def test_validation_error(self, client):
        r = client.post(
            "/api/v1/properties",
            json={**self.PAYLOAD, "price": -1},
            headers=auth_headers(OWNER_ID),
        )
        assert r.status_code == 422
