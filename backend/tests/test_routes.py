"""
test_routes.py — HTTP tests for the pricing API.

Covers:
  - Labour quote calculation, quantity preview and rate card health
  - Error mapping: validation -> 422, unknown package -> 404,
    catalog store failure -> 503
  - Materials design pricing, stored package pricing, preset options
  - Universal configuration read / save and toggle application
  - Request id and security headers

The catalog store dependency is replaced with the in-memory store from
conftest; no database or external services required.
"""


class TestQuoteRoutes:
    """Tests for /api/quotes."""

    def test_calculate(self, client, scenario_form):
        resp = client.post("/api/quotes/calculate", json=scenario_form)
        assert resp.status_code == 200
        body = resp.json()
        assert abs(body["quote"]["totals"]["grand_total"] - 7158.00) < 0.01
        assert body["calculated_at"]
        assert body["quote"]["calculation_meta"]["omitted_codes"] == []

    def test_missing_wet_wall_is_422(self, client):
        resp = client.post("/api/quotes/calculate", json={"bathroom_type": "walk_in", "floor_sqft": 30})
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "validation_error"
        assert body["field"] == "wet_wall_sqft"

    def test_unknown_bathroom_type_is_422(self, client):
        resp = client.post("/api/quotes/calculate", json={"bathroom_type": "sauna", "floor_sqft": 30})
        assert resp.status_code == 422

    def test_store_down_is_503(self, client, catalog_store, scenario_form):
        catalog_store.fail.add("list_rate_lines")
        resp = client.post("/api/quotes/calculate", json=scenario_form)
        assert resp.status_code == 503
        assert resp.json()["error"] == "store_unavailable"

    def test_map_quantities(self, client, scenario_form):
        resp = client.post("/api/quotes/map-quantities", json=scenario_form)
        assert resp.status_code == 200
        assert resp.json()["quantities"]["PLM"] == 6

    def test_rate_card(self, client, catalog_store):
        catalog_store.rate_lines = [r for r in catalog_store.rate_lines if r.line_code != "NICHE"]
        resp = client.get("/api/quotes/rate-card")
        assert resp.status_code == 200
        body = resp.json()
        assert body["missing_required_codes"] == ["NICHE"]
        assert len(body["rate_card_version"]) == 12


class TestMaterialsRoutes:
    """Tests for materials and package pricing."""

    def test_price_design(self, client, mid_design):
        resp = client.post("/api/materials/price", json={"design": mid_design.model_dump(by_alias=True)})
        assert resp.status_code == 200
        assert resp.json()["subtotal"] == 746096

    def test_invalid_design_is_422(self, client):
        resp = client.post("/api/materials/price", json={"design": {"bathroomType": "Hot Tub"}})
        assert resp.status_code == 422

    def test_package_pricing(self, client):
        """Measured floor and walls; shower floor (108.00) and accent (375.00) come from the size table."""
        resp = client.post("/api/packages/pricing", json={
            "packageId": "pkg-signature", "floorSqft": 40, "wetWallSqft": 50,
            "dryWallSqft": 10, "bathroomType": "tub_shower",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["subtotalCents"] == 703346
        assert body["breakdown"]["tiles"]["showerFloorTile"]["sqft"] == 9
        assert body["isEstimate"] is False
        assert "calculatedAt" in body

    def test_package_estimate(self, client):
        resp = client.post("/api/packages/pricing", json={
            "packageId": "pkg-custom", "floorSqft": 40, "bathroomType": "tub_shower",
        })
        assert resp.status_code == 200
        assert resp.json()["isEstimate"] is True
        assert resp.json()["subtotal"] == 10000

    def test_unknown_package_is_404(self, client):
        resp = client.post("/api/packages/pricing", json={"packageId": "nope", "floorSqft": 40})
        assert resp.status_code == 404

    def test_options(self, client):
        resp = client.post("/api/packages/options", json={
            "bathroom_type": "tub_shower", "floor_sqft": 50, "wet_wall_sqft": 90,
        })
        assert resp.status_code == 200
        assert [o["level"] for o in resp.json()["options"]] == ["budget", "mid", "high"]


class TestSettingsRoutes:
    """Tests for /api/admin."""

    def test_default_config_when_unsaved(self, client):
        resp = client.get("/api/admin/universal-config")
        assert resp.status_code == 200
        body = resp.json()
        assert body["isDefault"] is True
        assert len(body["config"]["bathroomTypes"]) == 4

    def test_save_then_read(self, client, universal_config):
        payload = {"config": universal_config.model_dump(by_alias=True, exclude_none=True)}
        saved = client.post("/api/admin/universal-config", json=payload)
        assert saved.status_code == 200
        resp = client.get("/api/admin/universal-config")
        assert resp.json()["isDefault"] is False
        assert resp.json()["updatedAt"]

    def test_incomplete_config_is_422(self, client, universal_config):
        config = universal_config.model_dump(by_alias=True, exclude_none=True)
        del config["squareFootageConfig"]["small"]
        resp = client.post("/api/admin/universal-config", json={"config": config})
        assert resp.status_code == 422

    def test_apply_from_settings(self, client, catalog_store):
        resp = client.post("/api/admin/apply-universal-toggles", json={
            "bathroomType": "Walk-in Shower", "wallTileCoverage": "Floor to ceiling",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["packagesUpdated"] == 3
        assert "tub" not in catalog_store.packages["pkg-signature"].items

    def test_apply_needs_settings(self, client):
        resp = client.post("/api/admin/apply-universal-toggles", json={})
        assert resp.status_code == 422
        assert resp.json()["field"] == "universalToggles"


class TestMiddleware:
    def test_request_id_echoed(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert resp.status_code == 200
        assert resp.headers["X-Request-ID"] == "abc-123"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
