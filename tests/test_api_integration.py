"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from py_talispod.api.main import app
from py_talispod.core.environment import HUM_STEPS, TEMP_STEPS

NOON = "2024-06-01T12:00:00"
NIGHT = "2024-06-01T22:00:00"


class TestAreaEndpoints:
    """Test the catalog and resolution endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root_and_health(self):
        """Test the root and health endpoints."""
        assert self.client.get("/").json()["status"] == "running"

        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "areas": 22}

    def test_list_areas(self):
        """Test listing every area."""
        response = self.client.get("/areas")

        assert response.status_code == 200
        areas = response.json()
        assert len(areas) == 22
        sea = [area for area in areas if area["type"] == "sea"]
        assert len(sea) == 6
        assert all(area["attribute"] == "storm" for area in sea)

    def test_get_area(self):
        """Test fetching a single area."""
        response = self.client.get("/areas/V1")

        assert response.status_code == 200
        data = response.json()
        assert data["en_name"] == "volcano"
        assert data["attribute"] == "volcano"
        assert data["side"] is None

    def test_get_unknown_area(self):
        """Test that an unknown area is a 404."""
        response = self.client.get("/areas/ZZ")
        assert response.status_code == 404

    def test_area_chart(self):
        """Test the step-grid chart."""
        response = self.client.get("/areas/chart", params={"light": 100})

        assert response.status_code == 200
        data = response.json()
        assert data["light"] == 100
        assert len(data["grid"]) == len(TEMP_STEPS)
        assert all(len(row) == len(HUM_STEPS) for row in data["grid"])
        assert sum(data["statistics"].values()) == len(TEMP_STEPS) * len(HUM_STEPS)
        assert data["grid"][0][0] == "T1"

    def test_resolve(self):
        """Test resolving readings."""
        response = self.client.get("/resolve", params={"temperature": 999, "humidity": 0})

        assert response.status_code == 200
        assert response.json()["area_id"] == "V1"
        assert response.json()["area"]["attribute"] == "volcano"

        neutral = self.client.get("/resolve", params={"temperature": 0, "humidity": 50}).json()
        assert neutral == {"area_id": "NEUTRAL", "area": None}

        sea = self.client.get(
            "/resolve", params={"temperature": -10, "humidity": 100, "light": 90}
        ).json()
        assert sea["area_id"] == "SN_DEEP"


class TestCreatureEndpoints:
    """Test creature ranking, growth and save codes."""

    def setup_method(self):
        """Set up test client and a newly born creature."""
        self.client = TestClient(app)
        response = self.client.post("/creatures", json={"saga_name": "ApiSaga", "nickname": "Kaze"})
        assert response.status_code == 200
        self.creature = response.json()

    def test_create_creature(self):
        """Test the creature defaults."""
        assert self.creature["saga_name"] == "ApiSaga"
        assert self.creature["species_id"] == "windragon"
        assert self.creature["attribute"] == "tornado"
        assert self.creature["current_hp"] == 400
        assert self.creature["grow_stats"] == {"fire": 0, "wind": 0, "earth": 0, "water": 0}

    def test_create_requires_saga(self):
        """Test that a blank saga name is rejected."""
        response = self.client.post("/creatures", json={"saga_name": "  "})
        assert response.status_code == 400

    def test_rank_super_best(self):
        """Test ranking at the ideal reading with daylight."""
        response = self.client.post("/rank", json={
            "creature": self.creature,
            "environment": {"temperature": -45, "humidity": 5, "light": 100},
            "now": NOON,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["rank"] == "superbest"
        assert data["rank_en"] == "SuperBest"
        assert data["area_id"] == "T2"
        assert data["env_attribute_en"] == "Tornado"
        assert data["light_ok"] is True

    def test_rank_light_gate(self):
        """Test that darkness at night overrides the ideal reading."""
        response = self.client.post("/rank", json={
            "creature": self.creature,
            "environment": {"temperature": -45, "humidity": 5, "light": 100},
            "now": NIGHT,
        })

        data = response.json()
        assert data["rank"] == "bad"
        assert data["expected_light"] == 0
        assert data["light_ok"] is False

    def test_preview(self):
        """Test forecasting the next tick."""
        response = self.client.post("/preview", json={
            "creature": self.creature,
            "environment": {"temperature": -45, "humidity": 5, "light": 100},
            "now": NOON,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["rank"] == "superbest"
        assert data["hp_growth"] == 50
        assert data["element_key"] == "wind"
        assert data["element_growth"] == 20
        assert data["stat_label"] == "Counter"

    def test_tick(self):
        """Test applying several ticks."""
        response = self.client.post("/tick", json={
            "creature": self.creature,
            "environment": {"temperature": -45, "humidity": 5, "light": 100},
            "now": NOON,
            "ticks": 3,
        })

        assert response.status_code == 200
        data = response.json()
        assert len(data["results"]) == 3
        assert data["creature"]["grow_hp"] == 150
        assert data["creature"]["current_hp"] == 550
        assert data["creature"]["grow_stats"]["wind"] == 60
        assert data["results"][-1]["max_hp"] == 550

    def test_tick_neutral(self):
        """Test that neutral ticks leave the creature unchanged."""
        response = self.client.post("/tick", json={
            "creature": self.creature,
            "environment": {"temperature": 0, "humidity": 50, "light": 0},
            "now": NOON,
            "ticks": 5,
        })

        data = response.json()
        assert data["creature"]["grow_hp"] == 0
        assert all(result["rank"] == "neutral" for result in data["results"])

    @pytest.mark.parametrize("ticks,status", [(0, 422), (100000, 400)])
    def test_tick_bounds(self, ticks, status):
        """Test the tick count limits."""
        response = self.client.post("/tick", json={
            "creature": self.creature,
            "environment": {"temperature": -45, "humidity": 5, "light": 100},
            "ticks": ticks,
        })
        assert response.status_code == status

    def test_soul_code_round_trip(self):
        """Test encoding and decoding a save code."""
        encoded = self.client.post("/soul-code/encode", json={"creature": self.creature})

        assert encoded.status_code == 200
        code = encoded.json()["code"]
        assert code.startswith("SOUL1:")

        decoded = self.client.post(
            "/soul-code/decode", json={"code": code, "saga_name": "ApiSaga"}
        )
        assert decoded.status_code == 200
        assert decoded.json()["nickname"] == "Kaze"

    def test_soul_code_saga_mismatch(self):
        """Test that a code from another saga is rejected."""
        code = self.client.post("/soul-code/encode", json={"creature": self.creature}).json()["code"]

        response = self.client.post("/soul-code/decode", json={"code": code, "saga_name": "Other"})

        assert response.status_code == 400
        assert "does not match" in response.json()["detail"]

    def test_soul_code_garbage(self):
        """Test that unreadable codes are rejected."""
        response = self.client.post("/soul-code/decode", json={"code": "SOUL1:@@@"})
        assert response.status_code == 400
