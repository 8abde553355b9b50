"""
API Tests - Assessment Endpoint Tests

Tests cover:
- Health endpoints
- Default records per fuel type (404 on unknown)
- Full assessment round trip (200)
- Schema validation failures (422)
- Issues, maintenance and projection endpoints
- Scenario listing and lookup
"""

import pytest
from fastapi.testclient import TestClient

from opterra.api.main import app
from opterra.config import settings


# Test client
client = TestClient(app)
API = settings.API_V1_STR


def get_valid_payload() -> dict:
    """A five-year-old gas tank on elevated pressure."""
    return {
        "inputs": {
            "fuel_type": "GAS",
            "calendar_age": 5,
            "warranty_years": 6,
            "house_psi": 75,
            "hardness_gpg": 12,
            "location": "GARAGE",
        },
        "as_of": "2025-01-01",
    }


class TestHealthEndpoints:
    """Test root and heartbeat."""

    def test_ping(self):
        response = client.get("/ping")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_root(self):
        assert client.get("/").json()["docs"] == "/docs"


class TestDefaults:
    """Test default record lookup."""

    @pytest.mark.parametrize("fuel", ["GAS", "ELECTRIC", "HYBRID", "TANKLESS_GAS", "TANKLESS_ELECTRIC"])
    def test_known_fuel_types(self, fuel):
        response = client.get(f"{API}/defaults/{fuel}")
        assert response.status_code == 200
        assert response.json()["fuel_type"] == fuel

    def test_tankless_fields_present(self):
        data = client.get(f"{API}/defaults/TANKLESS_GAS").json()
        assert data["has_isolation_valves"] is True
        assert "tank_capacity" not in data

    def test_unknown_fuel_type_returns_404(self):
        response = client.get(f"{API}/defaults/WOOD")
        assert response.status_code == 404


class TestAssess:
    """Test the full assessment endpoint."""

    def test_valid_payload_returns_200(self):
        response = client.post(f"{API}/assess", json=get_valid_payload())
        assert response.status_code == 200
        data = response.json()
        assert data["as_of"] == "2025-01-01"
        assert data["metrics"]["pressure_regime"] == "ELEVATED"
        assert data["verdict"]["action"] in ["REPLACE", "REPAIR", "UPGRADE", "MAINTAIN", "PASS"]
        assert "pressure_elevated" in [issue["id"] for issue in data["issues"]]
        assert data["maintenance"]["unit_type"] == "tank"
        assert len(data["financial"]["quotes"]) == 4

    def test_same_request_same_result(self):
        first = client.post(f"{API}/assess", json=get_valid_payload()).json()
        second = client.post(f"{API}/assess", json=get_valid_payload()).json()
        assert first == second

    def test_missing_fuel_type_defaults_to_gas(self):
        payload = get_valid_payload()
        del payload["inputs"]["fuel_type"]
        response = client.post(f"{API}/assess", json=payload)
        assert response.status_code == 200
        assert response.json()["inputs"]["fuel_type"] == "GAS"

    def test_tankless_assessment(self):
        payload = {"inputs": {"fuel_type": "TANKLESS_GAS", "gas_line_size": "1/2"}}
        response = client.post(f"{API}/assess", json=payload)
        assert response.status_code == 200
        assert response.json()["verdict"]["title"] == "Gas Supply Starvation"


class TestValidation:
    """Test 422 responses."""

    def test_unknown_fuel_type_returns_422(self):
        payload = get_valid_payload()
        payload["inputs"]["fuel_type"] = "WOOD"
        assert client.post(f"{API}/assess", json=payload).status_code == 422

    def test_bad_enum_returns_422(self):
        payload = get_valid_payload()
        payload["inputs"]["location"] = "ROOF"
        assert client.post(f"{API}/assess", json=payload).status_code == 422

    def test_bad_number_returns_422(self):
        payload = get_valid_payload()
        payload["inputs"]["house_psi"] = "high"
        assert client.post(f"{API}/assess", json=payload).status_code == 422

    def test_negative_values_clamped_not_rejected(self):
        payload = get_valid_payload()
        payload["inputs"]["calendar_age"] = -4
        response = client.post(f"{API}/assess", json=payload)
        assert response.status_code == 200
        assert response.json()["inputs"]["calendar_age"] == 0.0


class TestPartialEndpoints:
    """Test issues, maintenance and projection endpoints."""

    def test_issues(self):
        data = client.post(f"{API}/issues", json=get_valid_payload()).json()
        assert set(data) == {"verdict", "issues"}

    def test_maintenance(self):
        data = client.post(f"{API}/maintenance", json=get_valid_payload()).json()
        assert data["primary"]["type"] in ["flush", "anode"]

    def test_projection(self):
        payload = {"inputs": get_valid_payload()["inputs"], "months": [0, 12, 24]}
        data = client.post(f"{API}/project", json=payload).json()
        assert [point["months_ahead"] for point in data["trend"]] == [0, 12, 24]
        scores = [point["health_score"] for point in data["trend"]]
        assert scores == sorted(scores, reverse=True)

    def test_projection_default_months(self):
        payload = {"inputs": get_valid_payload()["inputs"]}
        data = client.post(f"{API}/project", json=payload).json()
        assert len(data["trend"]) == 6

    def test_empty_months_returns_422(self):
        payload = {"inputs": get_valid_payload()["inputs"], "months": []}
        assert client.post(f"{API}/project", json=payload).status_code == 422


class TestScenarios:
    """Test demo scenario endpoints."""

    def test_list(self):
        data = client.get(f"{API}/scenarios").json()
        assert len(data) == 12
        assert data[0]["name"] == "Perfect Unit"

    def test_detail_case_insensitive(self):
        response = client.get(f"{API}/scenarios/attic time bomb")
        assert response.status_code == 200
        assert response.json()["inputs"]["location"] == "ATTIC"

    def test_unknown_scenario_returns_404(self):
        assert client.get(f"{API}/scenarios/nope").status_code == 404
