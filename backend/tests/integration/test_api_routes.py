#!/usr/bin/env python3
"""
Test the API endpoints in-process with the FastAPI test client
"""

import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from summit.main import app, resolve_default_strategy
from summit.services import surface as surface_module


@pytest.fixture
def client():
    return TestClient(app)


@pytest.mark.integration
class TestClimbAPI:
    """Test climb calculation through the API"""

    def test_health_endpoint(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_calculate_up(self, client, canonical_heightmap):
        response = client.post("/api/climbs/calculate", json={"heightmap": canonical_heightmap})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["direction"] == "ascend"
        assert data["steps"] == 31
        assert data["path"][0] == {"x": 0, "y": 0}
        assert data["path"][-1] == {"x": 5, "y": 2}
        assert data["stats"]["waypoints"] == 32

    @pytest.mark.parametrize("strategy", ["breadth_first", "branch_and_bound"])
    def test_calculate_down(self, client, canonical_heightmap, strategy):
        response = client.post("/api/climbs/calculate", json={
            "heightmap": canonical_heightmap,
            "direction": "descend",
            "strategy": strategy
        })

        assert response.status_code == 200
        data = response.json()
        assert data["steps"] == 29
        assert data["stats"]["strategy"] == strategy

    def test_malformed_heightmap(self, client):
        response = client.post("/api/climbs/calculate", json={"heightmap": "S"})

        assert response.status_code == 422
        assert "'E'" in response.json()["detail"]

    def test_unknown_strategy(self, client, canonical_heightmap):
        response = client.post("/api/climbs/calculate", json={
            "heightmap": canonical_heightmap,
            "strategy": "dijkstra"
        })
        assert response.status_code == 422

    def test_unreachable(self, client, unreachable_heightmap):
        response = client.post("/api/climbs/calculate", json={"heightmap": unreachable_heightmap})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert data["steps"] is None
        assert data["path"] == []
        assert data["message"] == "No route found"

    def test_get_stored_climb(self, client, canonical_heightmap):
        created = client.post("/api/climbs/calculate", json={"heightmap": canonical_heightmap}).json()

        response = client.get(f"/api/climbs/{created['climbId']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_climb(self, client):
        response = client.get("/api/climbs/not-a-climb")
        assert response.status_code == 404

    def test_heightmap_is_parsed_once(self, client, canonical_heightmap):
        with patch('summit.services.surface._split_rows', wraps=surface_module._split_rows) as split:
            response = client.post("/api/climbs/calculate", json={"heightmap": canonical_heightmap})

        assert response.status_code == 200
        assert response.json()["steps"] == 31
        assert split.call_count == 1

    def test_line_separator_is_rejected(self, client):
        response = client.post("/api/climbs/calculate", json={"heightmap": "Sab\u2028abE"})
        assert response.status_code == 422


@pytest.mark.integration
class TestDefaultStrategy:
    """SUMMIT_SEARCH_STRATEGY picks the strategy used when a request names none"""

    def test_unset(self):
        assert resolve_default_strategy({}) == "breadth_first"

    def test_valid_value(self):
        assert resolve_default_strategy({"SUMMIT_SEARCH_STRATEGY": "branch_and_bound"}) == "branch_and_bound"

    def test_unknown_value_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="summit.main"):
            strategy = resolve_default_strategy({"SUMMIT_SEARCH_STRATEGY": "dijkstra"})

        assert strategy == "breadth_first"
        assert "SUMMIT_SEARCH_STRATEGY='dijkstra'" in caplog.text
