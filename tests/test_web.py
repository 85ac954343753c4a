"""Tests for the HTTP scoring API."""

import pytest

from bdscore.config import Settings
from bdscore.web.app import create_app
from bdscore.web.state import WeightingStore


@pytest.fixture
def store():
    return WeightingStore(Settings())


@pytest.fixture
def client(store):
    """Create test client."""
    from fastapi.testclient import TestClient
    app = create_app(store)
    return TestClient(app)


class TestScoreEndpoint:
    """Test POST /api/v1/score."""

    def test_shape_example(self, client):
        """Mixed tags average out to SHAPE."""
        response = client.post("/api/v1/score", json={
            "raw_score": 70,
            "tags": ["training modernization", "commodity"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["adjusted_score"] == 67
        assert data["bucket"] == "SHAPE"
        assert data["matched_tags"] == {"training modernization": 1.6, "commodity": 0.3}

    def test_text_signals(self, client):
        response = client.post("/api/v1/score", json={
            "raw_score": 50,
            "tags": ["uniforms", "janitorial"],
            "text": "Janitorial services and uniforms",
        })
        data = response.json()
        assert data["adjusted_score"] == 5
        assert data["bucket"] == "AVOID"
        assert data["commodity"] is True

    def test_untagged(self, client):
        response = client.post("/api/v1/score", json={"raw_score": 79.6})
        data = response.json()
        assert data["adjusted_score"] == 80
        assert data["bucket"] == "CHASE"

    def test_missing_score(self, client):
        """Request validation rejects payloads without a score."""
        response = client.post("/api/v1/score", json={"tags": ["AI"]})
        assert response.status_code == 422

    def test_non_numeric_score(self, client):
        response = client.post("/api/v1/score", json={"raw_score": "high"})
        assert response.status_code == 422


class TestBucketEndpoint:
    """Test POST /api/v1/bucket."""

    @pytest.mark.parametrize("score,expected", [(80, "CHASE"), (60, "SHAPE"), (59.9, "MONITOR"), (-1, "AVOID")])
    def test_bucket(self, client, score, expected):
        response = client.post("/api/v1/bucket", json={"score": score})
        assert response.status_code == 200
        assert response.json()["bucket"] == expected

    def test_nan_rejected(self, client):
        """A NaN score is a 400, not AVOID."""
        response = client.post(
            "/api/v1/bucket",
            content='{"score": NaN}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestTextCheckEndpoint:
    """Test POST /api/v1/text/check."""

    def test_technical_text(self, client):
        response = client.post("/api/v1/text/check", json={"text": "database table schema"})
        data = response.json()
        assert data["commodity"] is False
        assert data["primary_domain_fit"] is False

    def test_commodity_and_domain(self, client):
        response = client.post("/api/v1/text/check", json={
            "text": "JADC2 command and control integration plus office furniture",
        })
        data = response.json()
        assert data["commodity"] is True
        assert "furniture" in data["commodity_keywords"]
        assert "jadc2" in data["primary_domain_keywords"]


class TestWeightingsEndpoints:
    """Test GET/PUT /api/v1/weightings."""

    def test_get_defaults(self, client):
        data = client.get("/api/v1/weightings").json()
        assert data["tag_weightings"]["JADC2"] == 1.5
        assert data["count"] == len(data["tag_weightings"])

    def test_put_replaces_wholesale(self, client, store):
        """Tags left out of the new table become neutral."""
        response = client.put("/api/v1/weightings", json={"tag_weightings": {"priority": 2.0}})
        assert response.status_code == 200
        assert response.json() == {"count": 1, "tag_weightings": {"priority": 2.0}}
        assert store.settings.tag_weightings == {"priority": 2.0}

        score = client.post("/api/v1/score", json={"raw_score": 40, "tags": ["priority", "commodity"]}).json()
        # (2.0 + 1.0) / 2 = 1.5
        assert score["adjusted_score"] == 60

    def test_put_empty_tag(self, client):
        response = client.put("/api/v1/weightings", json={"tag_weightings": {" ": 1.2}})
        assert response.status_code == 400

    def test_put_bad_multiplier(self, client):
        response = client.put("/api/v1/weightings", json={"tag_weightings": {"AI": "lots"}})
        assert response.status_code == 422


class TestHealth:
    """Test GET /api/v1/health."""

    def test_health(self, client):
        data = client.get("/api/v1/health").json()
        assert data["status"] == "ok"
        assert data["version"] == "1.2.0"
        assert data["weighting_tags"] > 0
