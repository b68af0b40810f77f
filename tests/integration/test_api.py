"""
Integration Tests for the FastAPI Backend

Tests for API endpoints: health checks, engine evaluation and diagnosis
records.  Uses async httpx for ASGI app testing.
"""
import uuid

import pytest
import httpx

from app.main import app


@pytest.fixture
async def async_client():
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def auth_headers():
    """Fresh organization per test so stored records never overlap."""
    return {"X-Organization-ID": f"org-{uuid.uuid4()}", "X-User-ID": "dr-test"}


@pytest.fixture
def patient_payload():
    return {
        "patient_id": "patient-42",
        "submissions": [
            {"id": "s2", "status": "draft", "responses": {"q1": "rascunho"}},
            {"id": "s1", "status": "completed", "responses": {"q1": "estou com muita fadiga"}},
        ],
        "exams": [
            {
                "id": "e1",
                "status": "ready",
                "created_at": "2026-04-10T08:00:00Z",
                "markers": [
                    {"name": "CRP", "value": 12, "unit": "mg/L"},
                    {"name": "TSH", "value": 2.0},
                ],
            },
        ],
    }


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
class TestEvaluateEndpoint:
    """Tests for the stateless engine endpoint."""

    async def test_empty_input(self, async_client):
        response = await async_client.post("/api/v1/diagnosis/evaluate", json={})
        assert response.status_code == 200

        data = response.json()
        assert data["confidence"] == 40
        assert [c["name"] for c in data["conditions"]] == [
            "Insufficient laboratory data for robust hypothesis"
        ]
        assert "TSH" in data["recommended_exams"]
        assert "Free T4" in data["recommended_exams"]

    async def test_vitamin_d_with_reference(self, async_client):
        request_data = {
            "markers": [{
                "name": "Vitamin D", "value": 15, "unit": "ng/mL",
                "reference_min": 30, "reference_max": 100,
                "exam_date": "2026-05-02T10:00:00Z",
            }],
        }
        response = await async_client.post("/api/v1/diagnosis/evaluate", json=request_data)
        assert response.status_code == 200

        condition = response.json()["conditions"][0]
        assert condition["name"] == "Vitamin D insufficiency tendency"
        assert condition["severity"] == "high"
        assert condition["probability"] == 88
        assert condition["supporting_evidence"] == ["Vitamin D: 15 ng/mL (ref 30-100)"]

    async def test_marker_requires_exam_date(self, async_client):
        response = await async_client.post(
            "/api/v1/diagnosis/evaluate",
            json={"markers": [{"name": "TSH", "value": 3}]},
        )
        assert response.status_code == 422


@pytest.mark.asyncio
class TestDiagnosisRecords:
    """Tests for analyze / list / get / review."""

    async def test_analyze_requires_auth(self, async_client, patient_payload):
        response = await async_client.post("/api/v1/diagnosis/analyze", json=patient_payload)
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHENTICATED"

    async def test_analyze_patient(self, async_client, auth_headers, patient_payload):
        response = await async_client.post(
            "/api/v1/diagnosis/analyze", json=patient_payload, headers=auth_headers
        )
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "draft"
        assert data["patient_id"] == "patient-42"
        assert data["suggested_conditions"][0]["probability"] == 91
        assert data["input_snapshot"]["submission_id"] == "s1"
        assert data["input_snapshot"]["analyzed_exam_ids"] == ["e1"]
        assert "TSH" not in data["recommended_exams"]

    async def test_list_get_review(self, async_client, auth_headers, patient_payload):
        created = (await async_client.post(
            "/api/v1/diagnosis/analyze", json=patient_payload, headers=auth_headers
        )).json()

        listing = await async_client.get("/api/v1/diagnosis", headers=auth_headers)
        assert listing.status_code == 200
        assert listing.json()["total"] == 1
        assert listing.json()["items"][0]["id"] == created["id"]

        fetched = await async_client.get(f"/api/v1/diagnosis/{created['id']}", headers=auth_headers)
        assert fetched.status_code == 200

        reviewed = await async_client.put(
            f"/api/v1/diagnosis/{created['id']}/review",
            json={"clinical_notes": "Repetir PCR em 30 dias."},
            headers=auth_headers,
        )
        assert reviewed.status_code == 200
        assert reviewed.json()["status"] == "reviewed"
        assert reviewed.json()["clinical_notes"] == "Repetir PCR em 30 dias."

    async def test_get_from_other_organization(self, async_client, auth_headers, patient_payload):
        created = (await async_client.post(
            "/api/v1/diagnosis/analyze", json=patient_payload, headers=auth_headers
        )).json()

        other = {"X-Organization-ID": "org-other", "X-User-ID": "dr-x"}
        response = await async_client.get(f"/api/v1/diagnosis/{created['id']}", headers=other)
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    async def test_invalid_status_filter(self, async_client, auth_headers):
        response = await async_client.get(
            "/api/v1/diagnosis", params={"status": "archived"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "status"
