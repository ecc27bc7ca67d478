"""Tests for FastAPI main application."""

import pytest
from fastapi.testclient import TestClient

from industry_interview.document_store import get_document_store, reset_document_store
from industry_interview.main import app

INTERVIEW_URL = "/api/v1/onboarding/industry-interview"


@pytest.fixture
def client():
    """Create test client."""
    reset_document_store()
    with TestClient(app) as client:
        yield client
    reset_document_store()


def post(client, **body):
    return client.post(INTERVIEW_URL, json=body)


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test basic health check."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["activeDocuments"] == 0
        assert data["canonicalIndustries"] > 0

    def test_health_check_v1(self, client):
        """Test v1 health endpoint."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert "status" in response.json()

    def test_trace_id_echoed(self, client):
        """Test that the trace id header is propagated."""
        response = client.get("/health", headers={"X-Trace-ID": "abc123"})
        assert response.headers["X-Trace-ID"] == "abc123"

    def test_trace_id_generated(self, client):
        """Test that a trace id is generated when none is sent."""
        response = client.get("/health")
        assert len(response.headers["X-Trace-ID"]) == 32


class TestIndustryEndpoints:
    """Tests for the catalog endpoints."""

    def test_list_industries(self, client):
        """Test listing canonical industries."""
        response = client.get("/api/v1/industries")
        assert response.status_code == 200

        keys = [i["key"] for i in response.json()["industries"]]
        assert "auto_detailing" in keys
        assert "service" in keys

    def test_sub_industries(self, client):
        """Test sub-industries for an industry with platform defaults."""
        response = client.get("/api/v1/industries/Upholstery/sub-industries")
        assert response.status_code == 200

        data = response.json()
        assert data["industryKey"] == "upholstery"
        assert [s["key"] for s in data["subIndustries"]][:2] == ["auto", "marine"]

    def test_sub_industries_unknown_key(self, client):
        """Test that an empty key is rejected."""
        response = client.get("/api/v1/industries/%20/sub-industries")
        assert response.status_code == 404


class TestInterviewEndpoint:
    """Tests for the interview endpoint."""

    def test_start(self, client):
        """Test starting an interview."""
        response = post(client, tenantId="t1", action="start")
        assert response.status_code == 200

        data = response.json()
        assert data["ok"] is True
        assert data["tenantId"] == "t1"
        assert data["industryInference"]["status"] == "collecting"
        assert data["industryInference"]["nextQuestion"]["qid"] == "services"

    def test_get_state(self, client):
        """Test reading the stored state back."""
        post(client, tenantId="t1", action="start")

        response = client.get(f"{INTERVIEW_URL}/t1")
        assert response.status_code == 200
        assert response.json()["industryInference"]["nextQuestion"]["qid"] == "services"

    def test_get_state_trims_tenant_id(self, client):
        """Test that reads and writes agree on a tenant id with surrounding spaces."""
        post(client, tenantId=" t1 ", action="start")

        response = client.get(f"{INTERVIEW_URL}/%20t1%20")
        assert response.status_code == 200

        data = response.json()
        assert data["tenantId"] == "t1"
        assert data["industryInference"]["nextQuestion"]["qid"] == "services"

    def test_get_state_unknown_tenant(self, client):
        """Test that an unknown tenant gets a fresh interview."""
        response = client.get(f"{INTERVIEW_URL}/nobody")
        assert response.status_code == 200

        inference = response.json()["industryInference"]
        assert inference["round"] == 1
        assert inference["nextQuestion"] is None

    def test_answer_suggests(self, client):
        """Test a clear answer producing a suggestion."""
        post(client, tenantId="t1", action="start")
        response = post(
            client,
            tenantId="t1",
            action="answer",
            qid="services",
            answer="ceramic coating and detailing",
        )
        assert response.status_code == 200

        inference = response.json()["industryInference"]
        assert inference["status"] == "suggested"
        assert inference["suggestedIndustryKey"] == "auto_detailing"
        assert inference["needsConfirmation"] is True

        document = get_document_store().get("t1")
        assert document["suggestedIndustryKey"] == "auto_detailing"
        assert document["industryInference"]["mode"] == "interview"

    def test_structured_answer_stored_as_json(self, client):
        """Test that non-string answers are stored as JSON text."""
        post(client, tenantId="t1", action="start")
        response = post(client, tenantId="t1", action="answer", qid="services", answer=["Plumbing"])
        assert response.status_code == 200

        inference = response.json()["industryInference"]
        assert inference["answers"][0]["answer"] == '["Plumbing"]'
        assert inference["suggestedIndustryKey"] == "plumbing"

    def test_missing_answer(self, client):
        """Test that an answer without text is rejected and nothing is stored."""
        post(client, tenantId="t1", action="start")
        before = get_document_store().get("t1")

        response = post(client, tenantId="t1", action="answer", qid="services", answer="  ")
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "ANSWER_REQUIRED"
        assert get_document_store().get("t1") == before

    def test_missing_qid(self, client):
        """Test that an answer without a qid is rejected."""
        response = post(client, tenantId="t1", action="answer", answer="HVAC")
        assert response.status_code == 400

    def test_invalid_action(self, client):
        """Test that unknown actions fail validation."""
        response = post(client, tenantId="t1", action="finish")
        assert response.status_code == 422

    def test_reset(self, client):
        """Test resetting a finished interview."""
        post(client, tenantId="t1", action="start")
        post(client, tenantId="t1", action="answer", qid="services", answer="ceramic coating and detailing")

        response = post(client, tenantId="t1", action="reset")
        assert response.status_code == 200

        inference = response.json()["industryInference"]
        assert inference["status"] == "collecting"
        assert inference["answers"] == []
        assert get_document_store().get("t1")["suggestedIndustryKey"] is None

    def test_other_document_fields_preserved(self, client):
        """Test that unrelated onboarding fields survive interview writes."""
        get_document_store().set("t1", {"businessName": "Shiny Cars"})
        post(client, tenantId="t1", action="start")

        document = get_document_store().get("t1")
        assert document["businessName"] == "Shiny Cars"
        assert "industryInference" in document

    def test_tenants_isolated(self, client):
        """Test that tenants do not share state."""
        post(client, tenantId="a", action="start")
        post(client, tenantId="a", action="answer", qid="services", answer="ceramic coating and detailing")
        post(client, tenantId="b", action="start")

        response = client.get(f"{INTERVIEW_URL}/b")
        assert response.json()["industryInference"]["status"] == "collecting"


class TestMetricsEndpoint:
    """Tests for the Prometheus endpoint."""

    def test_metrics_exposed(self, client):
        """Test that interview metrics are exported."""
        post(client, tenantId="t1", action="start")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "interview_actions_total" in response.text
