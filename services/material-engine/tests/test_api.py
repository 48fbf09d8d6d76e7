"""
API Tests for the Material Engine service

Tests:
1. Health and subtype catalogue endpoints
2. Analyze / prompt / structure / validate endpoints
3. Generate endpoint success and upstream failures
4. Request validation
"""

import json
import os
import sys
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from core.pipeline import MaterialPipeline
from providers.llm_provider import CompletionError


@pytest.fixture
def mock_client():
    client = AsyncMock()
    client.complete = AsyncMock(side_effect=CompletionError("no model in tests"))
    return client


@pytest.fixture
def api(monkeypatch, mock_client):
    monkeypatch.setattr(main, "pipeline", MaterialPipeline(config=main.config, completion_client=mock_client))
    with TestClient(main.app) as client:
        yield client


class TestCatalogue:

    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_subtypes(self, api):
        data = api.get("/api/v1/subtypes").json()
        assert data["total_count"] == 18

    def test_filter_subtypes(self, api):
        data = api.get("/api/v1/subtypes", params={"material_type": "quiz"}).json()
        assert [s["id"] for s in data["subtypes"]] == [
            "formative-assessment", "summative-test", "diagnostic-assessment",
        ]

    def test_get_subtype(self, api):
        response = api.get("/api/v1/subtypes/practice-problems")
        assert response.status_code == 200
        assert response.json()["parent_type"] == "worksheet"

    def test_missing_subtype(self, api):
        assert api.get("/api/v1/subtypes/neexistuje").status_code == 404


class TestStages:

    def test_analyze_falls_back_when_model_fails(self, api):
        response = api.post("/api/v1/analyze", json={"description": "Cvičení pro 5. třídu, předmět matematika."})

        assert response.status_code == 200
        data = response.json()
        assert data["subject"] == "matematika"
        assert data["confidence"] == 0.5

    def test_prompt(self, api):
        response = api.post("/api/v1/prompt", json={
            "material_type": "worksheet",
            "user_inputs": {"title": "Zlomky", "question_count": 5},
            "subtype_id": "practice-problems",
        })

        assert response.status_code == 200
        data = response.json()
        assert "- Počet úloh: 5" in data["prompt"]
        assert data["analysis"] is None

    def test_invalid_material_type(self, api):
        response = api.post("/api/v1/prompt", json={"material_type": "plakát"})
        assert response.status_code == 422

    def test_structure(self, api, sample_lesson_plan):
        response = api.post("/api/v1/structure", json={"material_type": "lesson-plan", "content": sample_lesson_plan})

        assert response.status_code == 200
        data = response.json()
        assert data["originalContent"] == sample_lesson_plan
        assert len(data["structuredContent"]["transitions"]) == 2
        assert data["educationalMetadata"]["assessmentType"] == "Smíšené hodnocení"

    def test_validate_detects_type(self, api):
        response = api.post("/api/v1/validate", json={"content": {"title": "Kvíz", "questions": [{"question": "Co?"}]}})

        data = response.json()
        assert data["materialType"] == "quiz"
        assert data["isValid"] is False

    def test_validate_non_object_content(self, api):
        data = api.post("/api/v1/validate", json={"content": "text", "material_type": "worksheet"}).json()
        assert data["isValid"] is False
        assert data["score"]["overall"] == 0.0


class TestGenerate:

    def test_generate(self, api, mock_client, sample_worksheet):
        mock_client.complete.side_effect = None
        mock_client.complete.return_value = json.dumps(sample_worksheet)

        response = api.post("/api/v1/generate", json={"material_type": "worksheet"})

        assert response.status_code == 200
        assert response.json()["content"] == sample_worksheet

    def test_completion_failure_is_bad_gateway(self, api):
        response = api.post("/api/v1/generate", json={"material_type": "worksheet"})
        assert response.status_code == 502

    def test_undecodable_reply_is_bad_gateway(self, api, mock_client):
        mock_client.complete.side_effect = None
        mock_client.complete.return_value = "Tady je materiál bez JSON."

        response = api.post("/api/v1/generate", json={"material_type": "quiz"})
        assert response.status_code == 502
