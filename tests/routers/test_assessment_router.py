import inspect
from collections import Counter
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from config.settings import AppSettings, get_settings
from services.suitability_engine.models import AssessmentResultRecord
from src.db.database import get_db
from src.routers.assessment import router as assessment_router, get_suitability_engine
from src.services import storage
from src.services.drafts import DraftStore, get_draft_store

TEST_SETTINGS = AppSettings(question_count=8, top_n=2)


@pytest.fixture
def draft_store():
    data = {}
    client = MagicMock()
    client.set.side_effect = lambda key, value, ex=None: data.__setitem__(key, value) or True
    client.get.side_effect = lambda key: data.get(key)
    client.delete.side_effect = lambda key: 1 if data.pop(key, None) is not None else 0
    return DraftStore(client)


@pytest.fixture
def client(session_factory, draft_store, make_catalog):
    seed = session_factory()
    storage.replace_question_catalog(seed, make_catalog(5))
    seed.close()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = FastAPI()
    app.include_router(assessment_router, prefix="/api/v1")
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_draft_store] = lambda: draft_store
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def start(client, **body):
    response = client.post("/api/v1/assessments", json=body)
    assert response.status_code == 201
    return response.json()


def test_start_assessment_uses_configured_question_count(client):
    state = start(client)

    assert len(state["draft"]["question_ids"]) == 8
    assert [q["id"] for q in state["questions"]] == state["draft"]["question_ids"]
    assert Counter(q["category"] for q in state["questions"]) == Counter(
        {"skills": 2, "preferences": 2, "readiness": 2, "motivation": 2}
    )
    assert state["progress"] == 0.0
    assert state["complete"] is False


def test_start_assessment_with_explicit_count(client):
    state = start(client, question_count=4)
    assert len(state["draft"]["question_ids"]) == 4


def test_get_assessment_returns_same_questions(client):
    state = start(client)
    session_id = state["draft"]["session_id"]

    response = client.get(f"/api/v1/assessments/{session_id}")

    assert response.status_code == 200
    assert response.json()["draft"]["question_ids"] == state["draft"]["question_ids"]


def test_unknown_session_returns_404(client):
    assert client.get("/api/v1/assessments/missing").status_code == 404
    assert client.put("/api/v1/assessments/missing/answers", json={"question_id": "x", "score": 3}).status_code == 404
    assert client.post("/api/v1/assessments/missing/complete").status_code == 404


def test_answer_updates_draft(client):
    state = start(client)
    session_id = state["draft"]["session_id"]
    first_id = state["draft"]["question_ids"][0]

    response = client.put(f"/api/v1/assessments/{session_id}/answers", json={"question_id": first_id, "score": 4})

    assert response.status_code == 200
    body = response.json()
    assert body["draft"]["answers"] == {first_id: 4}
    assert body["draft"]["current_index"] == 1
    assert body["progress"] == pytest.approx(1 / 8)

    back = client.post(f"/api/v1/assessments/{session_id}/back")
    assert back.json()["draft"]["current_index"] == 0


def test_answer_for_question_outside_draft_is_400(client):
    session_id = start(client)["draft"]["session_id"]
    response = client.put(f"/api/v1/assessments/{session_id}/answers", json={"question_id": "nope", "score": 3})
    assert response.status_code == 400
    assert "not part of assessment" in response.json()["detail"]


def test_out_of_range_score_is_422(client):
    state = start(client)
    session_id = state["draft"]["session_id"]
    response = client.put(
        f"/api/v1/assessments/{session_id}/answers",
        json={"question_id": state["draft"]["question_ids"][0], "score": 6},
    )
    assert response.status_code == 422


def test_complete_incomplete_assessment_is_422(client):
    session_id = start(client)["draft"]["session_id"]
    response = client.post(f"/api/v1/assessments/{session_id}/complete")
    assert response.status_code == 422
    assert "Missing answers" in response.json()["detail"]


def test_full_assessment_flow(client, draft_store):
    state = start(client)
    session_id = state["draft"]["session_id"]
    for qid in state["draft"]["question_ids"]:
        response = client.put(f"/api/v1/assessments/{session_id}/answers", json={"question_id": qid, "score": 4})
        assert response.status_code == 200
    assert response.json()["complete"] is True

    response = client.post(f"/api/v1/assessments/{session_id}/complete")

    assert response.status_code == 200
    record = AssessmentResultRecord.model_validate(response.json())
    assert record.session_id == session_id
    assert record.all_business_scores == {"A": 80}
    assert [(b.business_type, b.score) for b in record.top_business_types] == [("A", 80)]
    assert record.category_scores == {"skills": 80, "preferences": 80, "readiness": 80, "motivation": 80}
    assert len(record.answers) == 8

    # Draft is cleared once the result is stored
    assert draft_store.load(session_id) is None

    stored = client.get(f"/api/v1/results/{session_id}")
    assert stored.status_code == 200
    assert stored.json()["all_business_scores"] == {"A": 80}

    # Completing again returns the stored record
    again = client.post(f"/api/v1/assessments/{session_id}/complete")
    assert again.status_code == 200
    assert again.json()["id"] == stored.json()["id"]

    stats = client.get("/api/v1/statistics").json()
    assert stats["total_assessments"] == 1
    assert stats["business_type_stats"] == [{"business_type": "A", "count": 1, "percentage": 100}]


def test_partial_completion_when_allowed(client):
    state = start(client)
    session_id = state["draft"]["session_id"]
    qid = state["draft"]["question_ids"][0]
    client.put(f"/api/v1/assessments/{session_id}/answers", json={"question_id": qid, "score": 2})

    response = client.post(f"/api/v1/assessments/{session_id}/complete", params={"allow_partial": True})

    assert response.status_code == 200
    assert response.json()["all_business_scores"] == {"A": 40}


def test_restart_discards_draft(client):
    session_id = start(client)["draft"]["session_id"]
    assert client.delete(f"/api/v1/assessments/{session_id}").status_code == 204
    assert client.get(f"/api/v1/assessments/{session_id}").status_code == 404


def test_draft_storage_failure_is_503(client):
    failing = MagicMock(spec=DraftStore)
    failing.save.return_value = False
    client.app.dependency_overrides[get_draft_store] = lambda: failing

    response = client.post("/api/v1/assessments", json={})

    assert response.status_code == 503


def test_result_for_unknown_session_is_404(client):
    assert client.get("/api/v1/results/unknown").status_code == 404


def test_list_questions(client):
    response = client.get("/api/v1/questions")
    assert response.status_code == 200
    assert len(response.json()) == 20


def test_import_questions_replaces_catalog(client):
    sheet = "\n".join([
        "ธุรกิจบริการ\tSkill\tดูแลลูกค้า\tคุณชอบดูแลลูกค้าหรือไม่",
        "ธุรกิจการเกษตร\tMotivation\tปลูกผัก\tคุณอยากทำฟาร์มหรือไม่",
        "broken line",
    ])

    response = client.post("/api/v1/questions/import", json={"raw_data": sheet})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Successfully imported 2 questions",
        "imported": 2,
        "skipped": 1,
    }
    questions = client.get("/api/v1/questions").json()
    assert [q["id"] for q in questions] == ["q001", "q002"]


def test_import_empty_payload_is_400(client):
    response = client.post("/api/v1/questions/import", json={"raw_data": "   "})
    assert response.status_code == 400


def test_engine_failure_on_complete_is_500(client):
    session_id = start(client)["draft"]["session_id"]
    broken_engine = MagicMock()
    broken_engine.build_result_record.side_effect = Exception("A critical engine failure occurred")
    client.app.dependency_overrides[get_suitability_engine] = lambda: broken_engine

    response = client.post(f"/api/v1/assessments/{session_id}/complete")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_import_preview_leaves_catalog_alone(client):
    sheet = "\n".join([
        "ธุรกิจเกษตรกรรม\tSkill\tปลูกผัก\tคุณชอบปลูกผักหรือไม่",
        "ร้านกาแฟ\tInterest\tกาแฟ\tคุณชอบกาแฟหรือไม่",
        "broken line",
    ])

    response = client.post("/api/v1/questions/import/preview", json={"raw_data": sheet})

    assert response.status_code == 200
    assert response.json() == {
        "processed": 2,
        "skipped": 1,
        "total": 3,
        "unknown_business_types": ["ร้านกาแฟ"],
    }
    assert len(client.get("/api/v1/questions").json()) == 20


def test_import_preview_empty_payload_is_400(client):
    response = client.post("/api/v1/questions/import/preview", json={"raw_data": ""})
    assert response.status_code == 400


def test_route_handlers_run_in_threadpool():
    # Handlers call blocking SQLAlchemy and redis clients, so none may be a coroutine
    endpoints = [route.endpoint for route in assessment_router.routes if isinstance(route, APIRoute)]
    assert endpoints
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
