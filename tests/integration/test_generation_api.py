from __future__ import annotations

import json

import pytest
from app.ai.errors import AIErrorCode, AIServiceError
from app.api.deps import get_chat_model
from app.main import app


@pytest.mark.anyio
async def test_health_reports_version(async_client) -> None:
  response = await async_client.get("/health")
  assert response.status_code == 200
  assert response.json()["status"] == "ok"
  assert response.headers["x-request-id"]


@pytest.mark.anyio
async def test_resources_returns_wire_envelope(async_client, fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Adding", "problems": [{"question": "1 + 2", "answer": "3"}]})]

  response = await async_client.post("/api/resources", json={"subject": "Math", "gradeLevel": "1", "questionCount": 1, "theme": "Winter"})

  assert response.status_code == 200
  body = response.json()
  assert body["title"] == "Adding"
  assert body["metadata"]["subject"] == "Math"
  problems = json.loads(body["sections"][0]["content"])
  assert problems[0]["question"] == "1 + 2"
  assert "answer" not in problems[0]


@pytest.mark.anyio
async def test_generate_math_keeps_answers(async_client, fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Doubles", "problems": [{"question": "6 + 6", "answer": "12"}, {"question": "7 + 7", "answer": "14"}]})]

  response = await async_client.post("/api/generate/math", json={"gradeLevel": "2", "questionCount": 2, "difficulty": "easy"})

  assert response.status_code == 200
  body = response.json()
  assert body["title"] == "Doubles"
  assert [problem["answer"] for problem in body["problems"]] == ["12", "14"]


@pytest.mark.anyio
async def test_resources_validates_options(async_client) -> None:
  response = await async_client.post("/api/resources", json={"subject": "Math", "questionCount": -1})
  assert response.status_code == 422
  assert "input" not in response.json()["detail"][0]


@pytest.mark.anyio
async def test_generate_worksheet(async_client, fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Halves", "problems": [{"question": "Half of 6?", "answer": "3"}]})]

  response = await async_client.post("/api/generate", json={"subject": "math", "format": "standard", "gradeLevel": "3", "questionCount": 1})

  assert response.status_code == 200
  assert response.json()["problems"][0]["answer"] == "3"


@pytest.mark.anyio
async def test_generate_unknown_format_is_a_client_error(async_client, fake_model) -> None:
  response = await async_client.post("/api/generate", json={"subject": "math", "format": "poster"})

  assert response.status_code == 400
  body = response.json()
  assert body["subject"] == "math"
  assert body["format"] == "poster"
  assert body["requestId"] == response.headers["x-request-id"]
  assert fake_model.calls == []


@pytest.mark.anyio
async def test_generate_quiz(async_client, fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Planets", "questions": [{"question": "Largest planet?", "options": ["Mars", "Jupiter"], "correctAnswer": "Jupiter"}]})]
  payload = {"grade": "4", "subject": "Science", "topicArea": "planets", "questionCount": 1, "selectedQuestionTypes": ["multiple_choice"], "theme": "Spring"}

  response = await async_client.post("/api/generate/quiz", json=payload)

  assert response.status_code == 200
  body = response.json()
  assert body["questions"][0]["answer"] == "Jupiter"
  assert body["totalPoints"] == 1


@pytest.mark.anyio
async def test_generate_quiz_requires_every_field(async_client, fake_model) -> None:
  response = await async_client.post("/api/generate/quiz", json={"grade": "4", "subject": "Science"})
  assert response.status_code == 400
  assert response.json()["detail"] == "Missing required fields"
  assert fake_model.calls == []


@pytest.mark.anyio
async def test_chat_requires_messages(async_client) -> None:
  response = await async_client.post("/api/chat", json={})
  assert response.status_code == 400
  assert response.json()["detail"] == "Invalid request: messages array is required"


@pytest.mark.anyio
async def test_chat_returns_assistant_turn(async_client, fake_model) -> None:
  fake_model.responses = ["Start with a number talk."]
  response = await async_client.post("/api/chat", json={"messages": [{"role": "user", "content": "Warm-up ideas?"}]})
  assert response.json() == {"content": "Start with a number talk.", "role": "assistant"}


@pytest.mark.anyio
async def test_missing_api_key_is_service_unavailable(async_client) -> None:
  def _unconfigured():
    raise AIServiceError("OPENAI_API_KEY is not set", AIErrorCode.MISSING_API_KEY)

  app.dependency_overrides[get_chat_model] = _unconfigured
  response = await async_client.post("/api/generate", json={"subject": "math", "format": "standard"})

  assert response.status_code == 503
  assert response.json()["code"] == "MISSING_API_KEY"
  assert "OPENAI_API_KEY" not in response.text


@pytest.mark.anyio
async def test_inbound_request_id_is_echoed(async_client) -> None:
  response = await async_client.get("/health", headers={"x-request-id": "lb-trace-0001"})
  assert response.headers["x-request-id"] == "lb-trace-0001"
  assert "server" not in response.headers
