from __future__ import annotations

import json
from unittest.mock import MagicMock
from urllib.parse import quote

import pytest
from app.api.deps import get_share_service
from app.main import app
from app.services.sharing import ShareService
from fastapi.testclient import TestClient

WORKSHEET = {"title": "My Quiz!", "subject": "Math", "grade_level": "2", "format": "standard", "problems": [{"question": "3 + 4 = ?", "answer": "7"}]}


@pytest.mark.anyio
async def test_pdf_is_an_attachment(async_client) -> None:
  response = await async_client.post("/api/generate/pdf", json=WORKSHEET)

  assert response.status_code == 200
  assert response.headers["content-type"] == "application/pdf"
  assert response.headers["content-disposition"] == 'attachment; filename="my_quiz_.pdf"'
  assert response.content.startswith(b"%PDF")


@pytest.mark.anyio
async def test_pdf_rejects_resource_without_title(async_client) -> None:
  response = await async_client.post("/api/generate/pdf", json={"subject": "Math"})
  assert response.status_code == 400
  assert response.json()["detail"] == "Invalid resource data provided"


@pytest.mark.anyio
async def test_pdf_unknown_subject_is_a_client_error(async_client) -> None:
  response = await async_client.post("/api/generate/pdf", json={"title": "Mural", "subject": "Art", "format": "standard"})
  assert response.status_code == 400


@pytest.mark.anyio
async def test_download_link_renders_pdf(async_client) -> None:
  data = quote(json.dumps(WORKSHEET), safe="")
  response = await async_client.get(f"/api/generate/pdf/download?data={data}")
  assert response.status_code == 200
  assert response.content.startswith(b"%PDF")


@pytest.mark.anyio
@pytest.mark.parametrize(("query", "detail"), [("", "No worksheet data provided"), ("?data=%7Bnot-json", "Invalid worksheet data format")])
async def test_download_link_errors(async_client, query, detail) -> None:
  response = await async_client.get(f"/api/generate/pdf/download{query}")
  assert response.status_code == 400
  assert response.json()["detail"] == detail


@pytest.mark.anyio
async def test_formats_listing_and_preview(async_client) -> None:
  listing = await async_client.get("/api/formats/reading")
  assert listing.json() == {"subject": "reading", "formats": ["comprehension", "vocabulary_context", "literary_analysis"]}

  preview = await async_client.post("/api/formats/preview", json=WORKSHEET)
  assert preview.status_code == 200
  html = preview.json()["html"]
  assert "3 + 4 = ?" in html
  assert "Answer Key" not in html


@pytest.mark.anyio
async def test_transform_shapes_raw_output(async_client) -> None:
  response = await async_client.post("/api/formats/transform", json={"subject": "science", "format": "observation_analysis", "title": "Plants"})
  assert response.status_code == 200
  assert response.json()["format"] == "analysis_focus"


def test_share_rejects_invalid_addresses():
  client = TestClient(app)
  response = client.post("/api/share", json={"recipients": ["nope"], "worksheetData": WORKSHEET})
  assert response.status_code == 400
  assert response.json() == {"success": False, "error": "Invalid email addresses: nope"}


def test_share_sends_with_configured_sender():
  sender = MagicMock()
  app.dependency_overrides[get_share_service] = lambda: ShareService(sender, base_url="https://teachkit.example")
  client = TestClient(app)

  try:
    response = client.post("/api/share", json={"recipients": ["teacher@example.com"], "worksheetData": WORKSHEET})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Successfully sent worksheet to 1 recipient(s)"}
    assert sender.send.call_args.args[0].subject == "Shared Worksheet: My Quiz!"
  finally:
    app.dependency_overrides.clear()
