import json

import pytest
from fastapi.testclient import TestClient

from api.routes import get_pipeline
from api_server import app
from grading.pipeline import MarkingPipeline


@pytest.fixture
def stub_client(catalog, make_stub):
    stub = make_stub()
    app.dependency_overrides[get_pipeline] = lambda: MarkingPipeline(catalog, stub, api_key="sk-test")
    try:
        with TestClient(app) as client:
            yield client, stub
    finally:
        app.dependency_overrides.clear()


def test_mark_happy_path(stub_client, full_body, station):
    client, stub = stub_client
    resp = client.post("/api/mark", json=full_body)
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    body = resp.json()
    assert body["station"]["title"] == station.title
    assert body["overall"] == 7
    assert body["model_f1_full"] == station.question("f1").reference.full
    assert stub.calls == 1
    assert "I would assess capacity" in stub.requests[0].user_prompt


def test_preflight_is_empty_success(stub_client):
    client, stub = stub_client
    resp = client.options(
        "/api/mark",
        headers={"Origin": "https://example.test", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "POST" in resp.headers["access-control-allow-methods"]
    assert stub.calls == 0


def test_wrong_method(stub_client):
    client, _ = stub_client
    resp = client.get("/api/mark")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed. Use POST."}


def test_invalid_json_body(stub_client):
    client, stub = stub_client
    resp = client.post("/api/mark", content=b"{oops", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid JSON body."
    assert stub.calls == 0


def test_legacy_field_names(stub_client):
    client, stub = stub_client
    resp = client.post("/api/mark", content=json.dumps({"name": "Kim", "aMain": "Main answer", "a1": "One"}))
    assert resp.status_code == 200
    assert resp.json()["candidate"] == "Kim"
    assert "FU2 ANSWER:\n(no answer provided)" in stub.requests[0].user_prompt


def test_blank_main_answer(stub_client):
    client, stub = stub_client
    resp = client.post("/api/mark", json={"answers": {"main": "   "}})
    assert resp.status_code == 400
    assert resp.json()["details"] == {"missing": ["answers.main"]}
    assert stub.calls == 0


def test_missing_credential_via_settings(monkeypatch, full_body):
    from config.settings import settings

    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    with TestClient(app) as client:
        resp = client.post("/api/mark", json=full_body)
    assert resp.status_code == 500
    assert "OPENAI_API_KEY" in resp.json()["error"]


def test_station_listing_and_health(stub_client):
    client, _ = stub_client
    stations = client.get("/api/stations").json()
    assert [item["id"] for item in stations] == ["blood_transfusion_refusal"]
    assert [q["id"] for q in stations[0]["questions"]] == ["main", "f1", "f2", "f3"]
    assert client.get("/healthz").json() == {"status": "ok"}


@pytest.mark.parametrize(
    "text",
    ['{"empathy": 1' + "0" * 5000 + "}", "[" * 200000],
    ids=["huge-integer", "deep-nesting"],
)
def test_pathological_model_output_keeps_json_envelope(catalog, make_stub, envelope_for, full_body, text):
    stub = make_stub(envelope_for(text))
    app.dependency_overrides[get_pipeline] = lambda: MarkingPipeline(catalog, stub, api_key="sk-test")
    try:
        with TestClient(app) as client:
            resp = client.post("/api/mark", json=full_body)
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.headers["access-control-allow-origin"] == "*"
    body = resp.json()
    assert body["error"] == "Invalid model JSON"
    assert body["raw"] == text
