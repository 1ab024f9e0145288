"""Tests for the FastAPI transport."""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import PNG_B64, PNG_BYTES
from homefix.utils.errors import ErrorType, UpstreamCallError
from server import STATUS_CODES, create_app

BOM_REPLY = json.dumps({"parts": [], "tools": [{"name": "Wrench", "price_min": 10, "price_max": 15}]})


@pytest.fixture
def http(application):
    return TestClient(create_app(application))


def test_health(http):
    response = http.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["model"]["model_id"] == "test-model"


def test_manifest(http):
    body = http.get("/mcp/manifest").json()

    assert body["name"] == "Home Repair Diagnosis"
    assert len(body["tools"]) == 5


def test_tool_call_gas_scenario(http, mock_bedrock):
    mock_bedrock.converse.side_effect = ["Water heater issue\nNo concerns.", BOM_REPLY]

    response = http.post("/mcp/tools/analyze_issue", json={
        "description": "gas smell near the water heater",
        "photos": [f"data:image/png;base64,{PNG_B64}"],
    })

    assert response.status_code == 200
    diagnosis = response.json()["structuredContent"]["diagnosis"]
    assert diagnosis["risk_level"] == "critical"
    assert diagnosis["recommendation"] == "hire"


def test_validation_error_is_400(http):
    response = http.post("/mcp/tools/generate_bom", json={"issue_type": "x"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_FAILED"
    assert body["errors"][0]["field"] == "issue_type"


def test_unsupported_media_type_is_415(http):
    response = http.post("/mcp/tools/analyze_issue", json={
        "description": "My kitchen faucet drips constantly",
        "photos": [f"data:image/gif;base64,{PNG_B64}"],
    })

    assert response.status_code == 415
    assert response.json()["error"] == "UNSUPPORTED_MEDIA_TYPE"


def test_upstream_errors_are_502(http, mock_bedrock):
    mock_bedrock.converse.side_effect = UpstreamCallError.unreachable(TimeoutError("read timed out"), "bill of materials")

    response = http.post("/mcp/tools/generate_bom", json={"issue_type": "leaking faucet"})

    assert response.status_code == 502
    assert response.json()["error"] == "UPSTREAM_UNREACHABLE"


def test_unparseable_reply_is_502(http, mock_bedrock):
    mock_bedrock.converse.return_value = "Sorry, I can't help with that."

    response = http.post("/mcp/tools/generate_bom", json={"issue_type": "leaking faucet"})

    assert response.status_code == 502
    assert response.json()["error"] == "UPSTREAM_PARSE_FAILED"


def test_confirmation_needed_is_a_result(http):
    response = http.post("/mcp/tools/request_quotes", json={
        "zip": "94107",
        "scope": "Replace the cartridge in a leaking kitchen faucet",
        "confirmed": False,
    })

    assert response.status_code == 200
    assert response.json()["structuredContent"]["confirmation_needed"] is True


def test_unknown_tool_is_404(http):
    assert http.post("/mcp/tools/nope", json={}).status_code == 404


def test_every_error_type_has_a_status_code():
    assert set(STATUS_CODES) == set(ErrorType)


def test_resources(http, config, tmp_path):
    assert http.get("/mcp/resources/diagnosis").status_code == 404

    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "diagnosis-widget.js").write_text("console.log('diagnosis');")
    (dist / "styles.css").write_text("body { margin: 0; }")

    listing = http.get("/mcp/resources").json()["resources"]
    assert [r["uri"] for r in listing] == [config.resources.diagnosis_uri, config.resources.steps_uri]

    content = http.get("/mcp/resources/diagnosis").json()["contents"][0]
    assert content["mimeType"] == "text/html+skybridge"
    assert '<div id="diagnosis-root"></div>' in content["text"]
    assert "console.log('diagnosis');" in content["text"]
    assert "<style>body { margin: 0; }</style>" in content["text"]

    assert http.get("/mcp/resources/unknown").status_code == 404


def test_multipart_analyze(http, mock_bedrock):
    mock_bedrock.converse.side_effect = ["Dripping faucet\nLow risk. 90%", BOM_REPLY]

    response = http.post(
        "/api/analyze",
        data={"description": "My kitchen faucet drips constantly"},
        files=[("photos", ("faucet.png", PNG_BYTES, "image/png"))],
    )

    assert response.status_code == 200
    assert response.json()["structuredContent"]["diagnosis"]["confidence"] == 90
    sent = mock_bedrock.converse.await_args_list[0].kwargs["images"][0]
    assert sent.data == PNG_BYTES


def test_multipart_rejects_unsupported_upload(http, mock_bedrock):
    response = http.post(
        "/api/analyze",
        data={"description": "My kitchen faucet drips constantly"},
        files=[("photos", ("notes.txt", b"hello", "text/plain"))],
    )

    assert response.status_code == 415
    mock_bedrock.converse.assert_not_awaited()
