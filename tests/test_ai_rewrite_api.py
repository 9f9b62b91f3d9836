"""
HTTP tests for /api/ai/rewrite and /functions/aiRewrite.
"""

import pytest

from cvgenius.core import config, rewrite


ROUTES = ["/api/ai/rewrite", "/functions/aiRewrite"]


@pytest.mark.parametrize("route", ROUTES)
def test_missing_description_is_400_and_provider_not_called(client, provider, route):
    resp = client.post(route, json={"company": "Acme"})
    assert resp.status_code == 400
    assert resp.json()["error"]["fieldErrors"]["description"] == ["Description is required"]
    assert provider.requests == []


def test_invalid_json_body_is_400(client, provider):
    resp = client.post("/api/ai/rewrite", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["formErrors"]
    assert provider.requests == []


@pytest.mark.parametrize("route", ROUTES)
def test_successful_rewrite(client, provider, route):
    provider.respond('Here you go: {"description":"X","highlights":["A","B"]} thanks')
    resp = client.post(route, json={"company": "Acme", "position": "Dev", "description": "Did work"})
    assert resp.status_code == 200
    assert resp.json() == {"description": "X", "highlights": ["A", "B"]}
    assert len(provider.requests) == 1


def test_warming_up_provider(client, provider):
    provider.respond(status_code=503)
    resp = client.post("/api/ai/rewrite", json={"description": "Did work"})
    assert resp.status_code == 503
    assert resp.json() == {"error": rewrite.WARMING_UP_MESSAGE}


def test_provider_status_is_forwarded(client, provider):
    provider.respond(status_code=429)
    resp = client.post("/api/ai/rewrite", json={"description": "Did work"})
    assert resp.status_code == 429
    assert isinstance(resp.json()["error"], str)


def test_reply_without_json_is_500(client, provider):
    provider.respond("I am unable to do that.")
    resp = client.post("/api/ai/rewrite", json={"description": "Did work"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to parse AI response as JSON"}


def test_empty_reply_is_500(client, provider):
    provider.respond("")
    resp = client.post("/api/ai/rewrite", json={"description": "Did work"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Empty response from model"}


def test_unconfigured_service(client, provider, monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "")
    resp = client.post("/api/ai/rewrite", json={"description": "Did work"})
    assert resp.status_code == 500
    assert resp.json() == {"error": rewrite.NOT_CONFIGURED_MESSAGE}
    assert provider.requests == []


def test_function_route_preflight(client):
    resp = client.options("/functions/aiRewrite")
    assert resp.status_code == 204


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_function_route_rejects_other_methods(client, provider, method):
    resp = getattr(client, method)("/functions/aiRewrite")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed"}
    assert provider.requests == []


def test_health_reports_ai_configuration(client, provider):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["ai_configured"] is True


def test_route_table_has_only_editor_endpoints(client):
    routes = client.get("/__routes__").json()
    assert "POST /api/ai/rewrite" in routes
    assert "POST /api/users/{uid}/cvs" in routes
    assert not any("/api/debug" in r for r in routes)
