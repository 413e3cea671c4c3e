import base64
import json

import pytest
from conftest import FakeSession

from ghproxy import run
from ghproxy.clients.github import GitHubClient


@pytest.fixture
def clear_credentials(monkeypatch):
    for name in ("GITHUB_TOKEN", "GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET"):
        monkeypatch.delenv(name, raising=False)


def load_lambda_handler(monkeypatch, session, token="ghp_test"):
    if token:
        monkeypatch.setenv("GITHUB_TOKEN", token)
    from ghproxy import lambda_handler

    def fake_handle_request(request):
        return run.handle_request(request, client=GitHubClient(session=session))

    monkeypatch.setattr(lambda_handler, "handle_request", fake_handle_request)
    return lambda_handler


def test_v1_event_with_path_parameter(monkeypatch, clear_credentials, json_response):
    session = FakeSession(json_response(body=[{"name": "hello-world"}]))
    lh = load_lambda_handler(monkeypatch, session)
    event = {
        "httpMethod": "GET",
        "path": "/api/github/users/octocat/repos",
        "pathParameters": {"path": "users/octocat/repos"},
        "multiValueQueryStringParameters": {"per_page": ["10"], "code": ["abc"]},
        "headers": {"Origin": "http://localhost:3000"},
    }

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == [{"name": "hello-world"}]
    assert session.last_call["url"] == "https://api.github.com/users/octocat/repos?per_page=10"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_v2_event_uses_raw_path_and_query(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session)
    event = {
        "version": "2.0",
        "rawPath": "/api/github/repos/octocat/hello-world/issues",
        "rawQueryString": "labels=bug&labels=help&client_secret=leak",
        "requestContext": {"http": {"method": "GET"}},
    }

    lh.lambda_handler(event, None)

    assert fake_session.last_call["url"] == (
        "https://api.github.com/repos/octocat/hello-world/issues?labels=bug&labels=help"
    )


def test_options_returns_preflight_without_credentials(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session, token=None)
    event = {"requestContext": {"http": {"method": "OPTIONS"}}, "rawPath": "/api/github/users"}

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 200
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
    assert resp["headers"]["Access-Control-Allow-Headers"] == "Content-Type, Authorization"
    assert fake_session.call_count == 0


def test_missing_credentials_returns_500(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session, token=None)
    event = {"httpMethod": "GET", "pathParameters": {"path": "users/octocat"}}

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 500
    assert json.loads(resp["body"]) == {
        "error": "Server configuration error - Missing authentication credentials"
    }
    assert fake_session.call_count == 0


def test_client_pair_from_environment(monkeypatch, clear_credentials, fake_session):
    monkeypatch.setenv("GITHUB_CLIENT_ID", "Iv1.id")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "secret")
    lh = load_lambda_handler(monkeypatch, fake_session, token=None)
    event = {"httpMethod": "GET", "pathParameters": {"path": "users/octocat"}}

    lh.lambda_handler(event, None)

    call = fake_session.last_call
    assert "Authorization" not in call["headers"]
    assert call["url"].endswith("?client_id=Iv1.id&client_secret=secret")


def test_graphql_base64_body(monkeypatch, clear_credentials, json_response):
    session = FakeSession(json_response(body={"data": {"viewer": {"login": "octocat"}}}))
    lh = load_lambda_handler(monkeypatch, session)
    payload = {"query": "query { viewer { login } }"}
    event = {
        "requestContext": {"http": {"method": "POST"}},
        "rawPath": "/api/github/graphql",
        "body": base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii"),
        "isBase64Encoded": True,
    }

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 200
    assert session.last_call["json"] == payload
    assert resp["headers"]["Content-Type"] == "application/json"


def test_graphql_empty_object_returns_400(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session)
    event = {
        "httpMethod": "POST",
        "path": "/api/github/graphql",
        "pathParameters": {"path": "graphql"},
        "body": "{}",
    }

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Missing GraphQL query in request body"}


def test_graphql_without_body_sends_default_query(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session)
    event = {"httpMethod": "POST", "pathParameters": {"path": "graphql"}}

    lh.lambda_handler(event, None)

    assert fake_session.last_call["json"] == {"query": "{viewer{login}}"}


def test_undecodable_body_returns_400(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session)
    event = {
        "httpMethod": "POST",
        "pathParameters": {"path": "graphql"},
        "body": "not base64!!",
        "isBase64Encoded": True,
    }

    resp = lh.lambda_handler(event, None)

    assert resp["statusCode"] == 400
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert fake_session.call_count == 0


def test_empty_proxy_path_goes_to_api_root(monkeypatch, clear_credentials, fake_session):
    lh = load_lambda_handler(monkeypatch, fake_session)
    event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/api/github"}

    lh.lambda_handler(event, None)

    assert fake_session.last_call["url"] == "https://api.github.com/"
