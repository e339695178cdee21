"""HTTP API tests: auth, optimize, diagnostics endpoints."""

from __future__ import annotations

import base64
import copy
import os

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from jwt.exceptions import InvalidTokenError

import drill_timing.auth as auth
from drill_timing.config import Settings, get_settings
from drill_timing.fixtures import ONE_TWO, PASS_AND_RUN
import main
from main import app

DEV_SECRET = "local-development-secret-32-bytes!!"


def make_token(claims=None) -> str:
    if claims is None:
        claims = {"sub": "coach-1", "email": "coach@example.com"}
    return jwt.encode(claims, DEV_SECRET, algorithm="HS256")


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: Settings()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {"Authorization": f"Bearer {make_token()}"}


# ============================================================
# HEALTH
# ============================================================

@pytest.mark.parametrize("path", ["/", "/health"])
def test_health(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ============================================================
# AUTH
# ============================================================

def test_missing_token_is_rejected(client):
    response = client.post("/optimize", json=PASS_AND_RUN)
    assert response.status_code == 401


def test_garbage_token_is_rejected(client):
    response = client.post(
        "/optimize", json=PASS_AND_RUN, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_token_without_subject_is_rejected(client):
    token = make_token({"email": "nobody@example.com"})
    response = client.post(
        "/optimize", json=PASS_AND_RUN, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


class FakeJWKClient:
    def __init__(self, key):
        self.key = key

    def get_signing_key_from_jwt(self, token):
        return self


@pytest.fixture
def pool_settings(monkeypatch):
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    monkeypatch.setattr(auth, "get_jwks_client", lambda uri: FakeJWKClient(private_key.public_key()))
    settings = Settings(cognito_region="eu-west-1", cognito_user_pool_id="eu-west-1_pool")
    return settings, private_key


def test_verify_token_against_user_pool(pool_settings):
    settings, private_key = pool_settings
    token = jwt.encode(
        {"sub": "coach-1", "iss": settings.issuer, "cognito:username": "coach"},
        private_key,
        algorithm="RS256",
    )

    user = auth.verify_token(token, settings)

    assert user.sub == "coach-1"
    assert user.email == "coach"


def test_verify_token_rejects_foreign_issuer(pool_settings):
    settings, private_key = pool_settings
    token = jwt.encode(
        {"sub": "coach-1", "iss": "https://example.com/other-pool"},
        private_key,
        algorithm="RS256",
    )

    with pytest.raises(InvalidTokenError):
        auth.verify_token(token, settings)


def test_verify_token_rejects_unsigned_token_when_pool_is_set(pool_settings):
    settings, _ = pool_settings

    with pytest.raises(InvalidTokenError):
        auth.verify_token(make_token(), settings)


# ============================================================
# OPTIMIZE
# ============================================================

@pytest.mark.parametrize("path", ["/optimize", "/api/optimize-drill"])
def test_optimize_returns_adjusted_state(client, headers, path):
    response = client.post(path, json=PASS_AND_RUN, headers=headers)

    assert response.status_code == 200
    data = response.json()
    run = data["players"][1]["actions"][0]
    assert run["speed"] == 86
    assert run["waitBefore"] > 0
    assert run["config"]["preEvent"].startswith("wait:")
    assert data["players"][0]["hasBall"] is True


def test_optimize_keeps_unknown_fields(client, headers):
    drill = copy.deepcopy(ONE_TWO)
    drill["players"][0]["actions"][0]["gesture"] = "lofted"
    drill["sceneName"] = "one-two"

    data = client.post("/optimize", json=drill, headers=headers).json()

    assert data["sceneName"] == "one-two"
    assert data["players"][0]["actions"][0]["gesture"] == "lofted"


def test_malformed_drill_is_a_generic_500(client, headers):
    response = client.post("/optimize", json={}, headers=headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}


@pytest.mark.parametrize("path", [
    "/optimize",
    "/api/optimize-drill",
    "/api/idle-time",
    "/api/validate-drill",
    "/api/render-timeline",
])
@pytest.mark.parametrize("body", ["[]", '"x"', "{not json", ""])
def test_non_object_or_broken_body_is_a_generic_500(client, headers, path, body):
    response = client.post(
        path,
        content=body,
        headers={**headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}


def test_missing_token_wins_over_broken_body(client):
    response = client.post(
        "/optimize", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 401


def test_render_timeline_removes_temp_file_on_failure(client, headers, monkeypatch):
    written = []

    def failing_render(schedule, output_path, ball_arrivals=None):
        written.append(output_path)
        raise RuntimeError("renderer crashed")

    monkeypatch.setattr(main, "render", failing_render)

    response = client.post("/api/render-timeline", json=PASS_AND_RUN, headers=headers)

    assert response.status_code == 500
    [path] = written
    assert not os.path.exists(path)


# ============================================================
# DIAGNOSTIC ENDPOINTS
# ============================================================

def test_idle_time(client, headers):
    drill = copy.deepcopy(PASS_AND_RUN)
    drill["players"][1]["actions"][1]["waitBefore"] = 1.5

    response = client.post("/api/idle-time", json=drill, headers=headers)

    assert response.status_code == 200
    assert response.json()["idle_time"] == pytest.approx(1.5)


def test_validate_reports_issues(client, headers):
    drill = copy.deepcopy(PASS_AND_RUN)
    drill["players"][1]["actions"][0]["speed"] = 150

    data = client.post("/api/validate-drill", json=drill, headers=headers).json()

    assert data["is_valid"] is False
    assert data["issues"][0]["severity"] == "error"


def test_render_timeline(client, headers):
    response = client.post("/api/render-timeline", json=PASS_AND_RUN, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["sync_count"] == 1
    assert data["idle_time"] == 0
    assert "<svg" in base64.b64decode(data["svg"]).decode()
    assert data["drill_state"]["players"][1]["actions"][0]["speed"] == 86
