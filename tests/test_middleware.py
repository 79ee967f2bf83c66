"""Tests for the signed request middleware and service app."""

from unittest.mock import MagicMock
from urllib.parse import parse_qs

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from bouncer.auth.authenticator import Authenticator
from bouncer.auth.credentials import Credential
from bouncer.auth.signer import build_auth_header
from bouncer.common.settings import Settings
from bouncer.service import create_app

DATE = "Tue, 27 Mar 2007 21:20:27 +0000"


async def whoami(request: Request) -> JSONResponse:
    return JSONResponse({"key_id": request.state.auth.key_id})


async def create_bucket(request: Request) -> JSONResponse:
    form = parse_qs((await request.body()).decode("utf-8"))
    return JSONResponse({"name": form["name"][0]}, status_code=201)


ROUTES = [
    Route("/whoami", whoami, methods=["GET"]),
    Route("/buckets", create_bucket, methods=["POST"]),
]


def _client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings, routes=ROUTES))


def test_ping_is_exempt(settings):
    with _client(settings) as client:
        assert client.get("/ping").status_code == 200
        assert client.get("/ping/").status_code == 200


def test_missing_authorization_is_401(settings):
    with _client(settings) as client:
        response = client.get("/whoami")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "missing_authentication"


def test_signed_request_accepted(settings, credential):
    headers = {"Date": DATE}
    headers["Authorization"] = build_auth_header("GET", headers, "/whoami", credential)

    with _client(settings) as client:
        response = client.get("/whoami", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"key_id": credential.key_id}
    assert "X-Request-ID" in response.headers


def test_query_string_is_signed(settings, credential):
    headers = {"Date": DATE}
    headers["Authorization"] = build_auth_header("GET", headers, "/whoami?acl", credential)

    with _client(settings) as client:
        assert client.get("/whoami?acl", headers=headers).status_code == 200
        assert client.get("/whoami", headers=headers).status_code == 403


def test_non_ascii_header_accepted(settings, credential):
    headers = {"Date": DATE, "X-Amz-Meta-Name": "café"}
    authorization = build_auth_header("GET", headers, "/whoami", credential)

    with _client(settings) as client:
        response = client.get(
            "/whoami",
            headers={
                "Date": DATE,
                "X-Amz-Meta-Name": "café".encode("utf-8"),
                "Authorization": authorization,
            },
        )

    assert response.status_code == 200


def test_signed_form_post_accepted(settings, credential):
    body = "name=photos&requester=user-1"
    headers = {"Content-Type": "application/x-www-form-urlencoded", "Date": DATE}
    headers["Authorization"] = build_auth_header("POST", headers, "/buckets", credential)

    with _client(settings) as client:
        response = client.post("/buckets", content=body, headers=headers)

    assert response.status_code == 201
    assert response.json() == {"name": "photos"}


def test_wrong_secret_and_wrong_key_look_the_same(settings, credential):
    headers = {"Date": DATE}
    wrong_secret = build_auth_header(
        "GET", headers, "/whoami", Credential(key_id=credential.key_id, secret="nope")
    )
    wrong_key = build_auth_header(
        "GET", headers, "/whoami", Credential(key_id="intruder", secret=credential.secret)
    )

    with _client(settings) as client:
        first = client.get("/whoami", headers={**headers, "Authorization": wrong_secret})
        second = client.get("/whoami", headers={**headers, "Authorization": wrong_key})

    assert first.status_code == second.status_code == 403
    assert first.json() == second.json()
    assert first.json()["error"]["code"] == "invalid_authentication"


def test_tampered_header_rejected(settings, credential):
    headers = {"Date": DATE, "X-Amz-Meta-Owner": "alice"}
    authorization = build_auth_header("GET", headers, "/whoami", credential)

    with _client(settings) as client:
        response = client.get(
            "/whoami",
            headers={**headers, "X-Amz-Meta-Owner": "mallory", "Authorization": authorization},
        )

    assert response.status_code == 403


def test_auth_mode_none_passes_through(credential):
    settings = Settings(auth_mode="none")

    async def open_route(_request: Request) -> JSONResponse:
        return JSONResponse({"ok": True})

    app = create_app(settings, routes=[Route("/open", open_route)])
    with TestClient(app) as client:
        assert client.get("/open").status_code == 200


def test_unconfigured_credential_rejects(credential):
    settings = Settings(admin_key_id=None, admin_secret=None)
    headers = {"Date": DATE}
    headers["Authorization"] = build_auth_header("GET", headers, "/whoami", credential)

    with _client(settings) as client:
        assert client.get("/whoami", headers=headers).status_code == 403


def test_credential_source_error_is_403(settings, credential):
    provider = MagicMock()
    provider.get_admin_credential.side_effect = RuntimeError("secret store unavailable")
    app = create_app(settings, routes=ROUTES, authenticator=Authenticator(provider))
    headers = {"Date": DATE}
    headers["Authorization"] = build_auth_header("GET", headers, "/whoami", credential)

    with TestClient(app) as client:
        response = client.get("/whoami", headers=headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "invalid_authentication"
