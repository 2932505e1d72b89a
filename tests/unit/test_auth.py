from __future__ import annotations

import time

import jwt
from starlette.requests import HTTPConnection

from coach_voice.handlers.websocket.auth import get_token, authenticate, verify_token

SECRET = "test-secret"


def _conn(query: bytes = b"", headers: list[tuple[bytes, bytes]] | None = None) -> HTTPConnection:
    return HTTPConnection({"type": "websocket", "query_string": query, "headers": headers or []})


def test_verify_token_returns_user_id_claim() -> None:
    token = jwt.encode({"userId": 42}, SECRET, algorithm="HS256")
    assert verify_token(token, SECRET) == "42"


def test_verify_token_falls_back_to_sub() -> None:
    token = jwt.encode({"sub": "user-7"}, SECRET, algorithm="HS256")
    assert verify_token(token, SECRET) == "user-7"


def test_verify_token_rejects_bad_credentials() -> None:
    assert verify_token("", SECRET) is None
    assert verify_token("garbage", SECRET) is None
    assert verify_token(jwt.encode({"userId": 1}, "other-secret", algorithm="HS256"), SECRET) is None
    expired = jwt.encode({"userId": 1, "exp": int(time.time()) - 60}, SECRET, algorithm="HS256")
    assert verify_token(expired, SECRET) is None
    assert verify_token(jwt.encode({"role": "admin"}, SECRET, algorithm="HS256"), SECRET) is None


def test_verify_token_misconfigured_secret_is_locked_down() -> None:
    token = jwt.encode({"userId": 1}, SECRET, algorithm="HS256")
    assert verify_token(token, "") is None


def test_get_token_prefers_query_then_bearer_header() -> None:
    assert get_token(_conn(b"token=abc")) == "abc"
    assert get_token(_conn(headers=[(b"authorization", b"Bearer xyz")])) == "xyz"
    assert get_token(_conn(headers=[(b"authorization", b"Basic xyz")])) == ""
    assert get_token(_conn()) == ""


def test_authenticate_reads_query_token() -> None:
    token = jwt.encode({"userId": "u1"}, SECRET, algorithm="HS256")
    assert authenticate(_conn(f"token={token}".encode()), SECRET) == "u1"
