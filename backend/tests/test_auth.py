"""Tests for owner resolution from bearer tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from app.auth import resolve_owner
from app.exceptions import Unauthenticated
from conftest import OWNER, make_token


def test_valid_token():
    assert resolve_owner(make_token(OWNER)) == OWNER


def test_missing_token():
    with pytest.raises(Unauthenticated):
        resolve_owner(None)


def test_expired_token():
    with pytest.raises(Unauthenticated):
        resolve_owner(make_token(OWNER, expires_in=timedelta(minutes=-5)))


def test_wrong_secret():
    token = jwt.encode({"sub": OWNER}, "not-the-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        resolve_owner(token)


def test_api_requires_token(client):
    response = client.get("/api/v1/todos")
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthenticated"


def test_api_rejects_garbage_token(client):
    response = client.get("/api/v1/categories", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401
