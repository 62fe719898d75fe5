"""Tests for bearer token verification."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from kosthub.infrastructure.security import (
    ALGORITHM,
    create_access_token,
    verify_credential,
)


def test_round_trip_returns_subject_and_role():
    token = create_access_token(12, role="admin")

    subject = verify_credential(token)

    assert subject.subject_id == 12
    assert subject.role == "admin"


@pytest.mark.parametrize(
    "token",
    [
        "not-a-token",
        jwt.encode({"sub": "1"}, "another-secret", algorithm=ALGORITHM),
        jwt.encode({"sub": "abc"}, "test-secret-key", algorithm=ALGORITHM),
    ],
)
def test_invalid_tokens_fail_with_the_same_message(token):
    with pytest.raises(ValueError, match="Could not validate credentials"):
        verify_credential(token)


def test_expired_token_is_rejected():
    token = create_access_token(1, expires_delta=timedelta(seconds=-5))

    with pytest.raises(ValueError, match="Could not validate credentials"):
        verify_credential(token)
