import time

import pytest

from certificate_registry_api.app.core import security
from certificate_registry_api.app.core.config import settings
from certificate_registry_api.app.core.security import (
    create_access_token,
    create_session_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_is_not_plaintext_and_is_salted():
    password = "correct horse battery staple"
    first = hash_password(password)
    second = hash_password(password)

    assert password not in first
    assert first != second
    assert verify_password(password, first)
    assert verify_password(password, second)


def test_hash_records_iteration_count():
    hashed = hash_password("pw", iterations=1234)
    rounds, salt_hex, hash_hex = hashed.split("$")
    assert rounds == "1234"
    assert len(bytes.fromhex(salt_hex)) == 16
    assert len(bytes.fromhex(hash_hex)) == 32
    assert verify_password("pw", hashed)


def test_verify_rejects_wrong_password():
    hashed = hash_password("right")
    assert not verify_password("wrong", hashed)


@pytest.mark.parametrize("stored", ["", "plaintext", "abc$def", "0$00$00", "x$zz$zz"])
def test_verify_rejects_malformed_hash(stored):
    assert not verify_password("anything", stored)


def test_token_valid_within_window_and_expired_after():
    issued = 1_700_000_000
    token = create_session_token(7, now=issued)

    payload = decode_access_token(token, now=issued + 30 * 60)
    assert payload is not None
    assert payload["sub"] == "7"
    assert payload["exp"] == issued + 60 * 60

    assert decode_access_token(token, now=issued + 61 * 60) is None


def test_session_token_carries_only_subject_and_expiry():
    payload = decode_access_token(create_session_token(3))
    assert set(payload) == {"sub", "exp"}


def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "1"})
    header, payload, signature = token.split(".")
    forged_payload = security._b64_url_encode(b'{"sub":"2","exp":9999999999}')
    assert decode_access_token(f"{header}.{forged_payload}.{signature}") is None
    other_signature = create_access_token({"sub": "1"}, now=0).split(".")[2]
    assert decode_access_token(f"{header}.{payload}.{other_signature}") is None


def test_token_signed_with_other_secret_is_rejected(monkeypatch):
    token = create_access_token({"sub": "1"})
    monkeypatch.setattr(settings, "secret_key", "another-secret")
    assert decode_access_token(token) is None


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "!!.??.**"])
def test_malformed_token_is_rejected(token):
    assert decode_access_token(token) is None


def test_custom_lifetime():
    now = int(time.time())
    token = create_access_token({"sub": "1"}, expires_delta=10, now=now)
    assert decode_access_token(token, now=now + 10) is not None
    assert decode_access_token(token, now=now + 11) is None


def test_zero_lifetime_is_not_replaced_by_default():
    now = 1_700_000_000
    token = create_access_token({"sub": "1"}, expires_delta=0, now=now)
    assert decode_access_token(token, now=now)["exp"] == now
    assert decode_access_token(token, now=now + 1) is None
