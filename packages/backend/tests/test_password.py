"""Password hasher tests.

Learn: verify_password must fail closed: bad input of any kind is a
plain False, never an exception that tells a caller something.
"""

import bcrypt
import pytest

from taskflow.auth import password
from taskflow.auth.password import (
    PasswordError,
    dummy_verify,
    hash_password,
    needs_upgrade,
    verify_password,
)


def test_hash_is_salted_and_verifies():
    h1 = hash_password("abc123", rounds=4)
    h2 = hash_password("abc123", rounds=4)
    assert h1 != h2
    assert h1.startswith("$2")
    assert verify_password("abc123", h1)
    assert verify_password("abc123", h2)


def test_wrong_password_rejected():
    h = hash_password("abc123", rounds=4)
    assert verify_password("abc124", h) is False
    assert verify_password("", h) is False


@pytest.mark.parametrize(
    "bad_hash",
    ["", "not-a-hash", "$2b$", "$2b$04$tooshort", "$2b$04$" + "!" * 53, "salt$deadbeef"],
)
def test_malformed_hash_returns_false(bad_hash):
    assert verify_password("abc123", bad_hash) is False


@pytest.mark.parametrize("bad_input", [None, 123, b"abc123", ["abc123"]])
def test_non_string_inputs_fail_closed(bad_input):
    h = hash_password("abc123", rounds=4)
    assert verify_password(bad_input, h) is False
    assert verify_password("abc123", bad_input) is False


def test_hash_rejects_non_string():
    with pytest.raises(PasswordError):
        hash_password(None, rounds=4)
    with pytest.raises(PasswordError):
        hash_password(b"bytes", rounds=4)


def test_long_password_truncated_to_bcrypt_limit():
    long_pw = "a1" * 60  # 120 bytes
    h = hash_password(long_pw, rounds=4)
    assert verify_password(long_pw, h)


def test_needs_upgrade_compares_cost():
    weak = bcrypt.hashpw(b"abc123", bcrypt.gensalt(rounds=4)).decode()
    assert needs_upgrade(weak, rounds=5)
    assert not needs_upgrade(weak, rounds=4)
    assert not needs_upgrade("garbage", rounds=12)


def test_dummy_verify_always_false():
    assert dummy_verify("abc123", rounds=4) is False
    assert dummy_verify(None, rounds=4) is False


def test_dummy_hash_matches_configured_cost():
    """The unknown-email branch pays the same cost as the configured rounds."""
    dummy_verify("abc123", rounds=4)
    dummy_verify("abc123", rounds=5)
    assert needs_upgrade(password._DUMMY_HASHES[4].decode(), rounds=5)
    assert password._DUMMY_HASHES[5].decode().startswith("$2b$05$")
    assert password._DUMMY_HASHES[4].decode().startswith("$2b$04$")
