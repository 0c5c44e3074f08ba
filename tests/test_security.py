"""Tests for the bcrypt credential hasher."""

from __future__ import annotations

import pytest

from messagely.security import CredentialHasher


def test_hash_is_salted_and_verifies() -> None:
    hasher = CredentialHasher(work_factor=4)

    first = hasher.hash("supersecurepassword")
    second = hasher.hash("supersecurepassword")

    assert first != second
    assert hasher.verify("supersecurepassword", first)
    assert hasher.verify("supersecurepassword", second)
    assert not hasher.verify("incorrect", first)


def test_work_factor_is_encoded_in_digest() -> None:
    assert CredentialHasher(work_factor=5).hash("password").startswith("$2b$05$")


@pytest.mark.parametrize("work_factor", [3, 32])
def test_out_of_range_work_factor_rejected(work_factor: int) -> None:
    with pytest.raises(ValueError):
        CredentialHasher(work_factor=work_factor)


@pytest.mark.parametrize("digest", ["", "not-a-hash", "pbkdf2_sha256$1$abc$def"])
def test_unrecognised_digest_does_not_verify(digest: str) -> None:
    assert CredentialHasher(work_factor=4).verify("password", digest) is False


def test_empty_password_cannot_be_hashed() -> None:
    with pytest.raises(ValueError):
        CredentialHasher(work_factor=4).hash("")


def test_dummy_verify_is_always_false() -> None:
    assert CredentialHasher(work_factor=4).dummy_verify() is False


def test_password_beyond_bcrypt_limit_is_rejected() -> None:
    hasher = CredentialHasher(work_factor=4)
    digest = hasher.hash("a" * 72)

    with pytest.raises(ValueError):
        hasher.hash("a" * 73)
    assert hasher.verify("a" * 72, digest) is True
    assert hasher.verify("a" * 72 + "X", digest) is False
