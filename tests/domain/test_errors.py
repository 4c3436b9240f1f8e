"""Tests for the error taxonomy."""

import pytest

from attrstore.domain.errors import (
    AttributeStoreError,
    BackendUnavailable,
    ConsistencyTimeout,
    DecryptionFailed,
    DomainNotFound,
    EncryptionFailed,
    InvalidDocument,
    LoadPartiallyApplied,
    NoPrivateKey,
    NoPublicKey,
)


class TestCodes:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (BackendUnavailable("op", "boom"), "BACKEND_UNAVAILABLE"),
            (ConsistencyTimeout("op", 3), "CONSISTENCY_TIMEOUT"),
            (DomainNotFound("d"), "DOMAIN_NOT_FOUND"),
            (InvalidDocument("bad"), "INVALID_DOCUMENT"),
            (LoadPartiallyApplied("d", [], []), "LOAD_PARTIALLY_APPLIED"),
            (NoPublicKey(), "NO_PUBLIC_KEY"),
            (NoPrivateKey(), "NO_PRIVATE_KEY"),
            (EncryptionFailed("big"), "ENCRYPTION_FAILED"),
            (DecryptionFailed("junk"), "DECRYPTION_FAILED"),
        ],
    )
    def test_stable_code(self, error: AttributeStoreError, code: str) -> None:
        assert isinstance(error, AttributeStoreError)
        assert error.code == code


class TestDetails:
    def test_timeout_carries_attempts(self) -> None:
        err = ConsistencyTimeout("set_property", 5)
        assert err.attempts == 5
        assert err.detail == {"op": "set_property", "attempts": 5}
        assert "5 attempts" in str(err)

    def test_partial_load_lists_pairs(self) -> None:
        err = LoadPartiallyApplied("d", [("a", "k1")], [("a", "k2"), ("b", "k")])
        assert err.applied == [("a", "k1")]
        assert err.failed == [("a", "k2"), ("b", "k")]
        assert err.detail["failed"] == [["a", "k2"], ["b", "k"]]
        assert "1 attributes" in err.message

    def test_default_detail(self) -> None:
        assert InvalidDocument("bad").detail == {}
