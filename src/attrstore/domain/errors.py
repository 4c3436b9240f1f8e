"""Error taxonomy for the attribute store.

Every failure raised by the store carries a stable ``code`` so the
service layer can map it onto ``ServiceError`` without isinstance chains.

INVARIANT: Absence is never an error. Missing domains, items, and keys
resolve to ``None`` from read operations.
"""

from __future__ import annotations

from typing import Any


class AttributeStoreError(Exception):
    """Base class for all attribute store failures."""

    code = "ATTRIBUTE_STORE_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail or {}


class BackendUnavailable(AttributeStoreError):
    """The backend call itself failed (network, auth, service error)."""

    code = "BACKEND_UNAVAILABLE"

    def __init__(self, op: str, reason: str) -> None:
        super().__init__(f"Backend call failed during {op}: {reason}", detail={"op": op})
        self.op = op


class ConsistencyTimeout(AttributeStoreError):
    """A write was accepted but its visibility was never confirmed.

    The write may still become visible later; callers must not treat this
    as a rollback.
    """

    code = "CONSISTENCY_TIMEOUT"

    def __init__(self, op: str, attempts: int) -> None:
        super().__init__(
            f"{op} was not visible after {attempts} attempts",
            detail={"op": op, "attempts": attempts},
        )
        self.op = op
        self.attempts = attempts


class DomainNotFound(AttributeStoreError):
    """A write targeted a domain that does not exist."""

    code = "DOMAIN_NOT_FOUND"

    def __init__(self, domain: str) -> None:
        super().__init__(f"No such domain: {domain}", detail={"domain": domain})
        self.domain = domain


class InvalidDocument(AttributeStoreError):
    """A bulk-load document is not a mapping of item -> {key: value}."""

    code = "INVALID_DOCUMENT"


class LoadPartiallyApplied(AttributeStoreError):
    """Bulk load finished with failures; applied writes are kept."""

    code = "LOAD_PARTIALLY_APPLIED"

    def __init__(
        self,
        domain: str,
        applied: list[tuple[str, str]],
        failed: list[tuple[str, str]],
        errors: list[AttributeStoreError] | None = None,
    ) -> None:
        super().__init__(
            f"Loaded {len(applied)} attributes into {domain}, {len(failed)} failed",
            detail={
                "domain": domain,
                "applied": [list(pair) for pair in applied],
                "failed": [list(pair) for pair in failed],
            },
        )
        self.domain = domain
        self.applied = applied
        self.failed = failed
        self.errors = errors or []


class NoPublicKey(AttributeStoreError):
    """Encryption requested but no public key material is configured."""

    code = "NO_PUBLIC_KEY"

    def __init__(self) -> None:
        super().__init__("No public certificate configured; cannot encrypt")


class NoPrivateKey(AttributeStoreError):
    """Decryption requested but no private key is configured."""

    code = "NO_PRIVATE_KEY"

    def __init__(self) -> None:
        super().__init__("No private key configured; cannot decrypt")


class EncryptionFailed(AttributeStoreError):
    """The cipher rejected the plaintext (usually too large for the key)."""

    code = "ENCRYPTION_FAILED"


class DecryptionFailed(AttributeStoreError):
    """The stored value is not valid ciphertext for the configured key."""

    code = "DECRYPTION_FAILED"
