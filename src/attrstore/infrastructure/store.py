"""AttributeStore — single-valued, optionally encrypted attributes.

The store is the public face of the package. It enforces two contracts
the backend does not give on its own:

- **Replace, not append.** Each (item, key) holds at most one value.
  Setting a key clears whatever was there first.
- **Read-your-writes.** Every mutation is confirmed visible through the
  :class:`ConsistencyGuard` before the call returns.

The store holds no data between calls; the backend is the only source
of truth. Its only state is the backend handle and the optional cipher.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from attrstore.domain.document import LoadReport, validate_document
from attrstore.domain.errors import (
    AttributeStoreError,
    LoadPartiallyApplied,
    NoPrivateKey,
    NoPublicKey,
)
from attrstore.domain.serializer import serialize_attributes
from attrstore.infrastructure.guard import ConsistencyGuard

if TYPE_CHECKING:
    from attrstore.config.settings import AttrStoreSettings
    from attrstore.infrastructure.backends.base import KeyValueBackend
    from attrstore.infrastructure.cipher import ValueCipher

logger = logging.getLogger(__name__)


class AttributeStore:
    """Domain/item/attribute operations with consistency and encryption.

    Args:
        backend: Storage backend.
        cipher: Key material for encrypted properties. Without one, only
            plain operations are available.
        guard: Consistency guard; a default one over *backend* is built
            when omitted.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        cipher: ValueCipher | None = None,
        guard: ConsistencyGuard | None = None,
    ) -> None:
        self._backend = backend
        self._cipher = cipher
        self._guard = guard or ConsistencyGuard(backend)

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def region(self) -> str | None:
        return self._backend.region

    @property
    def cipher(self) -> ValueCipher | None:
        return self._cipher

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def create(self, domain: str) -> None:
        """Create *domain* if absent. Existing domains and their items are untouched."""
        self._guard.write(
            lambda: self._backend.create_domain(domain),
            lambda consistent: self._backend.domain_exists(domain, consistent=consistent),
            op="create_domain",
        )
        logger.debug("Domain %s ready", domain)

    def destroy(self, domain: str) -> None:
        """Delete *domain* and everything in it. Absent domains are a no-op."""
        self._guard.write(
            lambda: self._backend.delete_domain(domain),
            lambda consistent: not self._backend.domain_exists(domain, consistent=consistent),
            op="destroy_domain",
        )
        logger.debug("Domain %s destroyed", domain)

    def exists(self, domain: str) -> bool:
        return self._guard.read(
            lambda consistent: self._backend.domain_exists(domain, consistent=consistent),
            op="domain_exists",
        )

    def count_items(self, domain: str) -> int:
        return self._guard.read(
            lambda consistent: self._backend.count_items(domain, consistent=consistent),
            op="count_items",
        )

    def list_items(self, domain: str) -> list[str]:
        return self._guard.read(
            lambda consistent: self._backend.list_items(domain, consistent=consistent),
            op="list_items",
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def destroy_item(self, domain: str, item: str) -> None:
        """Delete *item* and all its attributes. Absent items are a no-op."""
        self._guard.write(
            lambda: self._backend.delete_item(domain, item),
            lambda consistent: self._attributes(domain, item, consistent) is None,
            op="destroy_item",
        )

    def get_item_attributes(self, domain: str, item: str) -> dict[str, list[str]] | None:
        """Raw ``{key: [values]}`` for *item*, or None if it has no attributes."""
        return self._guard.read(
            lambda consistent: self._attributes(domain, item, consistent),
            op="get_item_attributes",
        )

    def get_item_attributes_json(self, domain: str, item: str) -> str | None:
        """Canonical JSON of *item*'s attributes (sorted by value, descending)."""
        return serialize_attributes(self.get_item_attributes(domain, item))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_property(self, domain: str, item: str, key: str) -> str | None:
        """Current value of *key*, or None if the domain, item, or key is absent."""
        attributes = self.get_item_attributes(domain, item)
        if attributes is None:
            return None
        values = attributes.get(key)
        if not values:
            return None
        if len(values) > 1:
            logger.debug(
                "%s/%s/%s holds %d values; returning the first", domain, item, key, len(values)
            )
        return values[0]

    def set_property(self, domain: str, item: str, key: str, value: str) -> None:
        """Replace every value of *key* on *item* with exactly *value*.

        Creates the item if needed. On return ``get_property`` yields
        *value* and the backend holds a single value for *key*.
        """

        def mutate() -> None:
            if self._backend.native_replace:
                self._backend.put_attributes(domain, item, {key: value}, replace=True)
            else:
                self._backend.delete_attributes(domain, item, [key])
                self._backend.put_attributes(domain, item, {key: value})

        def visible(consistent: bool) -> bool:
            attributes = self._attributes(domain, item, consistent)
            return attributes is not None and attributes.get(key) == [value]

        self._guard.write(mutate, visible, op="set_property")

    def get_encrypted_property(self, domain: str, item: str, key: str) -> str | None:
        """Decrypted value of *key*, or None if absent.

        Raises:
            NoPrivateKey: The store has no private key.
            DecryptionFailed: The stored value is not ciphertext for this key.
        """
        stored = self.get_property(domain, item, key)
        if stored is None:
            return None
        if self._cipher is None:
            raise NoPrivateKey()
        return self._cipher.decrypt(stored)

    def set_encrypted_property(self, domain: str, item: str, key: str, value: str) -> None:
        """Encrypt *value* with the public key and store the ciphertext."""
        if self._cipher is None:
            raise NoPublicKey()
        self.set_property(domain, item, key, self._cipher.encrypt(value))

    # ------------------------------------------------------------------
    # Bulk load
    # ------------------------------------------------------------------

    def load_domain(self, domain: str, document: Mapping[str, Any]) -> LoadReport:
        """Apply every item/key/value in *document* with replace semantics.

        The document shape is validated before any write. Individual write
        failures do not stop the load; they are collected and reported.
        Writes that succeeded are kept.

        Raises:
            InvalidDocument: *document* is not item -> {key: value} strings.
            LoadPartiallyApplied: One or more writes failed.
        """
        validated = validate_document(document)
        applied: list[tuple[str, str]] = []
        failed: list[tuple[str, str]] = []
        errors: list[AttributeStoreError] = []

        for item, attributes in validated.items():
            for key, value in attributes.items():
                try:
                    self.set_property(domain, item, key, value)
                except AttributeStoreError as exc:
                    logger.warning("Load of %s/%s/%s failed: %s", domain, item, key, exc)
                    failed.append((item, key))
                    errors.append(exc)
                else:
                    applied.append((item, key))

        if failed:
            raise LoadPartiallyApplied(domain, applied, failed, errors)
        return LoadReport(domain=domain, applied=applied)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _attributes(
        self, domain: str, item: str, consistent: bool
    ) -> dict[str, list[str]] | None:
        return self._backend.get_attributes(domain, item, consistent=consistent)


def open_store(settings: AttrStoreSettings) -> AttributeStore:
    """Build a store from resolved settings (backend, guard policy, keys)."""
    from attrstore.infrastructure.backends import build_backend
    from attrstore.infrastructure.cipher import ValueCipher

    backend = build_backend(settings.backend, root=settings.root, region=settings.region)
    guard = ConsistencyGuard(
        backend,
        poll_interval=settings.guard.poll_interval_seconds,
        max_attempts=settings.guard.max_attempts,
    )
    keys = settings.keys
    cipher = None
    if keys.public_cert is not None or keys.private_key is not None:
        cipher = ValueCipher.from_files(
            public_cert=settings.resolve(keys.public_cert) if keys.public_cert else None,
            private_key=settings.resolve(keys.private_key) if keys.private_key else None,
            password=keys.private_key_password,
        )
    return AttributeStore(backend, cipher=cipher, guard=guard)
