"""KeyValueBackend — the contract every storage backend implements.

A backend is a set of named domains, each holding named items, each
holding a multi-valued mapping of attribute names to string values.
Backends are allowed to be eventually consistent and to append on write;
the consistency guard and attribute store compensate for both.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import ClassVar, Protocol, runtime_checkable


@runtime_checkable
class KeyValueBackend(Protocol):
    """Structural interface for domain/item/attribute storage.

    Attributes:
        consistent_reads: True if ``consistent=True`` reads are strongly
            consistent. When False the guard polls for visibility.
        native_replace: True if ``put_attributes(replace=True)`` replaces
            existing values. When False the store clears keys first.
        errors: Library exception types that mean "the backend call failed".
        region: Locality token (None for local backends).
    """

    consistent_reads: bool
    native_replace: bool
    errors: ClassVar[tuple[type[Exception], ...]]

    @property
    def region(self) -> str | None: ...

    def domain_exists(self, domain: str, *, consistent: bool = False) -> bool: ...

    def create_domain(self, domain: str) -> None:
        """Create *domain*; creating an existing domain is a no-op."""
        ...

    def delete_domain(self, domain: str) -> None:
        """Delete *domain* and all its items; deleting an absent domain is a no-op."""
        ...

    def get_attributes(
        self, domain: str, item: str, *, consistent: bool = False
    ) -> dict[str, list[str]] | None:
        """Return ``{name: [values]}`` or None if the domain or item is absent/empty."""
        ...

    def put_attributes(
        self, domain: str, item: str, attributes: Mapping[str, str], *, replace: bool = False
    ) -> None: ...

    def delete_attributes(self, domain: str, item: str, names: Iterable[str]) -> None: ...

    def delete_item(self, domain: str, item: str) -> None: ...

    def count_items(self, domain: str, *, consistent: bool = False) -> int: ...

    def list_items(self, domain: str, *, consistent: bool = False) -> list[str]: ...
