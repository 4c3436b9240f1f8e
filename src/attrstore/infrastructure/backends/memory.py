"""In-process backend that can imitate eventual consistency.

Writes land in a primary copy immediately. Eventually-consistent reads
are served from a replica that catches up only after ``lag`` stale reads,
which is how the guard's polling path is exercised without a network.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from attrstore.domain.errors import DomainNotFound

# domain -> item -> [(name, value), ...] in write order
_State = dict[str, dict[str, list[tuple[str, str]]]]


class MemoryBackendError(RuntimeError):
    """Raised by tests or wrappers to simulate a failed backend call."""


@dataclass
class MemoryBackend:
    """Thread-safe in-memory KeyValueBackend.

    Args:
        lag: Number of eventually-consistent reads that still observe the
            previous state after each write. 0 means immediately visible.
        consistent_reads: Whether ``consistent=True`` reads bypass the lag.
        native_replace: Whether ``replace=True`` puts replace values. When
            False, puts always append, like a multi-valued store.
    """

    lag: int = 0
    consistent_reads: bool = True
    native_replace: bool = False
    region_name: str | None = None

    errors: ClassVar[tuple[type[Exception], ...]] = (MemoryBackendError,)

    _primary: _State = field(default_factory=dict, init=False, repr=False)
    _replica: _State = field(default_factory=dict, init=False, repr=False)
    _stale_reads: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def region(self) -> str | None:
        return self.region_name

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _view(self, consistent: bool) -> _State:
        """Pick the state a read observes (caller holds lock)."""
        if consistent and self.consistent_reads:
            return self._primary
        if self._stale_reads > 0:
            self._stale_reads -= 1
            return self._replica
        self._replica = copy.deepcopy(self._primary)
        return self._replica

    def domain_exists(self, domain: str, *, consistent: bool = False) -> bool:
        with self._lock:
            return domain in self._view(consistent)

    def get_attributes(
        self, domain: str, item: str, *, consistent: bool = False
    ) -> dict[str, list[str]] | None:
        with self._lock:
            pairs = self._view(consistent).get(domain, {}).get(item)
            if not pairs:
                return None
            result: dict[str, list[str]] = {}
            for name, value in pairs:
                result.setdefault(name, []).append(value)
            return result

    def count_items(self, domain: str, *, consistent: bool = False) -> int:
        with self._lock:
            return len(self._view(consistent).get(domain, {}))

    def list_items(self, domain: str, *, consistent: bool = False) -> list[str]:
        with self._lock:
            return list(self._view(consistent).get(domain, {}))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _committed(self) -> None:
        """Start the visibility lag for the write just applied (caller holds lock)."""
        if self.lag > 0:
            self._stale_reads = self.lag
        else:
            self._replica = copy.deepcopy(self._primary)

    def _items(self, domain: str) -> dict[str, list[tuple[str, str]]]:
        items = self._primary.get(domain)
        if items is None:
            raise DomainNotFound(domain)
        return items

    def create_domain(self, domain: str) -> None:
        with self._lock:
            self._primary.setdefault(domain, {})
            self._committed()

    def delete_domain(self, domain: str) -> None:
        with self._lock:
            self._primary.pop(domain, None)
            self._committed()

    def put_attributes(
        self, domain: str, item: str, attributes: Mapping[str, str], *, replace: bool = False
    ) -> None:
        with self._lock:
            pairs = self._items(domain).setdefault(item, [])
            if replace and self.native_replace:
                names = set(attributes)
                pairs[:] = [pair for pair in pairs if pair[0] not in names]
            for name, value in attributes.items():
                if (name, value) not in pairs:
                    pairs.append((name, value))
            self._committed()

    def delete_attributes(self, domain: str, item: str, names: Iterable[str]) -> None:
        with self._lock:
            items = self._primary.get(domain, {})
            pairs = items.get(item)
            if pairs is None:
                return
            doomed = set(names)
            pairs[:] = [pair for pair in pairs if pair[0] not in doomed]
            if not pairs:
                del items[item]
            self._committed()

    def delete_item(self, domain: str, item: str) -> None:
        with self._lock:
            self._primary.get(domain, {}).pop(item, None)
            self._committed()

    def raw_values(self, domain: str, item: str, name: str) -> list[str]:
        """All stored values for *name*, bypassing lag (inspection helper)."""
        with self._lock:
            pairs = self._primary.get(domain, {}).get(item, [])
            return [value for key, value in pairs if key == name]
