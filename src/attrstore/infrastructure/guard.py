"""ConsistencyGuard — read-your-writes on top of an eventually-consistent backend.

Every backend call made by the attribute store goes through the guard.
Writes are followed by a visibility check that is polled at a fixed
interval until it passes or the retry budget runs out. Reads use the
backend's consistent mode whenever it offers one.

INVARIANT: Retries confirm visibility only. A failed backend call is
never retried here; it surfaces at once as ``BackendUnavailable``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from attrstore.domain.errors import BackendUnavailable, ConsistencyTimeout

if TYPE_CHECKING:
    from attrstore.infrastructure.backends.base import KeyValueBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_MAX_ATTEMPTS = 20


class ConsistencyGuard:
    """Wraps backend calls so writes are visible to the next read.

    Args:
        backend: The storage backend.
        poll_interval: Seconds to sleep between visibility checks.
        max_attempts: Visibility checks before ``ConsistencyTimeout``.
        sleep: Sleep function (injectable for tests).
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        self._backend = backend
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def consistent(self) -> bool:
        """Whether reads through the guard use the backend's strong mode."""
        return self._backend.consistent_reads

    def _call(self, op: str, fn: Callable[[], T]) -> T:
        """Run one backend call, translating library errors."""
        try:
            return fn()
        except self._backend.errors as exc:
            logger.warning("Backend call failed during %s: %s", op, exc)
            raise BackendUnavailable(op, str(exc)) from exc

    def read(self, query: Callable[[bool], T], *, op: str = "read") -> T:
        """Execute a read, passing the consistent-mode flag to *query*."""
        return self._call(op, lambda: query(self.consistent))

    def write(
        self,
        mutation: Callable[[], object],
        confirm: Callable[[bool], bool],
        *,
        op: str = "write",
    ) -> int:
        """Apply *mutation*, then poll *confirm* until the effect is visible.

        Args:
            mutation: The backend write(s) to perform.
            confirm: Visibility predicate; receives the consistent-mode flag.
            op: Operation name for logs and errors.

        Returns:
            The number of visibility checks it took.

        Raises:
            BackendUnavailable: The mutation or a check errored at the backend.
            ConsistencyTimeout: The effect never became visible.
        """
        self._call(op, mutation)
        for attempt in range(1, self._max_attempts + 1):
            if self.read(confirm, op=op):
                if attempt > 1:
                    logger.debug("%s visible after %d checks", op, attempt)
                return attempt
            if attempt < self._max_attempts:
                self._sleep(self._poll_interval)
        logger.warning("%s not visible after %d checks", op, self._max_attempts)
        raise ConsistencyTimeout(op, self._max_attempts)
