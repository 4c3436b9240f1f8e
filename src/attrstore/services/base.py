"""BaseService — foundation for services that wrap the attribute store.

Every service receives an :class:`AttributeStore` at construction time
and converts store exceptions into ``ok=False`` results so callers never
need a try/except around a service call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from attrstore.domain.errors import AttributeStoreError
from attrstore.services.result import ServiceResult

if TYPE_CHECKING:
    from attrstore.infrastructure.store import AttributeStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes."""

    def __init__(self, store: AttributeStore) -> None:
        self._store = store

    def _meta(self) -> dict[str, Any] | None:
        region = self._store.region
        return {"region": region} if region else None

    def _run(
        self,
        op: str,
        action: Callable[[], dict[str, Any]],
        *,
        context: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Run *action* and wrap its payload, or its store error, in a result.

        *context* identifies the target (domain, item, key) and is merged
        into the payload on success and kept as data on failure.
        """
        context = context or {}
        try:
            payload = action()
        except AttributeStoreError as exc:
            logger.debug("%s failed: %s", op, exc.code)
            return ServiceResult.failure(op, exc, data=context)
        return ServiceResult(ok=True, op=op, data={**context, **payload}, meta=self._meta())
