"""DomainService — result-returning facade over AttributeStore.

Each method maps onto one store operation. Reads that find nothing
succeed with a null value; only genuine failures produce ``ok=False``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from attrstore.domain.document import load_document
from attrstore.services.base import BaseService
from attrstore.services.result import ServiceResult
from attrstore.services.telemetry import trace_span, traced


class DomainService(BaseService):
    """Domain, item, and property operations."""

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    @traced
    def create_domain(self, domain: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._store.create(domain)
            return {"exists": True}

        return self._run("create_domain", action, context={"domain": domain})

    @traced
    def destroy_domain(self, domain: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._store.destroy(domain)
            return {"exists": False}

        return self._run("destroy_domain", action, context={"domain": domain})

    @traced
    def domain_exists(self, domain: str) -> ServiceResult:
        return self._run(
            "domain_exists",
            lambda: {"exists": self._store.exists(domain)},
            context={"domain": domain},
        )

    @traced
    def list_items(self, domain: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            items = self._store.list_items(domain)
            return {"count": len(items), "items": items}

        return self._run("list_items", action, context={"domain": domain})

    @traced
    def load_domain(self, domain: str, source: Path | dict[str, Any]) -> ServiceResult:
        """Bulk-load a document (a parsed mapping or a JSON file path)."""

        def action() -> dict[str, Any]:
            with trace_span("parse_document"):
                document = load_document(source) if isinstance(source, Path) else source
            with trace_span("apply_document") as span:
                report = self._store.load_domain(domain, document)
                if span is not None:
                    span.annotate("applied", report.count)
            return {
                "count": report.count,
                "items": report.items,
                "applied": [list(pair) for pair in report.applied],
            }

        return self._run("load_domain", action, context={"domain": domain})

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @traced
    def destroy_item(self, domain: str, item: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._store.destroy_item(domain, item)
            return {}

        return self._run("destroy_item", action, context={"domain": domain, "item": item})

    @traced
    def item_json(self, domain: str, item: str) -> ServiceResult:
        return self._run(
            "item_json",
            lambda: {"json": self._store.get_item_attributes_json(domain, item)},
            context={"domain": domain, "item": item},
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @traced
    def get_property(
        self, domain: str, item: str, key: str, *, decrypt: bool = False
    ) -> ServiceResult:
        if decrypt:
            read = self._store.get_encrypted_property
        else:
            read = self._store.get_property
        return self._run(
            "get_property",
            lambda: {"value": read(domain, item, key), "decrypted": decrypt},
            context={"domain": domain, "item": item, "key": key},
        )

    @traced
    def set_property(
        self, domain: str, item: str, key: str, value: str, *, encrypt: bool = False
    ) -> ServiceResult:
        def action() -> dict[str, Any]:
            if encrypt:
                self._store.set_encrypted_property(domain, item, key, value)
            else:
                self._store.set_property(domain, item, key, value)
            return {"encrypted": encrypt}

        return self._run(
            "set_property", action, context={"domain": domain, "item": item, "key": key}
        )
