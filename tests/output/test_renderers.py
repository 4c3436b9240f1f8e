"""Tests for Rich and quiet renderers."""

from __future__ import annotations

import pytest

from attrstore.output.renderers import render_quiet, render_result
from attrstore.services.result import ServiceError, ServiceResult


class TestRenderQuiet:
    @pytest.mark.parametrize(
        ("op", "data", "expected"),
        [
            ("get_property", {"value": "v"}, "v"),
            ("get_property", {"value": None}, ""),
            ("item_json", {"json": "[]"}, "[]"),
            ("item_json", {"json": None}, "null"),
            ("domain_exists", {"exists": True}, "true"),
            ("domain_exists", {"exists": False}, "false"),
            ("list_items", {"items": ["a", "b"], "count": 2}, "a\nb"),
            ("create_domain", {"domain": "d", "exists": True}, "OK: create_domain"),
        ],
    )
    def test_payloads(self, op: str, data: dict, expected: str) -> None:
        assert render_quiet(ServiceResult(ok=True, op=op, data=data)) == expected

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False, op="get_property", error=ServiceError(code="X", message="boom")
        )
        assert render_quiet(result) == "ERROR: get_property: boom"


class TestRenderResult:
    def test_property(self) -> None:
        out = render_result(
            ServiceResult(
                ok=True,
                op="get_property",
                data={"domain": "d", "item": "i", "key": "k", "value": None, "decrypted": False},
            )
        )
        assert "get_property" in out
        assert "(absent)" in out
        assert "decrypted" not in out

    def test_items_table(self) -> None:
        out = render_result(
            ServiceResult(
                ok=True, op="list_items", data={"domain": "d", "items": ["web", "db"], "count": 2}
            )
        )
        assert "Item" in out
        assert "web" in out
        assert "db" in out

    def test_load(self) -> None:
        out = render_result(
            ServiceResult(
                ok=True,
                op="load_domain",
                data={"domain": "d", "count": 2, "items": ["test"], "applied": []},
            )
        )
        assert "attributes: 2" in out
        assert "test" in out

    def test_generic(self) -> None:
        out = render_result(
            ServiceResult(ok=True, op="create_domain", data={"domain": "d", "exists": True})
        )
        assert out.startswith("OK")
        assert "exists" in out

    def test_error_lists_failed_pairs(self) -> None:
        result = ServiceResult(
            ok=False,
            op="load_domain",
            error=ServiceError(
                code="LOAD_PARTIALLY_APPLIED",
                message="Loaded 1 attributes into d, 1 failed",
                detail={"domain": "d", "applied": [["a", "ok"]], "failed": [["a", "bad"]]},
            ),
        )
        out = render_result(result)
        assert "[LOAD_PARTIALLY_APPLIED]" in out
        assert "failed: a/bad" in out
        assert "detail:" not in out
        assert "detail:" in render_result(result, verbose=True)

    def test_verbose_renders_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="create_domain",
            data={"domain": "d"},
            meta={
                "region": "eu-west-1",
                "telemetry": {
                    "name": "DomainService.create_domain",
                    "duration_ms": 1.5,
                    "children": [{"name": "step", "duration_ms": 0.5}],
                },
            },
        )
        out = render_result(result, verbose=True)
        assert "region: eu-west-1" in out
        assert "DomainService.create_domain" in out
        assert "step" in out
        assert "meta" not in render_result(result)
