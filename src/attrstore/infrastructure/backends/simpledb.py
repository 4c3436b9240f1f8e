"""Amazon SimpleDB KeyValueBackend via boto3.

SimpleDB is eventually consistent by default; every read issued here can
ask for ``ConsistentRead``, so the guard confirms visibility in a single
round trip. ``Replace=True`` on a put replaces all values for the key.

``NoSuchDomain`` is absence for reads and :class:`DomainNotFound` for
writes. Every other client error propagates to the guard, which reports
it as ``BackendUnavailable``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from attrstore.domain.errors import DomainNotFound

logger = logging.getLogger(__name__)

_NO_SUCH_DOMAIN = "NoSuchDomain"


def _is_no_such_domain(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == _NO_SUCH_DOMAIN


def _quote(domain: str) -> str:
    """Quote a domain name for a select expression."""
    return "`" + domain.replace("`", "``") + "`"


def create_sdb_client(region: str | None = None, endpoint_url: str | None = None) -> Any:
    """Build a boto3 SimpleDB client with standard retry behaviour."""
    cfg = BotoConfig(
        retries={"max_attempts": 5, "mode": "standard"},
        connect_timeout=10,
        read_timeout=30,
        user_agent_extra="attrstore",
    )
    return boto3.client(
        "sdb",
        region_name=region,
        endpoint_url=endpoint_url,
        config=cfg,
    )


class SimpleDbBackend:
    """KeyValueBackend over a boto3 ``sdb`` client."""

    consistent_reads = True
    native_replace = True
    errors: ClassVar[tuple[type[Exception], ...]] = (BotoCoreError, ClientError)

    def __init__(self, client: Any, *, region: str | None = None) -> None:
        self._client = client
        self._region = region

    @classmethod
    def connect(
        cls, region: str | None = None, *, endpoint_url: str | None = None
    ) -> SimpleDbBackend:
        return cls(create_sdb_client(region, endpoint_url), region=region)

    @property
    def region(self) -> str | None:
        return self._region

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def domain_exists(self, domain: str, *, consistent: bool = False) -> bool:
        """Eventually consistent: DomainMetadata takes no ConsistentRead flag."""
        try:
            self._client.domain_metadata(DomainName=domain)
        except ClientError as exc:
            if _is_no_such_domain(exc):
                return False
            raise
        return True

    def create_domain(self, domain: str) -> None:
        self._client.create_domain(DomainName=domain)

    def delete_domain(self, domain: str) -> None:
        self._client.delete_domain(DomainName=domain)

    # ------------------------------------------------------------------
    # Items and attributes
    # ------------------------------------------------------------------

    def get_attributes(
        self, domain: str, item: str, *, consistent: bool = False
    ) -> dict[str, list[str]] | None:
        try:
            response = self._client.get_attributes(
                DomainName=domain,
                ItemName=item,
                ConsistentRead=consistent,
            )
        except ClientError as exc:
            if _is_no_such_domain(exc):
                return None
            raise
        pairs = response.get("Attributes", [])
        if not pairs:
            return None
        result: dict[str, list[str]] = {}
        for pair in pairs:
            result.setdefault(pair["Name"], []).append(pair["Value"])
        return result

    def put_attributes(
        self, domain: str, item: str, attributes: Mapping[str, str], *, replace: bool = False
    ) -> None:
        if not attributes:
            return
        payload = [
            {"Name": name, "Value": value, "Replace": replace}
            for name, value in attributes.items()
        ]
        try:
            self._client.put_attributes(DomainName=domain, ItemName=item, Attributes=payload)
        except ClientError as exc:
            if _is_no_such_domain(exc):
                raise DomainNotFound(domain) from exc
            raise

    def delete_attributes(self, domain: str, item: str, names: Iterable[str]) -> None:
        payload = [{"Name": name} for name in names]
        if not payload:
            return
        self._delete(domain, item, payload)

    def delete_item(self, domain: str, item: str) -> None:
        self._delete(domain, item, None)

    def _delete(self, domain: str, item: str, payload: list[dict[str, str]] | None) -> None:
        kwargs: dict[str, Any] = {"DomainName": domain, "ItemName": item}
        if payload is not None:
            kwargs["Attributes"] = payload
        try:
            self._client.delete_attributes(**kwargs)
        except ClientError as exc:
            if _is_no_such_domain(exc):
                logger.debug("Delete on missing domain %s ignored", domain)
                return
            raise

    def count_items(self, domain: str, *, consistent: bool = False) -> int:
        rows = self._select(f"select count(*) from {_quote(domain)}", consistent=consistent)
        total = 0
        for row in rows:
            for pair in row.get("Attributes", []):
                if pair["Name"] == "Count":
                    total += int(pair["Value"])
        return total

    def list_items(self, domain: str, *, consistent: bool = False) -> list[str]:
        rows = self._select(f"select itemName() from {_quote(domain)}", consistent=consistent)
        return [row["Name"] for row in rows]

    def _select(self, expression: str, *, consistent: bool) -> list[dict[str, Any]]:
        """Run a select expression, following NextToken; absent domain yields []."""
        rows: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"SelectExpression": expression, "ConsistentRead": consistent}
        while True:
            try:
                response = self._client.select(**kwargs)
            except ClientError as exc:
                if _is_no_such_domain(exc):
                    return []
                raise
            rows.extend(response.get("Items", []))
            token = response.get("NextToken")
            if not token:
                return rows
            kwargs["NextToken"] = token
