"""SQLAlchemy Core table definitions for the local SQLite backend.

Attributes are stored one row per (name, value) pair, so a key may hold
several values exactly like the remote store it stands in for.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text, UniqueConstraint

metadata = MetaData()

domains = Table(
    "domains",
    metadata,
    Column("name", Text, primary_key=True),
    Column("created", Text, nullable=False),
)

attributes = Table(
    "attributes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "domain",
        Text,
        ForeignKey("domains.name", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("item", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("value", Text, nullable=False),
    UniqueConstraint("domain", "item", "name", "value"),
    Index("ix_attributes_domain_item", "domain", "item"),
)
