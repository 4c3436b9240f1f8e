"""Shared pytest fixtures and test helpers for attrstore tests."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pytest
from click.testing import CliRunner
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from attrstore.infrastructure.backends.base import KeyValueBackend
from attrstore.infrastructure.backends.memory import MemoryBackend
from attrstore.infrastructure.backends.sqlite import SqliteBackend
from attrstore.infrastructure.cipher import ValueCipher
from attrstore.infrastructure.guard import ConsistencyGuard
from attrstore.infrastructure.store import AttributeStore
from attrstore.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_process_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep env vars, root logging, and telemetry from leaking between tests."""
    monkeypatch.delenv("ATTRSTORE_CONFIG", raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Backends and stores
# ---------------------------------------------------------------------------


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


def make_store(
    backend: KeyValueBackend,
    *,
    sleeper: RecordingSleep | None = None,
    max_attempts: int = 20,
    cipher: ValueCipher | None = None,
) -> AttributeStore:
    """Build a store whose guard never really sleeps."""
    guard = ConsistencyGuard(
        backend,
        poll_interval=0.01,
        max_attempts=max_attempts,
        sleep=sleeper or RecordingSleep(),
    )
    return AttributeStore(backend, guard=guard, cipher=cipher)


@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def sqlite_backend(tmp_path: Path) -> Generator[SqliteBackend]:
    backend = SqliteBackend.open(tmp_path / "attrs.db")
    try:
        yield backend
    finally:
        backend.close()


@pytest.fixture(params=["memory", "memory-lagged", "memory-replace", "sqlite"])
def any_backend(request: pytest.FixtureRequest, tmp_path: Path) -> Generator[KeyValueBackend]:
    """Every backend flavour the store must behave identically on."""
    if request.param == "memory":
        yield MemoryBackend()
    elif request.param == "memory-lagged":
        yield MemoryBackend(lag=3, consistent_reads=False)
    elif request.param == "memory-replace":
        yield MemoryBackend(native_replace=True, lag=1)
    else:
        backend = SqliteBackend.open(tmp_path / "attrs.db")
        try:
            yield backend
        finally:
            backend.close()


# ---------------------------------------------------------------------------
# Key material
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyFiles:
    """PEM files for one RSA key pair."""

    private_key: Path
    public_key: Path
    certificate: Path
    combined: Path
    encrypted_private_key: Path
    password: str


def _write_key_files(directory: Path, name: str) -> KeyFiles:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    subject = issuer = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, f"attrstore {name}")])
    not_before = dt.datetime.now(dt.UTC) - dt.timedelta(minutes=5)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + dt.timedelta(days=30))
        .sign(private_key=key, algorithm=hashes.SHA256())
    )
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    password = "correct horse"
    encrypted_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(password.encode("utf-8")),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM)

    files = KeyFiles(
        private_key=directory / f"{name}-private.pem",
        public_key=directory / f"{name}-public.pem",
        certificate=directory / f"{name}-cert.pem",
        combined=directory / f"{name}-combined.pem",
        encrypted_private_key=directory / f"{name}-private-enc.pem",
        password=password,
    )
    files.private_key.write_bytes(key_pem)
    files.public_key.write_bytes(public_pem)
    files.certificate.write_bytes(cert_pem)
    files.combined.write_bytes(cert_pem + key_pem)
    files.encrypted_private_key.write_bytes(encrypted_pem)
    return files


@pytest.fixture(scope="session")
def key_files(tmp_path_factory: pytest.TempPathFactory) -> KeyFiles:
    return _write_key_files(tmp_path_factory.mktemp("keys"), "primary")


@pytest.fixture(scope="session")
def other_key_files(tmp_path_factory: pytest.TempPathFactory) -> KeyFiles:
    return _write_key_files(tmp_path_factory.mktemp("other-keys"), "other")


# ---------------------------------------------------------------------------
# CLI isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI uses an isolated SQLite store.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    for name in ("ATTRSTORE_BACKEND__KIND", "ATTRSTORE_REGION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
