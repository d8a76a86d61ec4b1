from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from hotcert.keygen import KeyGenerator
from hotcert.manager import CertManager, ManagerState

DEBOUNCE = 0.3


class RecordingSink:
    """Log sink that keeps formatted messages for assertions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.messages: list[str] = []
        self.debug_messages: list[str] = []

    def _record(self, target: list[str], msg: str, args: tuple) -> None:
        with self._lock:
            target.append(msg % args if args else msg)

    def debug(self, msg: str, *args: object) -> None:
        self._record(self.debug_messages, msg, args)

    def info(self, msg: str, *args: object) -> None:
        self._record(self.messages, msg, args)

    def warning(self, msg: str, *args: object) -> None:
        self._record(self.messages, msg, args)

    def error(self, msg: str, *args: object) -> None:
        self._record(self.messages, msg, args)

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self.messages)

    def count(self, prefix: str) -> int:
        return sum(1 for m in self.snapshot() if m.startswith(prefix))


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def write_pair(directory: Path, cert_pem: bytes, key_pem: bytes, name: str = "server") -> tuple[Path, Path]:
    cert_path = directory / f"{name}.crt"
    key_path = directory / f"{name}.key"
    cert_path.write_bytes(cert_pem)
    key_path.write_bytes(key_pem)
    return cert_path, key_path


@pytest.fixture(scope="session")
def pem_pairs() -> list[tuple[bytes, bytes]]:
    """Two unrelated self-signed (cert_pem, key_pem) pairs."""
    keygen = KeyGenerator()
    return [keygen.build(common_name="one.test"), keygen.build(common_name="two.test")]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def manager_factory(sink: RecordingSink) -> Iterator[Callable[..., CertManager]]:
    managers: list[CertManager] = []

    def factory(cert_path: Path, key_path: Path, **kwargs: object) -> CertManager:
        kwargs.setdefault("logger", sink)
        kwargs.setdefault("debounce", DEBOUNCE)
        manager = CertManager(cert_path, key_path, **kwargs)
        managers.append(manager)
        return manager

    yield factory

    for manager in managers:
        if manager.state is ManagerState.WATCHING:
            manager.stop()


def corrupt_public_key(cert_pem: bytes) -> bytes:
    """DER certificate whose EC public point no longer decodes.

    The uncompressed point prefix 0x04 inside the P-256 SubjectPublicKeyInfo
    bit string is turned into 0x05. The certificate still parses; only
    ``public_key()`` fails.
    """
    der = x509.load_pem_x509_certificate(cert_pem).public_bytes(serialization.Encoding.DER)
    marker = b"\x03\x42\x00\x04"
    assert der.count(marker) == 1
    return der.replace(marker, b"\x03\x42\x00\x05")
