"""
Pydantic models for watch targets, file events and certificate summaries.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from hotcert.common.exceptions import PathResolutionError


def resolve_path(path: str | os.PathLike[str], side: str) -> Path:
    """Make ``path`` absolute without following symlinks."""
    try:
        raw = os.fspath(path)
    except TypeError as err:
        msg = f"can't resolve {side} path {path!r}: {err}"
        raise PathResolutionError(msg) from err
    if not raw:
        msg = f"can't resolve {side} path: empty path"
        raise PathResolutionError(msg)
    if "\x00" in raw:
        msg = f"can't resolve {side} path {raw!r}: embedded null byte"
        raise PathResolutionError(msg)
    try:
        return Path(os.path.abspath(raw))
    except (OSError, ValueError) as err:
        msg = f"can't resolve {side} path {raw!r}: {err}"
        raise PathResolutionError(msg) from err


class WatchTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    cert_path: Path
    key_path: Path

    @field_validator("cert_path", "key_path")
    @classmethod
    def must_be_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            msg = f"{value} is not absolute"
            raise ValueError(msg)
        return value

    @classmethod
    def from_paths(
        cls, cert_path: str | os.PathLike[str], key_path: str | os.PathLike[str]
    ) -> WatchTarget:
        return cls(
            cert_path=resolve_path(cert_path, "cert"),
            key_path=resolve_path(key_path, "key"),
        )

    @property
    def directories(self) -> tuple[Path, ...]:
        """Distinct parent directories, certificate side first."""
        cert_dir = self.cert_path.parent
        key_dir = self.key_path.parent
        if cert_dir == key_dir:
            return (cert_dir,)
        return (cert_dir, key_dir)

    def sides(self) -> tuple[tuple[str, Path], ...]:
        return (("cert", self.cert_path), ("key", self.key_path))


class FileEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str
    src_path: str
    dest_path: str = ""
    is_directory: bool = False

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(p for p in (self.src_path, self.dest_path) if p)


class CertificateInfo(BaseModel):
    subject: str
    issuer: str
    serial_number: int
    not_valid_before: datetime
    not_valid_after: datetime
    fingerprint_sha256: str
    chain_length: int
