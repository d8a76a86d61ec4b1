"""
Custom exceptions for certificate reloading.
"""

from __future__ import annotations

from pathlib import Path


class CertManagerError(Exception):
    """Base class for all certificate manager errors."""


class PathResolutionError(CertManagerError):
    """A certificate or key path cannot be turned into an absolute path."""


class WatchSubscriptionError(CertManagerError):
    """The filesystem watch cannot be created or a directory cannot be registered."""

    def __init__(self, message: str, side: str | None = None) -> None:
        super().__init__(message)
        self.side = side


class WatchBackendError(CertManagerError):
    """The watch backend reported a problem while running."""


class ManagerStateError(CertManagerError):
    """A lifecycle method was called in a state that does not allow it."""


class NoCertificateError(CertManagerError):
    """No certificate and key pair has been loaded yet."""

    def __init__(self, message: str = "no certificate loaded") -> None:
        super().__init__(message)


class LoadError(CertManagerError):
    """A candidate key pair could not be produced."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class FileUnreadable(LoadError):
    """The certificate or key file cannot be read."""

    def __init__(self, path: Path, side: str, reason: str) -> None:
        super().__init__(f"can't read {side} file {path}: {reason}", path)
        self.side = side


class ParseFailure(LoadError):
    """The certificate or key file does not hold a usable PEM or DER structure."""


class MismatchedPair(LoadError):
    """The private key does not belong to the leaf certificate."""

    def __init__(self, path: Path | None = None) -> None:
        super().__init__("private key does not match public key", path)
