# Live reloading of TLS certificate and key pairs

import logging

from hotcert.common.exceptions import (
    CertManagerError,
    FileUnreadable,
    LoadError,
    ManagerStateError,
    MismatchedPair,
    NoCertificateError,
    ParseFailure,
    PathResolutionError,
    WatchBackendError,
    WatchSubscriptionError,
)
from hotcert.loader import KeyPair, KeyPairLoader, load_key_pair
from hotcert.manager import CertManager, ManagerState
from hotcert.store import KeyPairStore
from hotcert.tls import ContextSelector, build_ssl_context

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CertManager",
    "CertManagerError",
    "ContextSelector",
    "FileUnreadable",
    "KeyPair",
    "KeyPairLoader",
    "KeyPairStore",
    "LoadError",
    "ManagerState",
    "ManagerStateError",
    "MismatchedPair",
    "NoCertificateError",
    "ParseFailure",
    "PathResolutionError",
    "WatchBackendError",
    "WatchSubscriptionError",
    "build_ssl_context",
    "load_key_pair",
]
