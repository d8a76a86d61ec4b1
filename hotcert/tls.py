"""
Integration with the standard library ``ssl`` module.

``ssl.SSLContext`` only loads certificates from files, so a validated KeyPair
is written to a private temporary directory, loaded, and removed again.
"""

from __future__ import annotations

import logging
import os
import ssl
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from hotcert.common.exceptions import NoCertificateError

if TYPE_CHECKING:
    from hotcert.loader import KeyPair
    from hotcert.manager import CertManager

logger = logging.getLogger(__name__)


def build_ssl_context(
    pair: KeyPair, purpose: ssl.Purpose = ssl.Purpose.CLIENT_AUTH
) -> ssl.SSLContext:
    """
    Create an SSL context presenting ``pair``.

    Args:
        pair: Validated certificate chain and key.
        purpose: ``CLIENT_AUTH`` for a server context, ``SERVER_AUTH`` for a client.

    Returns:
        SSLContext with the pair loaded.
    """
    context = ssl.create_default_context(purpose)
    with tempfile.TemporaryDirectory(prefix="hotcert-") as tmp:
        cert_file = Path(tmp) / "tls.crt"
        key_file = Path(tmp) / "tls.key"
        cert_file.write_bytes(pair.certificate_pem())
        fd = os.open(key_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(pair.private_key_pem())
        context.load_cert_chain(cert_file, key_file)
    return context


class ContextSelector:
    """Hands each TLS handshake a context built from the manager's current pair."""

    def __init__(self, manager: CertManager):
        self.manager = manager
        self._lock = threading.Lock()
        self._pair: KeyPair | None = None
        self._context: ssl.SSLContext | None = None

    def current_context(self) -> ssl.SSLContext:
        """Context for the active pair, rebuilt only when the pair changes.

        Raises:
            NoCertificateError: Nothing has loaded yet.
        """
        pair = self.manager.get_certificate()
        with self._lock:
            if self._pair is not pair or self._context is None:
                self._context = build_ssl_context(pair)
                self._pair = pair
                logger.debug("Built SSL context for %s", pair.leaf.subject.rfc4514_string())
            return self._context

    def sni_callback(
        self,
        ssl_object: ssl.SSLObject | ssl.SSLSocket,
        server_name: str | None,
        ssl_context: ssl.SSLContext,
    ) -> int | None:
        """Install the current pair on the handshake; fail it when none is loaded."""
        try:
            ssl_object.context = self.current_context()
        except NoCertificateError:
            logger.warning("Refusing TLS handshake for %s: no certificate loaded", server_name)
            return ssl.ALERT_DESCRIPTION_HANDSHAKE_FAILURE
        return None

    def server_context(self) -> ssl.SSLContext:
        """Certless base server context that defers to ``sni_callback``."""
        context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        context.sni_callback = self.sni_callback
        return context
