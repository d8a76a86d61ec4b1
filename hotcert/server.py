"""
Demo HTTPS server presenting a live-reloaded certificate.
"""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING

from hotcert.common.exceptions import NoCertificateError

if TYPE_CHECKING:
    from hotcert.manager import CertManager

logger = logging.getLogger(__name__)


class CertificateStatusHandler(BaseHTTPRequestHandler):
    """Answers every GET with the certificate currently being served."""

    manager: CertManager

    def do_GET(self) -> None:  # noqa: N802
        try:
            body = self.manager.get_certificate().info().model_dump(mode="json")
            status = 200
        except NoCertificateError as err:
            body = {"error": str(err)}
            status = 503
        payload = json.dumps(body).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.info("%s - %s", self.address_string(), format % args)


def make_server(manager: CertManager, host: str, port: int) -> ThreadingHTTPServer:
    """Build an HTTPS server whose handshakes use ``manager``'s current pair."""
    handler = type(
        "BoundCertificateStatusHandler",
        (CertificateStatusHandler,),
        {"manager": manager},
    )
    httpd = ThreadingHTTPServer((host, port), handler)
    httpd.socket = manager.server_context().wrap_socket(httpd.socket, server_side=True)
    return httpd


def serve(manager: CertManager, host: str, port: int) -> None:
    """Start the HTTPS server and block until interrupted."""
    httpd = make_server(manager, host, port)
    logger.info("Serving HTTPS on %s:%s", host, port)
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()
