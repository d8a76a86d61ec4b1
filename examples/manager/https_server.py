"""
HTTPS server example with a live-reloaded certificate.

Run it, then replace the certificate and key files: new connections get the
new certificate without a restart.

    python examples/manager/https_server.py server.crt server.key
"""

import logging
import sys
from pathlib import Path

# Add the project root to the path to import hotcert
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from hotcert.common.logging_utils import setup_logger
from hotcert.manager import CertManager
from hotcert.server import serve


def main() -> None:
    if len(sys.argv) != 3:  # noqa: PLR2004
        sys.exit(f"usage: {sys.argv[0]} CERT KEY")

    logger = logging.getLogger("hotcert")
    setup_logger(logger, logging.INFO)

    manager = CertManager(sys.argv[1], sys.argv[2], logger=logger)
    manager.start()
    try:
        serve(manager, "127.0.0.1", 8443)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        manager.stop()


if __name__ == "__main__":
    main()
