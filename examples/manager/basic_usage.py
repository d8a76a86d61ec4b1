"""
Basic usage example of CertManager.

This example generates a self-signed pair, starts watching it, rotates it
once and shows that the manager picked up the new certificate.
"""

import logging
import sys
import tempfile
import time
from pathlib import Path

# Add the project root to the path to import hotcert
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from hotcert.keygen import KeyGenerator
from hotcert.manager import CertManager


def main() -> None:
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    with tempfile.TemporaryDirectory() as tmp:
        keygen = KeyGenerator(Path(tmp))
        generated = keygen.generate(common_name="first.example")

        # The manager reports through any logging.Logger
        with CertManager(
            generated.cert_path, generated.key_path, logger=logger
        ) as manager:
            logger.info("Serving: %s", manager.get_certificate().info().subject)

            # Rotate the pair the way a renewal job would
            keygen.generate(common_name="second.example")
            time.sleep(manager.debounce + 1)

            logger.info("Serving: %s", manager.get_certificate().info().subject)


if __name__ == "__main__":
    main()
