"""
Self-signed certificate and key generation.
"""

from __future__ import annotations

import ipaddress
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from hotcert.common.config import Config

logger = logging.getLogger(__name__)

KEY_TYPES = ("ec", "rsa")


@dataclass(frozen=True)
class GeneratedPair:
    cert_path: Path
    key_path: Path
    cert_pem: bytes
    key_pem: bytes


class KeyGenerator:
    """Key generator for creating self-signed certificate and key pairs."""

    def __init__(self, out_dir: Path | None = None):
        config = Config()
        self.out_dir = out_dir or Path.cwd()
        self.default_days = config.SELFSIGN_DAYS
        self.default_key_type = config.SELFSIGN_KEY_TYPE

    def build(
        self,
        common_name: str = "localhost",
        days: int | None = None,
        key_type: str | None = None,
    ) -> tuple[bytes, bytes]:
        """Return ``(cert_pem, key_pem)`` for a new self-signed pair."""
        key_type = key_type or self.default_key_type
        if key_type not in KEY_TYPES:
            msg = f"unsupported key type {key_type!r}, expected one of {KEY_TYPES}"
            raise ValueError(msg)
        days = days or self.default_days

        if key_type == "ec":
            private_key = ec.generate_private_key(ec.SECP256R1())
        else:
            private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

        subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])

        san_names: list[x509.GeneralName] = [x509.DNSName(common_name)]
        if common_name != "localhost":
            san_names.append(x509.DNSName("localhost"))
        san_names.append(x509.IPAddress(ipaddress.ip_address("127.0.0.1")))

        now = datetime.now(timezone.utc)
        certificate = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)  # Self-signed
            .public_key(private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(minutes=5))
            .not_valid_after(now + timedelta(days=days))
            .add_extension(x509.SubjectAlternativeName(san_names), critical=False)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None), critical=True
            )
            .add_extension(
                x509.ExtendedKeyUsage(
                    [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]
                ),
                critical=False,
            )
            .sign(private_key, hashes.SHA256())
        )

        cert_pem = certificate.public_bytes(serialization.Encoding.PEM)
        key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cert_pem, key_pem

    def generate(
        self,
        name: str = "server",
        common_name: str = "localhost",
        days: int | None = None,
        key_type: str | None = None,
    ) -> GeneratedPair:
        """Generate a pair and save it as ``<name>.crt`` and ``<name>.key``."""
        logger.info("Generating self-signed certificate for %s...", common_name)
        cert_pem, key_pem = self.build(common_name, days, key_type)

        self.out_dir.mkdir(parents=True, exist_ok=True)
        cert_path = self.out_dir / f"{name}.crt"
        key_path = self.out_dir / f"{name}.key"

        with cert_path.open("wb") as f:
            f.write(cert_pem)
        with key_path.open("wb") as f:
            f.write(key_pem)
        os.chmod(key_path, 0o600)

        logger.info("Certificate and key saved:")
        logger.info("  Certificate: %s", cert_path)
        logger.info("  Key: %s", key_path)
        return GeneratedPair(cert_path, key_path, cert_pem, key_pem)
