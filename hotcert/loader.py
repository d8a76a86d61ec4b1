"""
Loading and cross-validation of certificate and key pairs.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from hotcert.common.exceptions import FileUnreadable, MismatchedPair, ParseFailure
from hotcert.common.models import CertificateInfo

if TYPE_CHECKING:
    import os

    from cryptography.hazmat.primitives.asymmetric.types import (
        CertificateIssuerPrivateKeyTypes,
    )

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN"


@dataclass(frozen=True)
class KeyPair:
    """A parsed certificate chain and the private key of its leaf.

    Never mutated after construction; a reload always builds a new one.
    """

    certificate_chain: tuple[x509.Certificate, ...]
    private_key: CertificateIssuerPrivateKeyTypes
    raw_certificate: bytes
    raw_private_key: bytes

    @property
    def leaf(self) -> x509.Certificate:
        return self.certificate_chain[0]

    @property
    def certificate(self) -> tuple[bytes, ...]:
        """DER encoding of every certificate in the chain, leaf first."""
        return tuple(
            cert.public_bytes(serialization.Encoding.DER)
            for cert in self.certificate_chain
        )

    def certificate_pem(self) -> bytes:
        return b"".join(
            cert.public_bytes(serialization.Encoding.PEM)
            for cert in self.certificate_chain
        )

    def private_key_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def info(self) -> CertificateInfo:
        leaf = self.leaf
        return CertificateInfo(
            subject=leaf.subject.rfc4514_string(),
            issuer=leaf.issuer.rfc4514_string(),
            serial_number=leaf.serial_number,
            not_valid_before=leaf.not_valid_before_utc,
            not_valid_after=leaf.not_valid_after_utc,
            fingerprint_sha256=hashlib.sha256(
                leaf.public_bytes(serialization.Encoding.DER)
            ).hexdigest(),
            chain_length=len(self.certificate_chain),
        )


class KeyPairLoader:
    """Reads a certificate and key from disk and checks that they belong together.

    ``load`` only reads files. Committing the result is the caller's business.
    """

    def __init__(self, password: bytes | None = None):
        self.password = password

    def load(
        self,
        cert_path: str | os.PathLike[str],
        key_path: str | os.PathLike[str],
    ) -> KeyPair:
        """Load and validate a key pair.

        Args:
            cert_path: Certificate chain file, PEM (leaf first) or DER.
            key_path: Private key file, PEM or DER.

        Returns:
            A new KeyPair.

        Raises:
            FileUnreadable: Either file cannot be read.
            ParseFailure: Either file does not parse.
            MismatchedPair: The key does not belong to the leaf certificate.
        """
        cert_path = Path(cert_path)
        key_path = Path(key_path)

        cert_data = self._read(cert_path, "cert")
        key_data = self._read(key_path, "key")

        chain = self._parse_chain(cert_data, cert_path)
        private_key = self._parse_key(key_data, key_path)

        cert_spki = _spki(chain[0], cert_path, "certificate")
        key_spki = _spki(private_key, key_path, "private key")
        if cert_spki != key_spki:
            raise MismatchedPair(key_path)

        logger.debug("Loaded key pair from %s and %s", cert_path, key_path)
        return KeyPair(
            certificate_chain=chain,
            private_key=private_key,
            raw_certificate=cert_data,
            raw_private_key=key_data,
        )

    @staticmethod
    def _read(path: Path, side: str) -> bytes:
        try:
            with path.open("rb") as f:
                return f.read()
        except OSError as err:
            raise FileUnreadable(path, side, err.strerror or str(err)) from err

    @staticmethod
    def _parse_chain(data: bytes, path: Path) -> tuple[x509.Certificate, ...]:
        try:
            if PEM_MARKER in data:
                chain = tuple(x509.load_pem_x509_certificates(data))
            else:
                chain = (x509.load_der_x509_certificate(data),)
        except ValueError as err:
            msg = f"can't parse certificate {path}: {err}"
            raise ParseFailure(msg, path) from err
        if not chain:
            msg = f"no certificate found in {path}"
            raise ParseFailure(msg, path)
        return chain

    def _parse_key(self, data: bytes, path: Path) -> CertificateIssuerPrivateKeyTypes:
        try:
            if PEM_MARKER in data:
                key = serialization.load_pem_private_key(data, password=self.password)
            else:
                key = serialization.load_der_private_key(data, password=self.password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            msg = f"can't parse private key {path}: {err}"
            raise ParseFailure(msg, path) from err
        return key  # type: ignore[return-value]


def _spki(source: object, path: Path, what: str) -> bytes:
    """DER SubjectPublicKeyInfo of a certificate or private key.

    cryptography decodes the public key lazily, so a certificate that parsed
    can still fail here.
    """
    try:
        public_key = source.public_key()  # type: ignore[attr-defined]
        return public_key.public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as err:
        msg = f"can't read public key of {what} {path}: {err}"
        raise ParseFailure(msg, path) from err


_default_loader = KeyPairLoader()


def load_key_pair(
    cert_path: str | os.PathLike[str], key_path: str | os.PathLike[str]
) -> KeyPair:
    """Load a key pair with the default (passwordless) loader."""
    return _default_loader.load(cert_path, key_path)
