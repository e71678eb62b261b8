"""Certificate store for trusted platform certificates."""

import logging
import threading
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import yaml
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa

from ..core.crypto import load_certificate_file
from ..core.errors import ConfigurationError, UnknownCertificateError, WechatPayError
from ..core.models import PlatformCertificate

logger = logging.getLogger(__name__)


class CertificateStore:
    """Holds trusted platform certificates keyed by serial number.

    Reads go to an immutable snapshot; writes build a new snapshot under a
    lock and swap it in, so lookups never observe a half-applied refresh.
    Entries are never removed.
    """

    def __init__(self, certificates: Optional[Iterable[x509.Certificate]] = None):
        """Initialize the store.

        Args:
            certificates: Bootstrap certificates provided by the operator
        """
        self._lock = threading.Lock()
        self._snapshot: Mapping[str, PlatformCertificate] = MappingProxyType({})
        for certificate in certificates or ():
            self.add(certificate)

    def add(
        self,
        certificate: x509.Certificate | PlatformCertificate,
        now: Optional[datetime] = None,
    ) -> bool:
        """Add a certificate to the store.

        Expired certificates and serial numbers already present are skipped;
        the first certificate seen for a serial wins.

        Args:
            certificate: Parsed certificate
            now: Current time (default: now, UTC)

        Returns:
            True if the certificate was inserted
        """
        if not isinstance(certificate, PlatformCertificate):
            certificate = PlatformCertificate.from_x509(certificate)

        if certificate.is_expired(now):
            logger.warning(
                "Skipping expired platform certificate serial=%s expired=%s",
                certificate.serial_no,
                certificate.expire_time.isoformat(),
            )
            return False

        with self._lock:
            if certificate.serial_no in self._snapshot:
                return False
            updated = dict(self._snapshot)
            updated[certificate.serial_no] = certificate
            self._snapshot = MappingProxyType(updated)

        logger.info("Added platform certificate serial=%s", certificate.serial_no)
        return True

    def get(self, serial_no: str) -> Optional[PlatformCertificate]:
        """Get a certificate by serial number.

        Returns:
            PlatformCertificate if present, None otherwise
        """
        return self._snapshot.get(serial_no)

    def lookup(self, serial_no: str) -> rsa.RSAPublicKey:
        """Get the public key stored under a serial number.

        Raises:
            UnknownCertificateError: If no certificate has this serial number
        """
        certificate = self._snapshot.get(serial_no)
        if certificate is None:
            raise UnknownCertificateError(
                f"no certificate corresponding to serial number {serial_no}",
                serial_no=serial_no,
            )
        return certificate.public_key

    def serial_numbers(self) -> list[str]:
        return list(self._snapshot.keys())

    def list_certificates(self) -> list[PlatformCertificate]:
        """List all stored certificates, expired ones included."""
        return list(self._snapshot.values())

    def has_valid_certificate(self, now: Optional[datetime] = None) -> bool:
        """Check whether at least one stored certificate is unexpired."""
        return any(not c.is_expired(now) for c in self._snapshot.values())

    def __contains__(self, serial_no: object) -> bool:
        return serial_no in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    @classmethod
    def from_config(cls, config_path: str | Path) -> "CertificateStore":
        """Load bootstrap certificates listed in a YAML configuration file.

        Example file::

            platform_certificates:
              - certs/wechatpay_5157F09EFDC096DE15EBE81A47057A72.pem

        Relative paths are resolved against the file's directory.

        Args:
            config_path: Path to YAML config file

        Returns:
            CertificateStore instance

        Raises:
            ConfigurationError: If config file cannot be loaded or parsed
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to load certificate store: {e}") from e

        store = cls()
        for entry in data.get("platform_certificates", []):
            path = Path(entry)
            if not path.is_absolute():
                path = config_path.parent / path
            try:
                store.add(load_certificate_file(path))
            except WechatPayError as e:
                raise ConfigurationError(
                    f"Failed to load platform certificate {path}: {e}"
                ) from e
        return store
