"""Signature verifiers backed by the platform certificate store."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..core.crypto import verify_sha256_rsa
from ..core.errors import MalformedInputError

if TYPE_CHECKING:
    from ..trust.store import CertificateStore


class Verifier(ABC):
    """Checks a signature made with a platform certificate's private key."""

    @abstractmethod
    def verify(self, serial_no: str, message: str, signature: bytes) -> None:
        """Verify a signature.

        Args:
            serial_no: Serial number of the signing platform certificate
            message: Canonical message
            signature: Raw signature bytes

        Raises:
            WechatPayError: If verification fails
        """


class NullVerifier(Verifier):
    """Accepts every signature.

    UNSAFE: only for downloading the platform certificate list, which cannot
    be verified before a platform certificate is known. Never use it for an
    endpoint carrying financial data.
    """

    def verify(self, serial_no: str, message: str, signature: bytes) -> None:
        return None


class CertificateVerifier(Verifier):
    """Verifies SHA256withRSA signatures against a certificate store."""

    def __init__(self, store: "CertificateStore"):
        """Initialize verifier.

        Args:
            store: Store with trusted platform certificates
        """
        self.store = store

    def verify(self, serial_no: str, message: str, signature: bytes) -> None:
        """Verify a response signature.

        Raises:
            MalformedInputError: If an argument is empty
            UnknownCertificateError: If the serial number is not in the store
            SignatureMismatchError: If the signature does not match
        """
        if not (serial_no or "").strip():
            raise MalformedInputError("serial number is empty, verifier needs a serial number")
        if not (message or "").strip():
            raise MalformedInputError("message is empty, verifier needs a message")
        if not signature:
            raise MalformedInputError("signature is empty, verifier needs a signature")

        public_key = self.store.lookup(serial_no)
        verify_sha256_rsa(public_key, message.encode("utf-8"), signature)
