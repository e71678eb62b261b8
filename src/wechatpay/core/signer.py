"""Merchant request signers."""

import base64
from abc import ABC, abstractmethod
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from .crypto import sign_sha256_rsa
from .errors import ConfigurationError
from .models import SignatureResult


class Signer(ABC):
    """Produces a signature over a canonical message."""

    name: str = ""
    type: str = ""
    version: str = ""

    @abstractmethod
    def sign(self, message: str) -> SignatureResult:
        """Sign a canonical message.

        Args:
            message: Canonical message

        Returns:
            SignatureResult with the certificate serial and base64 signature
        """


class SHA256WithRSASigner(Signer):
    """Signs messages with the merchant RSA private key (PKCS#1 v1.5, SHA-256)."""

    name = "SHA256withRSA"
    type = "PRIVATEKEY"
    version = "1.0"

    def __init__(
        self,
        private_key: Optional[rsa.RSAPrivateKey],
        certificate_serial_no: str,
    ):
        """Initialize signer.

        Args:
            private_key: Merchant private key (``apiclient_key.pem``)
            certificate_serial_no: Serial number of the merchant certificate
        """
        self.private_key = private_key
        self.certificate_serial_no = certificate_serial_no

    def sign(self, message: str) -> SignatureResult:
        """Sign a message.

        Raises:
            ConfigurationError: If the private key or serial number is missing
        """
        if self.private_key is None:
            raise ConfigurationError(
                "you must set private key to use SHA256WithRSASigner"
            )
        if not (self.certificate_serial_no or "").strip():
            raise ConfigurationError(
                "you must set mch certificate serial no to use SHA256WithRSASigner"
            )

        signature = sign_sha256_rsa(self.private_key, message.encode("utf-8"))
        return SignatureResult(
            certificate_serial_no=self.certificate_serial_no,
            signature=base64.b64encode(signature).decode("utf-8"),
        )
