"""Authorization header generation for outgoing requests."""

import secrets
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .errors import ConfigurationError
from .signer import Signer

# Authorization scheme for SHA256withRSA signed requests
AUTHORIZATION_SCHEME = "WECHATPAY2-SHA256-RSA2048"

NONCE_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
NONCE_LENGTH = 32


def generate_nonce_str(length: int = NONCE_LENGTH) -> str:
    """Generate a random alphanumeric nonce from a CSPRNG."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


def build_message(
    method: str, canonical_url: str, timestamp: int, nonce: str, body: str
) -> str:
    """Build the canonical request message.

    Fields are copied verbatim; every line, the last included, ends with ``\\n``.
    """
    return f"{method}\n{canonical_url}\n{timestamp}\n{nonce}\n{body}\n"


def format_authorization(
    mchid: str, nonce: str, timestamp: int, serial_no: str, signature: str
) -> str:
    """Format the Authorization header value."""
    return (
        f'{AUTHORIZATION_SCHEME} mchid="{mchid}",nonce_str="{nonce}",'
        f'timestamp="{timestamp}",serial_no="{serial_no}",signature="{signature}"'
    )


class Credential(ABC):
    """Builds the Authorization header for a request."""

    @abstractmethod
    def generate_authorization_header(
        self, method: str, canonical_url: str, sign_body: str
    ) -> str:
        """Generate the Authorization header value.

        Args:
            method: HTTP method
            canonical_url: Request path with query string
            sign_body: Request body exactly as sent ("" when there is none)
        """


class WechatPayCredentials(Credential):
    """Merchant credentials: signer plus merchant ID."""

    def __init__(
        self,
        signer: Optional[Signer],
        mchid: str,
        clock: Callable[[], float] = time.time,
        nonce_generator: Callable[[], str] = generate_nonce_str,
    ):
        """Initialize credentials.

        Args:
            signer: Signer holding the merchant private key
            mchid: Merchant ID
            clock: Source of the current Unix time
            nonce_generator: Source of per-request nonces
        """
        self.signer = signer
        self.mchid = mchid
        self._clock = clock
        self._nonce_generator = nonce_generator

    def generate_authorization_header(
        self, method: str, canonical_url: str, sign_body: str
    ) -> str:
        if self.signer is None:
            raise ConfigurationError("you must init WechatPayCredentials with signer")

        nonce = self._nonce_generator()
        timestamp = int(self._clock())
        message = build_message(method, canonical_url, timestamp, nonce, sign_body)
        result = self.signer.sign(message)

        return format_authorization(
            self.mchid,
            nonce,
            timestamp,
            result.certificate_serial_no,
            result.signature,
        )
