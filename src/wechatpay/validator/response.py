"""Response validators: header checks, freshness and signature verification."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Mapping, Optional

import httpx

from ..core.crypto import b64decode_strict
from ..core.errors import (
    EncodingError,
    MalformedInputError,
    MissingHeaderError,
    StaleResponseError,
    WechatPayError,
)
from .verifier import Verifier

logger = logging.getLogger(__name__)

REQUEST_ID = "Request-ID"
WECHATPAY_SERIAL = "Wechatpay-Serial"
WECHATPAY_SIGNATURE = "Wechatpay-Signature"
WECHATPAY_TIMESTAMP = "Wechatpay-Timestamp"
WECHATPAY_NONCE = "Wechatpay-Nonce"

# Default tolerance between the response timestamp and the local clock
FIVE_MINUTES = 300


def build_response_message(timestamp: str, nonce: str, body: bytes | str) -> str:
    """Build the canonical message signed by the provider."""
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"response body is not utf-8: {e}") from e
    return f"{timestamp}\n{nonce}\n{body}\n"


class Validator(ABC):
    """Validates a provider response (or notification) before it is used."""

    @abstractmethod
    def validate(self, body: bytes, headers: Mapping[str, str]) -> None:
        """Validate a response.

        Args:
            body: Raw response body
            headers: Response headers

        Raises:
            WechatPayError: If the response must not be trusted
        """


class NullValidator(Validator):
    """Skips validation.

    UNSAFE: only for raw bill downloads, which carry no signature. Never use
    it for an endpoint carrying financial data.
    """

    def validate(self, body: bytes, headers: Mapping[str, str]) -> None:
        return None


class WechatPayValidator(Validator):
    """Checks the signature headers of a response against a verifier."""

    def __init__(
        self,
        verifier: Verifier,
        tolerance: int = FIVE_MINUTES,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize validator.

        Args:
            verifier: Verifier holding the platform certificates
            tolerance: Maximum allowed distance in seconds between the
                response timestamp and the local clock
            clock: Source of the current Unix time
        """
        self.verifier = verifier
        self.tolerance = tolerance
        self._clock = clock

    def validate(self, body: bytes, headers: Mapping[str, str]) -> None:
        headers = httpx.Headers(headers)
        request_id = self._check_headers(headers)

        serial_no = headers[WECHATPAY_SERIAL].strip()
        try:
            message = build_response_message(
                headers[WECHATPAY_TIMESTAMP].strip(),
                headers[WECHATPAY_NONCE].strip(),
                body,
            )
            signature = b64decode_strict(
                headers[WECHATPAY_SIGNATURE].strip(), WECHATPAY_SIGNATURE
            )
            self.verifier.verify(serial_no, message, signature)
        except WechatPayError as e:
            logger.warning(
                "Response verification failed serial=%s request-id=%s: %s",
                serial_no,
                request_id,
                e.message,
            )
            raise e.with_context(request_id=request_id, serial_no=serial_no) from e

    def _check_headers(self, headers: httpx.Headers) -> str:
        """Check required headers and the timestamp window.

        Returns:
            The request id
        """
        request_id = headers.get(REQUEST_ID, "").strip()
        if not request_id:
            raise MissingHeaderError(f"empty {REQUEST_ID}")

        for name in (WECHATPAY_SERIAL, WECHATPAY_SIGNATURE, WECHATPAY_TIMESTAMP, WECHATPAY_NONCE):
            if not headers.get(name, "").strip():
                raise MissingHeaderError(
                    f"empty {name}, request-id=[{request_id}]", request_id=request_id
                )

        raw_timestamp = headers[WECHATPAY_TIMESTAMP].strip()
        try:
            timestamp = int(raw_timestamp)
        except ValueError as e:
            raise MalformedInputError(
                f"invalid timestamp:[{raw_timestamp}] request-id=[{request_id}]",
                request_id=request_id,
            ) from e

        if abs(timestamp - self._clock()) >= self.tolerance:
            raise StaleResponseError(
                f"timestamp=[{timestamp}] expires, request-id=[{request_id}]",
                request_id=request_id,
            )
        return request_id


def header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup returning a stripped value or None."""
    value = httpx.Headers(headers).get(name)
    return value.strip() if value else None
