"""Exception hierarchy for wechatpay."""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Discriminator carried by every wechatpay exception."""

    CONFIG = "config"
    MALFORMED_INPUT = "malformed_input"
    ENCODING = "encoding"
    DECRYPTION = "decryption"
    STALE_RESPONSE = "stale_response"
    MISSING_HEADER = "missing_header"
    UNKNOWN_CERTIFICATE = "unknown_certificate"
    SIGNATURE_MISMATCH = "signature_mismatch"
    INTEGRITY = "integrity"
    TRANSPORT = "transport"
    PROVIDER = "provider"


class WechatPayError(Exception):
    """Base exception for all wechatpay errors."""

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        serial_no: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        self.serial_no = serial_no

    def with_context(
        self, request_id: Optional[str] = None, serial_no: Optional[str] = None
    ) -> "WechatPayError":
        """Return a copy of this error annotated with response context."""
        parts = [self.message]
        if serial_no:
            parts.append(f"serial={serial_no}")
        if request_id:
            parts.append(f"request-id={request_id}")
        # subclasses such as ProviderError define their own __init__
        error = type(self).__new__(type(self))
        error.__dict__.update(self.__dict__)
        error.message = " ".join(parts)
        error.args = (error.message,)
        error.request_id = request_id or self.request_id
        error.serial_no = serial_no or self.serial_no
        return error


class ConfigurationError(WechatPayError):
    """Missing or invalid key material, serial number or settings."""

    kind = ErrorKind.CONFIG


# Local validation errors
class ValidationError(WechatPayError):
    """Base exception for locally detected validation failures."""

    kind = ErrorKind.MALFORMED_INPUT


class MalformedInputError(ValidationError):
    """A required field is empty or cannot be parsed."""

    kind = ErrorKind.MALFORMED_INPUT


class EncodingError(ValidationError):
    """Bad base64, JSON or compressed payload."""

    kind = ErrorKind.ENCODING


class DecryptionError(ValidationError):
    """Authenticated decryption failed (tag mismatch or wrong key)."""

    kind = ErrorKind.DECRYPTION


class MissingHeaderError(ValidationError):
    """A required response header is absent."""

    kind = ErrorKind.MISSING_HEADER


class BillIntegrityError(ValidationError):
    """Downloaded bill does not match the announced hash."""

    kind = ErrorKind.INTEGRITY


# Signature errors
class SignatureError(ValidationError):
    """Base exception for signature-related errors."""

    pass


class StaleResponseError(SignatureError):
    """Response timestamp is outside the tolerance window."""

    kind = ErrorKind.STALE_RESPONSE


class SignatureMismatchError(SignatureError):
    """Signature verification failed."""

    kind = ErrorKind.SIGNATURE_MISMATCH


# Certificate errors
class CertificateError(ValidationError):
    """Base exception for certificate-related errors."""

    pass


class UnknownCertificateError(CertificateError):
    """No trusted certificate is stored under the given serial number."""

    kind = ErrorKind.UNKNOWN_CERTIFICATE


# Remote errors
class TransportError(WechatPayError):
    """Network or HTTP-layer failure (connection, timeout, cancellation)."""

    kind = ErrorKind.TRANSPORT


class ProviderError(WechatPayError):
    """The provider answered with a status code outside 2xx."""

    kind = ErrorKind.PROVIDER

    def __init__(
        self,
        status_code: int,
        code: str = "",
        message: str = "",
        details: Any = None,
        body: str = "",
        headers: Optional[dict[str, str]] = None,
        request_id: Optional[str] = None,
    ):
        self.status_code = status_code
        self.code = code
        self.details = details
        self.body = body
        self.headers = headers or {}
        text = f"error http response:[StatusCode: {status_code} Code: {code}"
        if message:
            text += f" Message: {message}"
        if details:
            text += f" Details: {details}"
        text += "]"
        super().__init__(text, request_id=request_id)
        self.provider_message = message
