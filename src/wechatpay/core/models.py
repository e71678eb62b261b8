"""Core data models for wechatpay."""

from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel, ConfigDict, Field

from .crypto import AEAD_AES_256_GCM, certificate_serial_no, decrypt_aes_256_gcm
from .errors import ConfigurationError, MalformedInputError


class SignatureResult(BaseModel):
    """Result of signing a canonical message."""

    model_config = ConfigDict(frozen=True)

    certificate_serial_no: str = Field(description="Merchant certificate serial number")
    signature: str = Field(description="Base64 encoded signature")


class EncryptedResource(BaseModel):
    """Encrypted-resource envelope used for certificates and notifications."""

    algorithm: str = Field(default=AEAD_AES_256_GCM, description="Encryption algorithm")
    ciphertext: str = Field(description="Base64 ciphertext with GCM tag")
    associated_data: str = Field(default="", description="Additional authenticated data")
    nonce: str = Field(description="Nonce used for encryption")
    original_type: Optional[str] = Field(default=None, description="Plaintext type")

    def decrypt(self, api_v3_key: str | bytes) -> bytes:
        """Decrypt the envelope with the merchant API v3 key."""
        if self.algorithm != AEAD_AES_256_GCM:
            raise MalformedInputError(f"unsupported algorithm: {self.algorithm}")
        return decrypt_aes_256_gcm(
            api_v3_key, self.associated_data, self.nonce, self.ciphertext
        )


class CertificateInfo(BaseModel):
    """One entry of the platform certificate list."""

    serial_no: str = Field(description="Platform certificate serial number")
    effective_time: datetime = Field(description="Certificate valid from")
    expire_time: datetime = Field(description="Certificate valid until")
    encrypt_certificate: EncryptedResource = Field(description="Encrypted PEM")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the listed expiry time has passed."""
        return _aware(self.expire_time) < (now or _utcnow())


class CertificateReply(BaseModel):
    """Response body of the platform certificate list endpoint."""

    data: list[CertificateInfo] = Field(default_factory=list)


class PlatformCertificate(BaseModel):
    """A trusted platform certificate held by the certificate store."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    serial_no: str = Field(description="Serial number (upper-case hex)")
    certificate: x509.Certificate = Field(description="Parsed X.509 certificate")

    @classmethod
    def from_x509(cls, certificate: x509.Certificate) -> "PlatformCertificate":
        """Wrap a parsed certificate, deriving its serial number."""
        if not isinstance(certificate.public_key(), rsa.RSAPublicKey):
            raise ConfigurationError("Platform certificate must carry an RSA key")
        return cls(serial_no=certificate_serial_no(certificate), certificate=certificate)

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.certificate.public_key()

    @property
    def effective_time(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def expire_time(self) -> datetime:
        return self.certificate.not_valid_after_utc

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expire_time < (now or _utcnow())

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check if certificate is currently valid (time-wise)."""
        now = now or _utcnow()
        return self.effective_time <= now <= self.expire_time


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
