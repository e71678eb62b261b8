"""Core functionality for wechatpay."""

from .credentials import (
    Credential,
    WechatPayCredentials,
    build_message,
    generate_nonce_str,
)
from .crypto import (
    certificate_serial_no,
    decrypt_aes_256_gcm,
    decrypt_oaep,
    decrypt_to_string,
    encrypt_oaep,
    load_certificate,
    load_certificate_file,
    load_private_key,
    load_private_key_file,
)
from .errors import (
    BillIntegrityError,
    CertificateError,
    ConfigurationError,
    DecryptionError,
    EncodingError,
    ErrorKind,
    MalformedInputError,
    MissingHeaderError,
    ProviderError,
    SignatureError,
    SignatureMismatchError,
    StaleResponseError,
    TransportError,
    UnknownCertificateError,
    ValidationError,
    WechatPayError,
)
from .models import (
    CertificateInfo,
    CertificateReply,
    EncryptedResource,
    PlatformCertificate,
    SignatureResult,
)
from .signer import SHA256WithRSASigner, Signer

__all__ = [
    # Credentials
    "Credential",
    "WechatPayCredentials",
    "build_message",
    "generate_nonce_str",
    # Crypto
    "certificate_serial_no",
    "decrypt_aes_256_gcm",
    "decrypt_oaep",
    "decrypt_to_string",
    "encrypt_oaep",
    "load_certificate",
    "load_certificate_file",
    "load_private_key",
    "load_private_key_file",
    # Errors
    "BillIntegrityError",
    "CertificateError",
    "ConfigurationError",
    "DecryptionError",
    "EncodingError",
    "ErrorKind",
    "MalformedInputError",
    "MissingHeaderError",
    "ProviderError",
    "SignatureError",
    "SignatureMismatchError",
    "StaleResponseError",
    "TransportError",
    "UnknownCertificateError",
    "ValidationError",
    "WechatPayError",
    # Models
    "CertificateInfo",
    "CertificateReply",
    "EncryptedResource",
    "PlatformCertificate",
    "SignatureResult",
    # Signers
    "SHA256WithRSASigner",
    "Signer",
]
