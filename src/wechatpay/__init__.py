"""wechatpay - WeChat Pay API v3 client with signed requests and verified responses."""

from .client import WechatPay
from .config import WechatPayConfig
from .core import (
    ConfigurationError,
    ErrorKind,
    ProviderError,
    SHA256WithRSASigner,
    TransportError,
    WechatPayCredentials,
    WechatPayError,
    decrypt_aes_256_gcm,
    load_certificate,
    load_private_key,
)
from .notifications import parse_complaint_notification
from .transport import Transport
from .trust import CertificateRefresher, CertificateStore
from .validator import CertificateVerifier, NullValidator, WechatPayValidator
from .version import __version__

__all__ = [
    # Client
    "WechatPay",
    "WechatPayConfig",
    "Transport",
    "parse_complaint_notification",
    # Core
    "SHA256WithRSASigner",
    "WechatPayCredentials",
    "decrypt_aes_256_gcm",
    "load_certificate",
    "load_private_key",
    # Errors
    "WechatPayError",
    "ErrorKind",
    "ConfigurationError",
    "ProviderError",
    "TransportError",
    # Trust
    "CertificateStore",
    "CertificateRefresher",
    # Validator
    "CertificateVerifier",
    "NullValidator",
    "WechatPayValidator",
]
