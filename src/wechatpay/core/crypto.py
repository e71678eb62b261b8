"""Cryptographic operations: RSA keys and certificates, AES-256-GCM, RSA-OAEP."""

import base64
import binascii
from pathlib import Path
from typing import Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import (
    ConfigurationError,
    DecryptionError,
    EncodingError,
    SignatureMismatchError,
)

# Envelope algorithm identifier for AES-256-GCM encrypted resources
AEAD_AES_256_GCM = "AEAD_AES_256_GCM"

BytesOrStr = Union[bytes, str]


def _to_bytes(value: BytesOrStr) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


def load_private_key(pem: BytesOrStr) -> rsa.RSAPrivateKey:
    """Load an RSA private key from PEM data (e.g. ``apiclient_key.pem``).

    Args:
        pem: PEM encoded PKCS#8 or PKCS#1 private key

    Returns:
        RSA private key

    Raises:
        ConfigurationError: If the data is not an unencrypted RSA private key
    """
    try:
        key = serialization.load_pem_private_key(_to_bytes(pem), password=None)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Failed to load private key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError("Private key is not an RSA key")
    return key


def load_private_key_file(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """Load an RSA private key from a PEM file."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Private key file not found: {path}")
    return load_private_key(path.read_bytes())


def load_certificate(pem: BytesOrStr) -> x509.Certificate:
    """Load an X.509 certificate from PEM data.

    Raises:
        EncodingError: If the data is not a PEM certificate
    """
    try:
        return x509.load_pem_x509_certificate(_to_bytes(pem))
    except ValueError as e:
        raise EncodingError(f"Failed to parse certificate: {e}") from e


def load_certificate_file(path: Union[str, Path]) -> x509.Certificate:
    """Load an X.509 certificate from a PEM file."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Certificate file not found: {path}")
    return load_certificate(path.read_bytes())


def certificate_serial_no(certificate: x509.Certificate) -> str:
    """Return the serial number as upper-case hex of its big-endian bytes.

    This is the form the provider uses in ``serial_no`` and
    ``Wechatpay-Serial``; leading zero nibbles of the first byte are kept.
    """
    serial = certificate.serial_number
    length = max(1, (serial.bit_length() + 7) // 8)
    return serial.to_bytes(length, "big").hex().upper()


def sign_sha256_rsa(private_key: rsa.RSAPrivateKey, message: bytes) -> bytes:
    """Sign a message with RSA PKCS#1 v1.5 over SHA-256."""
    return private_key.sign(message, padding.PKCS1v15(), hashes.SHA256())


def verify_sha256_rsa(
    public_key: rsa.RSAPublicKey, message: bytes, signature: bytes
) -> None:
    """Verify an RSA PKCS#1 v1.5 / SHA-256 signature.

    Raises:
        SignatureMismatchError: If the signature does not match
    """
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature as e:
        raise SignatureMismatchError(
            "verify signature with public key failed"
        ) from e


def b64decode_strict(value: BytesOrStr, field: str = "value") -> bytes:
    """Decode standard base64, rejecting characters outside the alphabet."""
    try:
        return base64.b64decode(_to_bytes(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"base64 decode {field} failed: {e}") from e


def decrypt_aes_256_gcm(
    api_v3_key: BytesOrStr,
    associated_data: BytesOrStr,
    nonce: BytesOrStr,
    ciphertext: BytesOrStr,
) -> bytes:
    """Decrypt a provider encrypted resource.

    Args:
        api_v3_key: 32 byte API v3 key configured in the merchant platform
        associated_data: Additional authenticated data
        nonce: Nonce used for encryption
        ciphertext: Base64 encoded ciphertext with the GCM tag appended

    Returns:
        Plaintext bytes

    Raises:
        EncodingError: If the ciphertext is not valid base64
        ConfigurationError: If the key is not 32 bytes
        DecryptionError: If authentication fails
    """
    key = _to_bytes(api_v3_key)
    if len(key) != 32:
        raise ConfigurationError(
            f"api v3 key must be 32 bytes for AES-256-GCM, got {len(key)}"
        )
    raw = b64decode_strict(ciphertext, "ciphertext")
    nonce_bytes = _to_bytes(nonce)
    if not nonce_bytes:
        raise DecryptionError("empty nonce")
    try:
        return AESGCM(key).decrypt(nonce_bytes, raw, _to_bytes(associated_data))
    except InvalidTag as e:
        raise DecryptionError("AES-GCM authentication failed") from e


def decrypt_to_string(
    api_v3_key: BytesOrStr,
    associated_data: BytesOrStr,
    nonce: BytesOrStr,
    ciphertext: BytesOrStr,
) -> str:
    """Decrypt a resource and decode it as UTF-8 (e.g. a PEM certificate)."""
    plaintext = decrypt_aes_256_gcm(api_v3_key, associated_data, nonce, ciphertext)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"decrypted resource is not utf-8: {e}") from e


def decrypt_oaep(ciphertext: BytesOrStr, private_key: rsa.RSAPrivateKey) -> str:
    """Decrypt a sensitive field encrypted with the merchant public key.

    The provider encrypts fields such as a complainant's phone number with
    RSA-OAEP (SHA-1).
    """
    raw = b64decode_strict(ciphertext, "ciphertext")
    try:
        plaintext = private_key.decrypt(
            raw,
            padding.OAEP(
                mgf=padding.MGF1(algorithm=hashes.SHA1()),
                algorithm=hashes.SHA1(),
                label=None,
            ),
        )
    except ValueError as e:
        raise DecryptionError(f"RSA-OAEP decryption failed: {e}") from e
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"decrypted field is not utf-8: {e}") from e


def encrypt_oaep(plaintext: str, public_key: rsa.RSAPublicKey) -> str:
    """Encrypt a sensitive field for the provider with RSA-OAEP (SHA-1)."""
    ciphertext = public_key.encrypt(
        plaintext.encode("utf-8"),
        padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA1()),
            algorithm=hashes.SHA1(),
            label=None,
        ),
    )
    return base64.b64encode(ciphertext).decode("utf-8")
