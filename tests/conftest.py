"""Shared fixtures: keys, certificates and signed provider responses."""

import base64
import json
import secrets
import time
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

from wechatpay import WechatPay

MCHID = "1900000001"
API_V3_KEY = "0123456789abcdef0123456789abcdef"
MERCHANT_SERIAL = 0xABC123
PLATFORM_SERIAL = 0x5157F09EFDC096DE15EBE81A47057A72


def make_certificate(
    private_key: rsa.RSAPrivateKey,
    serial_number: int,
    not_before: datetime | None = None,
    not_after: datetime | None = None,
    common_name: str = "Tenpay.com Root CA",
) -> x509.Certificate:
    """Build a self-signed certificate for tests."""
    now = datetime.now(timezone.utc)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(serial_number)
        .not_valid_before(not_before or now - timedelta(days=1))
        .not_valid_after(not_after or now + timedelta(days=365))
        .sign(private_key, hashes.SHA256())
    )


def sign_response(
    private_key: rsa.RSAPrivateKey,
    serial_no: str,
    body: bytes,
    timestamp: int | None = None,
    nonce: str | None = None,
    request_id: str = "08F78BB5AF0610D302A2E7ED0128B8D901",
) -> dict[str, str]:
    """Produce the signature headers the provider attaches to a response."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    nonce = nonce or secrets.token_hex(16)
    message = f"{timestamp}\n{nonce}\n{body.decode('utf-8')}\n".encode("utf-8")
    signature = private_key.sign(message, padding.PKCS1v15(), hashes.SHA256())
    return {
        "Request-ID": request_id,
        "Wechatpay-Serial": serial_no,
        "Wechatpay-Signature": base64.b64encode(signature).decode("utf-8"),
        "Wechatpay-Timestamp": str(timestamp),
        "Wechatpay-Nonce": nonce,
    }


def encrypt_resource(
    plaintext: bytes,
    associated_data: str = "certificate",
    nonce: str = "d215b0511e9c",
    key: str = API_V3_KEY,
) -> dict[str, str]:
    """Encrypt a payload into the provider's encrypted-resource envelope."""
    ciphertext = AESGCM(key.encode("utf-8")).encrypt(
        nonce.encode("utf-8"), plaintext, associated_data.encode("utf-8")
    )
    return {
        "algorithm": "AEAD_AES_256_GCM",
        "associated_data": associated_data,
        "nonce": nonce,
        "ciphertext": base64.b64encode(ciphertext).decode("utf-8"),
    }


@pytest.fixture(scope="session")
def merchant_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def merchant_certificate(merchant_key) -> x509.Certificate:
    return make_certificate(merchant_key, MERCHANT_SERIAL, common_name=MCHID)


@pytest.fixture(scope="session")
def platform_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def platform_certificate(platform_key) -> x509.Certificate:
    return make_certificate(platform_key, PLATFORM_SERIAL)


@pytest.fixture(scope="session")
def platform_serial() -> str:
    return "5157F09EFDC096DE15EBE81A47057A72"


class FakeProvider:
    """Routes requests to canned, optionally signed, responses."""

    def __init__(self, platform_key, platform_serial):
        self.platform_key = platform_key
        self.platform_serial = platform_serial
        self.routes = {}
        self.requests: list[httpx.Request] = []
        self.clock_skew = 0

    def add(self, method, path, body=None, status_code=200, signed=True, raw=None, query=None):
        """Register a response; a list of bodies is served one per call."""
        bodies = body if isinstance(body, list) else [body]
        self.routes.setdefault((method, path, query), []).extend(
            {"body": b, "status_code": status_code, "signed": signed, "raw": raw}
            for b in bodies
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path, None)
        query_key = (request.method, request.url.path, request.url.query.decode())
        queue = self.routes.get(query_key) or self.routes.get(key)
        if not queue:
            return httpx.Response(404, json={"code": "NOT_FOUND", "message": "no route"})
        route = queue.pop(0) if len(queue) > 1 else queue[0]

        if route["raw"] is not None:
            content = route["raw"]
        elif route["body"] is None:
            content = b""
        else:
            content = json.dumps(route["body"]).encode("utf-8")

        headers = {"Content-Type": "application/json"}
        if route["signed"]:
            timestamp = int(time.time()) + self.clock_skew
            headers.update(
                sign_response(self.platform_key, self.platform_serial, content, timestamp)
            )
        return httpx.Response(route["status_code"], content=content, headers=headers)


@pytest.fixture
def provider(platform_key, platform_serial) -> FakeProvider:
    return FakeProvider(platform_key, platform_serial)


@pytest.fixture
def client(provider, merchant_key, merchant_certificate, platform_certificate):
    http_client = httpx.Client(transport=httpx.MockTransport(provider.handler))
    wechatpay = WechatPay(
        mchid=MCHID,
        api_v3_key=API_V3_KEY,
        private_key=merchant_key,
        certificate=merchant_certificate,
        platform_certificates=[platform_certificate],
        http_client=http_client,
    )
    yield wechatpay
    http_client.close()


@pytest.fixture
def pem_files(tmp_path, merchant_key, merchant_certificate, platform_certificate):
    """Write merchant key and certificates to disk."""
    key_path = tmp_path / "apiclient_key.pem"
    key_path.write_bytes(
        merchant_key.private_bytes(
            encoding=Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    cert_path = tmp_path / "apiclient_cert.pem"
    cert_path.write_bytes(merchant_certificate.public_bytes(Encoding.PEM))
    platform_path = tmp_path / "wechatpay_platform.pem"
    platform_path.write_bytes(platform_certificate.public_bytes(Encoding.PEM))
    return {"key": key_path, "certificate": cert_path, "platform": platform_path}
