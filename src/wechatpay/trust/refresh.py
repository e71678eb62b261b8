"""Platform certificate refresh from the certificate list endpoint."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..core.crypto import load_certificate
from ..core.errors import ConfigurationError, WechatPayError
from ..core.models import CertificateInfo, CertificateReply, PlatformCertificate
from ..transport import Transport, decode_json
from ..validator.response import FIVE_MINUTES, Validator, WechatPayValidator
from ..validator.verifier import NullVerifier
from .store import CertificateStore

logger = logging.getLogger(__name__)

CERTIFICATES_PATH = "/v3/certificates"


class CertificateRefresher:
    """Downloads platform certificates and adds new ones to a store.

    The certificate list is fetched with a signed request. Its response still
    has to carry the signature headers and a fresh timestamp, but the
    signature itself is checked with NullVerifier: it is made with a platform
    certificate we may not hold yet. Until the decrypted certificates are
    trusted this is a reduced-trust window; the AES-GCM envelope (keyed with
    the operator's API v3 key, never sent over the network) is what
    authenticates each certificate.
    """

    def __init__(
        self,
        store: CertificateStore,
        transport: Transport,
        api_v3_key: str | bytes,
        base_url: str = "https://api.mch.weixin.qq.com",
        tolerance: int = FIVE_MINUTES,
        validator: Optional[Validator] = None,
    ):
        """Initialize refresher.

        Args:
            store: Store to insert certificates into
            transport: Signed transport
            api_v3_key: Merchant API v3 key used to decrypt certificates
            base_url: API base URL
            tolerance: Allowed clock skew of the certificate list response
            validator: Overrides the bootstrap validator
        """
        self.store = store
        self.transport = transport
        self.api_v3_key = api_v3_key
        self.url = base_url.rstrip("/") + CERTIFICATES_PATH
        self.validator = validator or WechatPayValidator(NullVerifier(), tolerance=tolerance)

    def fetch(self, timeout: Optional[float] = None) -> list[CertificateInfo]:
        """Fetch the current platform certificate list."""
        response = self.transport.get(self.url, validator=self.validator, timeout=timeout)
        return decode_json(response.content, CertificateReply).data

    def refresh(
        self, now: Optional[datetime] = None, timeout: Optional[float] = None
    ) -> list[str]:
        """Fetch the certificate list and insert unseen, unexpired certificates.

        A failure on one entry is logged and skipped; the rest of the batch is
        still processed.

        Returns:
            Serial numbers inserted by this call

        Raises:
            ConfigurationError: If the API v3 key is not a 32 byte key
            MissingHeaderError: If the list response lacks signature headers
            StaleResponseError: If the list response is outside the tolerance
        """
        now = now or datetime.now(timezone.utc)
        inserted = []
        for info in self.fetch(timeout=timeout):
            if info.is_expired(now):
                logger.info("Skipping expired platform certificate serial=%s", info.serial_no)
                continue
            if info.serial_no in self.store:
                continue
            try:
                certificate = self._decrypt(info)
            except ConfigurationError:
                raise
            except WechatPayError as e:
                logger.warning(
                    "Skipping platform certificate serial=%s: %s", info.serial_no, e
                )
                continue
            if self.store.add(certificate, now=now):
                inserted.append(certificate.serial_no)

        logger.info(
            "Platform certificate refresh inserted %d certificate(s), store holds %d",
            len(inserted),
            len(self.store),
        )
        return inserted

    def _decrypt(self, info: CertificateInfo) -> PlatformCertificate:
        pem = info.encrypt_certificate.decrypt(self.api_v3_key)
        return PlatformCertificate.from_x509(load_certificate(pem))
