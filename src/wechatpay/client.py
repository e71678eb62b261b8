"""WeChat Pay API v3 client."""

import gzip
import hashlib
import logging
import time
import zlib
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Type
from urllib.parse import quote, urlencode

import httpx
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa

from .config import DEFAULT_BASE_URL, WechatPayConfig
from .core.credentials import WechatPayCredentials
from .core.crypto import (
    certificate_serial_no,
    decrypt_oaep,
    load_certificate_file,
    load_private_key_file,
)
from .core.errors import (
    BillIntegrityError,
    ConfigurationError,
    EncodingError,
    ValidationError,
    WechatPayError,
)
from .core.signer import SHA256WithRSASigner
from .models.bill import Bill
from .models.complaint import (
    Complaint,
    ComplaintEvent,
    ComplaintNotifyConfig,
    ComplaintReply,
    ComplaintResponse,
    NegotiationHistory,
    NegotiationHistoryReply,
)
from .models.order import TradeQuery
from .models.refunds import RefundsAmount, RefundsOrder, RefundsReq
from .notifications import parse_complaint_notification
from .transport import USER_AGENT, Transport, decode_json
from .trust.refresh import CertificateRefresher
from .trust.store import CertificateStore
from .validator.response import FIVE_MINUTES, NullValidator, WechatPayValidator
from .validator.verifier import CertificateVerifier

logger = logging.getLogger(__name__)

# Page size for list endpoints
DEFAULT_PAGE_LIMIT = 50

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
        if value == 0:
            return "".join(reversed(digits))


class WechatPay:
    """Client for the WeChat Pay API v3.

    Owns its credential, certificate store, verifier and HTTP transport; none
    of them are shared between instances.
    """

    def __init__(
        self,
        mchid: str,
        api_v3_key: str,
        private_key: rsa.RSAPrivateKey,
        certificate: x509.Certificate,
        platform_certificates: Optional[Iterable[x509.Certificate]] = None,
        http_client: Optional[httpx.Client] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        timestamp_tolerance: int = FIVE_MINUTES,
        user_agent: str = USER_AGENT,
    ):
        """Initialize client.

        Args:
            mchid: Merchant ID
            api_v3_key: API v3 key, decrypts certificates and notifications
            private_key: Merchant private key (``apiclient_key.pem``)
            certificate: Merchant certificate (``apiclient_cert.pem``); its
                serial number identifies the signing key and it seeds the
                certificate store
            platform_certificates: Additional bootstrap platform certificates
            http_client: Optional HTTP client to use
            base_url: API base URL
            timeout: Default timeout in seconds for every call
            timestamp_tolerance: Allowed response clock skew in seconds
            user_agent: User-Agent header value
        """
        if not mchid:
            raise ConfigurationError("mchid must not be empty")

        self.mchid = mchid
        self.api_v3_key = api_v3_key
        self.private_key = private_key
        self.base_url = base_url.rstrip("/")
        self.certificate_serial_no = certificate_serial_no(certificate)

        self.certificates = CertificateStore([certificate, *(platform_certificates or ())])
        if not self.certificates.has_valid_certificate():
            logger.warning("Certificate store has no unexpired certificate")

        signer = SHA256WithRSASigner(private_key, self.certificate_serial_no)
        self.credential = WechatPayCredentials(signer, mchid)
        self.validator = WechatPayValidator(
            CertificateVerifier(self.certificates), tolerance=timestamp_tolerance
        )
        self.transport = Transport(
            self.credential,
            self.validator,
            http_client=http_client,
            timeout=timeout,
            user_agent=user_agent,
        )
        self.refresher = CertificateRefresher(
            self.certificates,
            self.transport,
            api_v3_key,
            base_url=self.base_url,
            tolerance=timestamp_tolerance,
        )

    @classmethod
    def from_config(
        cls, config: WechatPayConfig, http_client: Optional[httpx.Client] = None
    ) -> "WechatPay":
        """Build a client from a WechatPayConfig."""
        return cls(
            mchid=config.mchid,
            api_v3_key=config.api_v3_key,
            private_key=load_private_key_file(config.private_key_path),
            certificate=load_certificate_file(config.certificate_path),
            platform_certificates=[
                load_certificate_file(p) for p in config.platform_certificate_paths
            ],
            http_client=http_client,
            base_url=config.base_url,
            timeout=config.timeout,
            timestamp_tolerance=config.timestamp_tolerance,
            user_agent=config.user_agent or USER_AGENT,
        )

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "WechatPay":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        url = self.base_url + path
        if params:
            url += "?" + urlencode(params)
        return url

    # Certificates

    def update_certificates(self, timeout: Optional[float] = None) -> list[str]:
        """Refresh the platform certificate list.

        Call periodically (e.g. daily) to pick up certificate rotations.

        Returns:
            Serial numbers newly added to the store
        """
        return self.refresher.refresh(timeout=timeout)

    # Orders

    def order_query_by_transaction_id(self, transaction_id: str) -> TradeQuery:
        """Query an order by WeChat Pay transaction id."""
        url = self._url(
            f"/v3/pay/transactions/id/{quote(transaction_id, safe='')}",
            {"mchid": self.mchid},
        )
        return decode_json(self.transport.get(url).content, TradeQuery)

    def order_query_by_out_trade_no(self, out_trade_no: str) -> TradeQuery:
        """Query an order by merchant order number."""
        url = self._url(
            f"/v3/pay/transactions/out-trade-no/{quote(out_trade_no, safe='')}",
            {"mchid": self.mchid},
        )
        return decode_json(self.transport.get(url).content, TradeQuery)

    # Refunds

    def refund_by_transaction_id(
        self,
        transaction_id: str,
        amount: int = 0,
        out_refund_no: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> RefundsOrder:
        """Refund an order identified by WeChat Pay transaction id.

        Args:
            transaction_id: WeChat Pay transaction id
            amount: Refund amount in cents; 0 refunds what the payer paid
            out_refund_no: Merchant refund number. Pass a stable value when
                retrying so the provider can deduplicate the refund.
            reason: Refund reason shown to the payer
        """
        order = self.order_query_by_transaction_id(transaction_id)
        return self._refund(order, amount, out_refund_no, reason, transaction_id=transaction_id)

    def refund_by_out_trade_no(
        self,
        out_trade_no: str,
        amount: int = 0,
        out_refund_no: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> RefundsOrder:
        """Refund an order identified by merchant order number."""
        order = self.order_query_by_out_trade_no(out_trade_no)
        return self._refund(order, amount, out_refund_no, reason, out_trade_no=out_trade_no)

    def _refund(
        self,
        order: TradeQuery,
        amount: int,
        out_refund_no: Optional[str],
        reason: Optional[str],
        transaction_id: Optional[str] = None,
        out_trade_no: Optional[str] = None,
    ) -> RefundsOrder:
        request = RefundsReq(
            transaction_id=transaction_id,
            out_trade_no=out_trade_no,
            out_refund_no=out_refund_no or order.out_trade_no + _base36(time.time_ns()),
            reason=reason,
            amount=RefundsAmount(
                refund=amount or order.amount.payer_total,
                total=order.amount.total,
                currency=order.amount.payer_currency or "CNY",
            ),
        )
        logger.info(
            "Requesting refund out_refund_no=%s refund=%d",
            request.out_refund_no,
            request.amount.refund,
        )
        response = self.transport.post(self._url("/v3/refund/domestic/refunds"), request)
        return decode_json(response.content, RefundsOrder)

    # Bills

    def trade_bill(
        self, bill_date: date, bill_type: str = "ALL", tar_type: Optional[str] = "GZIP"
    ) -> bytes:
        """Apply for and download the trade bill of a day."""
        params = {"bill_date": bill_date.isoformat(), "bill_type": bill_type or "ALL"}
        if tar_type:
            params["tar_type"] = tar_type
        return self._apply_bill("/v3/bill/tradebill", params, tar_type)

    def fundflow_bill(
        self,
        bill_date: date,
        account_type: Optional[str] = None,
        tar_type: Optional[str] = "GZIP",
    ) -> bytes:
        """Apply for and download the fund flow bill of a day."""
        params = {"bill_date": bill_date.isoformat()}
        if account_type:
            params["account_type"] = account_type
        if tar_type:
            params["tar_type"] = tar_type
        return self._apply_bill("/v3/bill/fundflowbill", params, tar_type)

    def _apply_bill(
        self, path: str, params: Mapping[str, str], tar_type: Optional[str]
    ) -> bytes:
        bill = decode_json(self.transport.get(self._url(path, params)).content, Bill)
        if bill.tar_type is None:
            bill = bill.model_copy(update={"tar_type": tar_type})
        return self.download_bill(bill)

    def download_bill(self, bill: Bill) -> bytes:
        """Download a bill file and check its hash.

        The download endpoint returns the raw file without signature headers,
        so the response is not signature-validated; the SHA-1 hash announced
        in the signed bill descriptor protects its integrity instead.

        Raises:
            EncodingError: If a GZIP bill cannot be decompressed
            BillIntegrityError: If the hash does not match
        """
        body = self.transport.get(bill.download_url, validator=NullValidator()).content
        if (bill.tar_type or "").upper() == "GZIP":
            try:
                body = gzip.decompress(body)
            except (OSError, EOFError, zlib.error) as e:
                raise EncodingError(f"failed to decompress bill: {e}") from e

        if bill.hash_type.upper() == "SHA1":
            digest = hashlib.sha1(body).hexdigest()
            if digest != bill.hash_value.lower():
                raise BillIntegrityError(
                    f"bill hash mismatch [{digest}] -> [{bill.hash_value}]"
                )
        return body

    # Complaints

    def list_complaints(
        self, begin: date, end: date, limit: int = DEFAULT_PAGE_LIMIT
    ) -> list[Complaint]:
        """List complaints created between two dates (inclusive)."""
        complaints = self._paginate(
            "/v3/merchant-service/complaints-v2",
            {"begin_date": begin.isoformat(), "end_date": end.isoformat()},
            ComplaintReply,
            limit,
        )
        return [self._decrypt_payer_phone(c) for c in complaints]

    def get_complaint(self, complaint_id: str) -> Complaint:
        url = self._url(f"/v3/merchant-service/complaints-v2/{quote(complaint_id, safe='')}")
        complaint = decode_json(self.transport.get(url).content, Complaint)
        return self._decrypt_payer_phone(complaint)

    def negotiation_histories(
        self, complaint_id: str, limit: int = DEFAULT_PAGE_LIMIT
    ) -> list[NegotiationHistory]:
        """List the negotiation history of a complaint."""
        return self._paginate(
            f"/v3/merchant-service/complaints-v2/{quote(complaint_id, safe='')}/negotiation-historys",
            {},
            NegotiationHistoryReply,
            limit,
        )

    def complete_complaint(self, complaint_id: str) -> None:
        """Mark a complaint as handled."""
        url = self._url(
            f"/v3/merchant-service/complaints-v2/{quote(complaint_id, safe='')}/complete"
        )
        self.transport.post(url, {"complainted_mchid": self.mchid})

    def respond_complaint(
        self, complaint_id: str, content: str, images: Optional[list[str]] = None
    ) -> None:
        """Reply to the complainant."""
        url = self._url(
            f"/v3/merchant-service/complaints-v2/{quote(complaint_id, safe='')}/response"
        )
        body = ComplaintResponse(
            complainted_mchid=self.mchid, response_content=content, response_images=images
        )
        self.transport.post(url, body)

    def _decrypt_payer_phone(self, complaint: Complaint) -> Complaint:
        if not complaint.payer_phone:
            return complaint
        try:
            phone = decrypt_oaep(complaint.payer_phone, self.private_key)
        except WechatPayError as e:
            logger.warning(
                "Could not decrypt payer phone of complaint %s: %s",
                complaint.complaint_id,
                e,
            )
            return complaint
        return complaint.model_copy(update={"payer_phone": phone})

    def _paginate(
        self,
        path: str,
        params: Mapping[str, str],
        reply_model: Type[ComplaintReply] | Type[NegotiationHistoryReply],
        limit: int,
    ) -> list:
        """Collect every page of a list endpoint.

        Stops when a page is empty or the collected count reaches the
        reported total.
        """
        items: list = []
        offset = 0
        while True:
            query = {**params, "limit": str(limit), "offset": str(offset)}
            reply = decode_json(self.transport.get(self._url(path, query)).content, reply_model)
            if not reply.data:
                break
            items.extend(reply.data)
            offset += len(reply.data)
            if len(items) >= reply.total_count:
                break
        return items

    # Complaint notification URL

    def create_complaint_notification(self, notify_url: str) -> ComplaintNotifyConfig:
        response = self.transport.post(
            self._url("/v3/merchant-service/complaint-notifications"), {"url": notify_url}
        )
        return decode_json(response.content, ComplaintNotifyConfig)

    def get_complaint_notification(self) -> Optional[str]:
        response = self.transport.get(
            self._url("/v3/merchant-service/complaint-notifications")
        )
        return decode_json(response.content, ComplaintNotifyConfig).url

    def update_complaint_notification(self, notify_url: str) -> None:
        response = self.transport.put(
            self._url("/v3/merchant-service/complaint-notifications"), {"url": notify_url}
        )
        reply = decode_json(response.content, ComplaintNotifyConfig)
        if reply.url != notify_url:
            raise ValidationError(
                f"complaint notification url was not updated, provider returned {reply.url}"
            )

    def delete_complaint_notification(self) -> None:
        self.transport.delete(self._url("/v3/merchant-service/complaint-notifications"))

    # Notifications

    def parse_notification(
        self, body: bytes, headers: Mapping[str, str]
    ) -> ComplaintEvent:
        """Verify and decrypt a complaint notification callback.

        The callback carries the same signature headers as an API response and
        is validated the same way before its resource is decrypted.
        """
        self.validator.validate(body, headers)
        return parse_complaint_notification(body, self.api_v3_key)
