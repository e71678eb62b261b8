"""FastAPI integration for receiving WeChat Pay notification callbacks."""

import logging

from fastapi import HTTPException, Request

from ..client import WechatPay
from ..core.errors import (
    MissingHeaderError,
    SignatureError,
    UnknownCertificateError,
    WechatPayError,
)
from ..models.complaint import ComplaintEvent

logger = logging.getLogger(__name__)


def require_complaint_notification(client: WechatPay):
    """Dependency that verifies and decrypts a complaint notification.

    Args:
        client: Client holding the platform certificates and API v3 key

    Returns:
        Dependency returning the decrypted ComplaintEvent

    Raises:
        HTTPException: 401 if the signature cannot be trusted, 400 if the
            payload cannot be decrypted or parsed
    """

    async def _require_complaint_notification(request: Request) -> ComplaintEvent:
        body = await request.body()
        try:
            return client.parse_notification(body, request.headers)
        except (MissingHeaderError, SignatureError, UnknownCertificateError) as e:
            logger.warning("Rejected notification: %s", e)
            raise HTTPException(status_code=401, detail=str(e)) from e
        except WechatPayError as e:
            logger.warning("Invalid notification: %s", e)
            raise HTTPException(status_code=400, detail=str(e)) from e

    return _require_complaint_notification
