"""Notification callback parsing."""

import json

import pydantic

from .core.errors import EncodingError, MalformedInputError
from .models.complaint import ComplaintEvent
from .transport import decode_json


def parse_complaint_notification(
    body: bytes | str, api_v3_key: str | bytes
) -> ComplaintEvent:
    """Decrypt a complaint notification callback.

    This only decrypts; verify the callback's signature headers first (see
    ``WechatPay.parse_notification``).

    Args:
        body: Raw callback body
        api_v3_key: Merchant API v3 key

    Returns:
        The event with the decrypted resource fields merged in
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    event = decode_json(body, ComplaintEvent)
    if event.resource is None:
        raise MalformedInputError("notification has no resource")

    plaintext = event.resource.decrypt(api_v3_key)
    try:
        resource = json.loads(plaintext)
    except ValueError as e:
        raise EncodingError(f"invalid notification resource: {e}") from e
    if not isinstance(resource, dict):
        raise EncodingError("notification resource is not a JSON object")

    data = event.model_dump()
    data.update(resource)
    try:
        return ComplaintEvent.model_validate(data)
    except pydantic.ValidationError as e:
        raise EncodingError(f"invalid notification resource: {e}") from e
