"""Signed HTTP transport for the WeChat Pay API v3."""

import json
import logging
from typing import Any, Optional, Type, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from .core.credentials import Credential
from .core.errors import EncodingError, ProviderError, TransportError
from .validator.response import REQUEST_ID, Validator, header_value
from .version import __version__

logger = logging.getLogger(__name__)

APPLICATION_JSON = "application/json"
USER_AGENT = f"wechatpay-python/{__version__} (httpx/{httpx.__version__})"

ModelT = TypeVar("ModelT", bound=BaseModel)


def encode_body(body: Any) -> str:
    """Serialize a request body to the compact JSON that is sent and signed."""
    if body is None:
        return ""
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", exclude_none=True, by_alias=True)
    return json.dumps(body, ensure_ascii=False, separators=(",", ":"))


def decode_json(content: bytes, model: Type[ModelT]) -> ModelT:
    """Map a JSON response body onto a model.

    Raises:
        EncodingError: If the body is not valid JSON for the model
    """
    try:
        return model.model_validate_json(content)
    except pydantic.ValidationError as e:
        raise EncodingError(f"invalid {model.__name__} response: {e}") from e


def check_response(response: httpx.Response) -> None:
    """Raise ProviderError when the status code is outside 2xx."""
    if 200 <= response.status_code <= 299:
        return

    code = ""
    message = ""
    details = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        code = str(data.get("code", ""))
        message = str(data.get("message", ""))
        details = data.get("detail", data.get("details"))

    raise ProviderError(
        status_code=response.status_code,
        code=code,
        message=message,
        details=details,
        body=response.text,
        headers=dict(response.headers),
        request_id=header_value(response.headers, REQUEST_ID),
    )


class Transport:
    """Sends signed requests and validates the responses."""

    def __init__(
        self,
        credential: Credential,
        validator: Validator,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        user_agent: str = USER_AGENT,
    ):
        """Initialize transport.

        Args:
            credential: Generates the Authorization header
            validator: Default response validator
            http_client: Optional HTTP client to use
            timeout: Default timeout in seconds for every call
            user_agent: User-Agent header value
        """
        self.credential = credential
        self.validator = validator
        self.timeout = timeout
        self.user_agent = user_agent
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)

    def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        content_type: str = APPLICATION_JSON,
        validator: Optional[Validator] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Send a signed request.

        Args:
            method: HTTP method
            url: Absolute request URL, query string included
            body: JSON-serializable body or pydantic model
            content_type: Content-Type header value
            validator: Overrides the default validator for this call
            timeout: Overrides the default timeout for this call

        Returns:
            The validated response

        Raises:
            TransportError: On network failures and timeouts
            ProviderError: On status codes outside 2xx
            WechatPayError: If signing or validation fails
        """
        method = method.upper()
        payload = encode_body(body)
        request = self._http_client.build_request(
            method,
            url,
            content=payload.encode("utf-8") if payload else None,
            headers={
                "Accept": "*/*",
                "Content-Type": content_type,
                "User-Agent": self.user_agent,
            },
            timeout=timeout if timeout is not None else self.timeout,
        )
        canonical_url = request.url.raw_path.decode("ascii")
        request.headers["Authorization"] = self.credential.generate_authorization_header(
            method, canonical_url, payload
        )

        logger.debug("Sending %s %s", method, canonical_url)
        try:
            response = self._http_client.send(request)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {canonical_url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {canonical_url} failed: {e}") from e

        logger.debug(
            "Received %s for %s %s request-id=%s",
            response.status_code,
            method,
            canonical_url,
            header_value(response.headers, REQUEST_ID),
        )
        check_response(response)
        (validator or self.validator).validate(response.content, response.headers)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, body: Any = None, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, body=body, **kwargs)

    def put(self, url: str, body: Any = None, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", url, body=body, **kwargs)

    def patch(self, url: str, body: Any = None, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", url, body=body, **kwargs)

    def delete(self, url: str, body: Any = None, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", url, body=body, **kwargs)

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
