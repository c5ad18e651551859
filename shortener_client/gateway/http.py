"""HTTP implementation of the remote link gateway."""

import binascii
import logging
from typing import Any, List, Optional
from datetime import datetime

import httpx
from pydantic import ValidationError as SchemaValidationError

from ..common.url_builder import build_endpoint_url
from ..common.validators import is_valid_link_id
from ..errors import (
    AuthError,
    InvalidInput,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .base import LinkGatewayBase
from .models import Link, QrImage
from .schemas import (
    CreateLinkRequest,
    ErrorPayload,
    LinkEnvelope,
    LinkListEnvelope,
    QrCodeEnvelope,
)


class HttpLinkGateway(LinkGatewayBase):
    """Talks to the link-shortening backend over HTTP with httpx."""

    LIST_PATH = "/url/my"
    CREATE_PATH = "/url/short"
    DELETE_PATH = "/url/remove/{link_id}"

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        auth_cookie_name: str = "accessToken",
        timeout_seconds: float = 10.0,
        qr_code_path: str = "/url/qrcode/{link_id}",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize HTTP gateway.

        Args:
            base_url: Backend base URL (e.g., https://api.example.com/api/v1)
            access_token: Optional session token, sent as cookie and bearer header
            auth_cookie_name: Cookie name the backend reads the session from
            timeout_seconds: Per-request timeout
            qr_code_path: QR endpoint path relative to base_url
            transport: Optional httpx transport (used by tests)
            logger: Optional logger instance
        """
        super().__init__(base_url)

        self.logger = logger or logging.getLogger(__name__)
        self.qr_code_path = qr_code_path

        # Credentials are attached uniformly to every request
        headers = {"Accept": "application/json"}
        cookies = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
            cookies[auth_cookie_name] = access_token

        self._client = httpx.AsyncClient(
            headers=headers,
            cookies=cookies,
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config, **kwargs) -> "HttpLinkGateway":
        """Build a gateway from a ``Config`` instance."""
        return cls(
            base_url=config.backend_url,
            access_token=config.access_token,
            auth_cookie_name=config.auth_cookie_name,
            timeout_seconds=config.request_timeout_seconds,
            qr_code_path=config.qr_code_path,
            **kwargs,
        )

    async def list_mine(self) -> List[Link]:
        response = await self._request("GET", self.LIST_PATH)
        envelope = self._parse(LinkListEnvelope, response)
        links = [payload.to_link() for payload in envelope.data.urls]
        self.logger.debug(f"Backend reported {len(links)} links")
        return links

    async def create(
        self,
        original_url: str,
        expired_in: Optional[datetime] = None,
    ) -> Link:
        try:
            body = CreateLinkRequest(originalUrl=original_url, expiredIn=expired_in)
        except SchemaValidationError as e:
            raise InvalidInput(f"Invalid link input: {e.errors()[0]['msg']}") from e

        response = await self._request(
            "POST",
            self.CREATE_PATH,
            json=body.model_dump(mode="json", exclude_none=True),
        )
        link = self._parse(LinkEnvelope, response).data.to_link()
        self.logger.debug(f"Backend created link {link.id} -> {link.original_url}")
        return link

    async def delete(self, link_id: str) -> None:
        self._check_link_id(link_id)
        await self._request("DELETE", self.DELETE_PATH, link_id=link_id)

    async def request_qr_code(self, link_id: str) -> QrImage:
        self._check_link_id(link_id)
        response = await self._request("GET", self.qr_code_path, link_id=link_id)

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if content_type.startswith("image/"):
            return QrImage(link_id=link_id, data=response.content, content_type=content_type)

        # Some backends wrap the image as a data URL inside the usual envelope
        envelope = self._parse(QrCodeEnvelope, response)
        try:
            return QrImage.from_data_url(link_id, envelope.data.qrcode)
        except (binascii.Error, ValueError) as e:
            raise TransportError(f"Malformed QR code payload for link '{link_id}'") from e

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Any = None, **path_params: str) -> httpx.Response:
        url = build_endpoint_url(self.base_url, path, **path_params)
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.RequestError as e:
            self.logger.warning(f"{method} {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        self.logger.debug(f"{method} {url} -> {response.status_code}")
        if response.is_success:
            return response

        message = self._error_message(response)
        status = response.status_code
        if status in (401, 403):
            raise AuthError(message or "Not authenticated")
        if status == 404:
            raise NotFoundError(message or f"Not found: {url}")
        if 400 <= status < 500:
            raise ValidationError(message or f"Request rejected with status {status}")
        raise TransportError(message or f"Backend error (status {status})", status_code=status)

    @staticmethod
    def _parse(schema, response: httpx.Response):
        try:
            return schema.model_validate(response.json())
        except (ValueError, SchemaValidationError) as e:
            raise TransportError(
                f"Unexpected response from {response.request.url}: {e}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        try:
            return ErrorPayload.model_validate(response.json()).text
        except (ValueError, SchemaValidationError):
            return response.text or None

    @staticmethod
    def _check_link_id(link_id: str) -> None:
        is_valid, error = is_valid_link_id(link_id)
        if not is_valid:
            raise InvalidInput(error)
