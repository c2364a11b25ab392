"""HTTP access to the dashboard API.

This module belongs to the infrastructure layer: it hides base URL, bearer
authentication, and transport errors behind a small client used by the
repository adapters. A fresh ``httpx.AsyncClient`` is opened per request so
the client can be driven from successive event loops (one per Streamlit
interaction).
"""

from decimal import Decimal
import json
from typing import Any

import httpx

from src.application.ports.errors import ApiRequestError
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import ApiSettings


class ApiClient:
    """Thin async wrapper around httpx for JSON and binary endpoints."""

    def __init__(
        self,
        settings: ApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
        logger=None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: API location, token, and timeout.
            transport: Optional httpx transport, e.g. a MockTransport.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._settings = settings
        self._transport = transport
        self._logger = logger or get_app_logger()

    @property
    def settings(self) -> ApiSettings:
        return self._settings

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a JSON document, parsing numbers with fractions as Decimal."""
        response = await self._send("GET", path, params=params)
        return self._decode_json(response, path)

    async def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        response = await self._send("POST", path, json=payload)
        if not response.content:
            return None
        return self._decode_json(response, path)

    async def get_bytes(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str = "application/octet-stream",
    ) -> bytes:
        """GET a binary payload exactly as sent by the server."""
        response = await self._send(
            "GET",
            path,
            params=params,
            headers={"Accept": accept},
        )
        return response.content

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.base_url,
            headers=self._settings.auth_headers(),
            timeout=self._settings.timeout,
            transport=self._transport,
        )

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._build_client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            self._logger.error(f"{method} {path} failed: {exc}")
            raise ApiRequestError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            server_message = self._server_message(response)
            self._logger.warning(
                f"{method} {path} returned {response.status_code}"
                + (f": {server_message}" if server_message else "")
            )
            raise ApiRequestError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                server_message=server_message,
            )
        return response

    @staticmethod
    def _decode_json(response: httpx.Response, path: str) -> Any:
        try:
            return json.loads(response.content, parse_float=Decimal)
        except ValueError as exc:
            raise ApiRequestError(
                f"Invalid JSON returned by {path}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _server_message(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
        return None


__all__ = ["ApiClient"]
