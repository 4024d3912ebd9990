"""Pass-through client for the TIL summarization/enhancement service."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict

import httpx

from app.core.config import LLMSettings
from app.core.errors import LLMServiceError

logger = logging.getLogger(__name__)


class LLMClient:
    """Forward note payloads to the LLM service and return its JSON verbatim."""

    def __init__(
        self,
        settings: LLMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def convert(self, payload: Dict[str, Any]) -> Any:
        """Turn raw TIL text into Markdown via ``/summation``."""
        return await self._post(
            "/summation", payload, "Markdown conversion failed."
        )

    async def enhance(self, payload: Dict[str, Any]) -> Any:
        """Extract keywords and image suggestions via ``/enhance``."""
        return await self._post("/enhance", payload, "TIL enhancement failed.")

    async def _post(self, endpoint: str, payload: Dict[str, Any], default_message: str) -> Any:
        url = f"{self._settings.api_url.rstrip('/')}{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._settings.api_key}"},
                )
        except httpx.HTTPError as exc:
            logger.error("LLM API request to %s failed: %s", endpoint, exc)
            raise LLMServiceError(
                "llm_server_error", HTTPStatus.SERVICE_UNAVAILABLE, default_message
            ) from exc

        if response.is_error:
            raise self._map_error(response, default_message)
        return response.json()

    @staticmethod
    def _map_error(response: httpx.Response, default_message: str) -> LLMServiceError:
        status_code = response.status_code
        logger.error("LLM API returned %s: %s", status_code, response.text[:500])
        if status_code == HTTPStatus.BAD_REQUEST:
            return LLMServiceError("invalid_request", status_code)
        if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            return LLMServiceError("llm_server_error", status_code)

        code = default_message
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            code = str(body["message"])
        return LLMServiceError(code, status_code)


__all__ = ["LLMClient"]
