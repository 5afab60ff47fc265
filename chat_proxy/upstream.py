"""
Completion providers: the single outbound call the proxy makes per request.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from chat_proxy.config import ProxySettings
from chat_proxy.errors import UpstreamError
from chat_proxy.logging_utils import RequestLogger
from chat_proxy.models import CompletionRequest


class CompletionProvider(Protocol):
    async def complete(self, request: CompletionRequest, *, logger: Optional[RequestLogger] = None) -> str:
        """
        Return the reply text or raise UpstreamError.
        """
        ...


class OpenRouterProvider:
    """
    Sends chat-completion requests to an OpenAI-compatible endpoint (OpenRouter by default).

    The httpx client is owned by the caller so one connection pool can be shared
    across requests; pass ``client=None`` to open a short-lived client per call.
    """

    def __init__(self, settings: ProxySettings, client: Optional[httpx.AsyncClient] = None) -> None:
        self._settings = settings
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._settings.referer,
            "X-Title": self._settings.title,
        }

    async def complete(self, request: CompletionRequest, *, logger: Optional[RequestLogger] = None) -> str:
        if self._client is not None:
            response = await self._post(self._client, request)
        else:
            async with httpx.AsyncClient(timeout=self._settings.timeout) as client:
                response = await self._post(client, request)

        if response.is_error:
            if logger:
                logger.error(
                    "Upstream provider returned an error",
                    status_code=response.status_code,
                    upstream_body=response.text,
                )
            raise UpstreamError(
                "Upstream request failed",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Upstream returned malformed JSON", status_code=response.status_code, body=response.text) from exc

        reply = extract_reply(data)
        if not reply:
            raise UpstreamError("No response from model", status_code=response.status_code, body=response.text)
        return reply

    async def _post(self, client: httpx.AsyncClient, request: CompletionRequest) -> httpx.Response:
        try:
            return await client.post(
                self._settings.completions_url,
                headers=self._headers(),
                json=request.to_payload(),
                timeout=self._settings.timeout,
            )
        except httpx.RequestError as exc:
            raise UpstreamError(f"Failed to reach upstream provider: {exc.__class__.__name__}") from exc


def extract_reply(data: Any) -> Optional[str]:
    """
    Pull ``choices[0].message.content`` out of a chat-completions payload.
    """

    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None
    return content


__all__ = ["CompletionProvider", "OpenRouterProvider", "extract_reply"]
