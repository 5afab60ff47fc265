"""
Request handler: validate, classify, assemble context, call upstream, shape the result.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, List, Mapping, Optional, Sequence

from chat_proxy.classifier import ComplexityClassifier
from chat_proxy.config import ProxySettings
from chat_proxy.errors import ChatProxyError, ErrorType
from chat_proxy.logging_utils import RequestLogger
from chat_proxy.models import ChatResult, CompletionRequest, HistoryTurn, HttpResult, UpstreamChatMessage
from chat_proxy.upstream import CompletionProvider


class ChatHandler:
    """
    Stateless per request; settings, prompt, and model table are read-only.
    """

    def __init__(
        self,
        settings: ProxySettings,
        provider: CompletionProvider,
        classifier: Optional[ComplexityClassifier] = None,
    ) -> None:
        self._settings = settings
        self._provider = provider
        self._classifier = classifier or ComplexityClassifier()

    async def handle(
        self,
        method: str,
        body: Any,
        *,
        logger: Optional[RequestLogger] = None,
    ) -> HttpResult:
        log = logger or RequestLogger("chat_proxy.handler", context={"request_id": str(uuid.uuid4())})

        if method.upper() != "POST":
            return _error_result(ChatProxyError.of(ErrorType.METHOD_NOT_ALLOWED))

        if not self._settings.has_api_key:
            log.error("Upstream API key is not configured")
            return _error_result(ChatProxyError.of(ErrorType.NOT_CONFIGURED))

        try:
            result = await self._chat(body, log)
        except ChatProxyError as exc:
            if exc.error_type == ErrorType.UPSTREAM_FAILURE:
                log.error("Chat handler error", error=str(exc.details or exc.message))
            return _error_result(exc)
        except Exception as exc:
            log.exception("Chat handler error", error=str(exc))
            return _error_result(ChatProxyError.of(ErrorType.UPSTREAM_FAILURE))
        return HttpResult.ok(result)

    async def _chat(self, body: Any, log: RequestLogger) -> ChatResult:
        body = decode_body(body)
        payload: Mapping[str, Any] = body if isinstance(body, Mapping) else {}

        message = payload.get("message")
        if not isinstance(message, str) or not message:
            raise ChatProxyError.of(ErrorType.INVALID_MESSAGE)
        history = payload["history"] if "history" in payload else []
        if not isinstance(history, list):
            raise TypeError(f"history must be a list, got {type(history).__name__}")

        sanitized = message[: self._settings.max_message_chars]
        classification = self._classifier.explain(sanitized, len(history))
        tier = classification.tier
        model = self._settings.model_for(tier)
        log.info(
            "Classified chat message",
            message_chars=len(message),
            history_length=len(history),
            tier=tier.value,
            reason=classification.reason,
            model=model,
        )

        request = self.build_request(sanitized, history, model)
        try:
            reply = await self._provider.complete(request, logger=log)
        except Exception as exc:
            raise ChatProxyError.of(ErrorType.UPSTREAM_FAILURE, cause=repr(exc)) from exc

        log.info("Upstream reply received", reply_chars=len(reply))
        return ChatResult(reply=reply, model=model, tier=tier)

    def build_request(self, sanitized: str, history: Sequence[Any], model: str) -> CompletionRequest:
        messages: List[UpstreamChatMessage] = [UpstreamChatMessage(role="system", content=self._settings.system_prompt)]
        messages.extend(window_history(history, self._settings.history_window))
        messages.append(UpstreamChatMessage(role="user", content=sanitized))
        return CompletionRequest(
            model=model,
            messages=messages,
            max_tokens=self._settings.max_tokens,
            temperature=self._settings.temperature,
        )


def decode_body(body: Any) -> Any:
    """
    Decode raw JSON bytes from the transport; already-parsed bodies pass through.
    An empty payload is treated as an empty object.
    """

    if isinstance(body, (bytes, bytearray)):
        if not body.strip():
            return {}
        return json.loads(body)
    return body


def window_history(history: Sequence[Any], window: int) -> List[UpstreamChatMessage]:
    """
    Map the last ``window`` turns to upstream messages, oldest first.
    """

    if window <= 0:
        return []
    return [HistoryTurn.model_validate(turn).to_upstream() for turn in list(history)[-window:]]


def _error_result(error: ChatProxyError) -> HttpResult:
    return HttpResult(status_code=error.status_code, body=error.to_payload())


__all__ = ["ChatHandler", "decode_body", "window_history"]
