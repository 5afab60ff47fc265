"""
Request-scoped data shapes shared by the handler, provider, and API layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping

from pydantic import BaseModel, ConfigDict

from chat_proxy.tiers import ComplexityTier

Role = Literal["system", "user", "assistant"]

USER_SENDER = "user"


class HistoryTurn(BaseModel):
    """
    One prior turn as sent by the chat widget. Any sender other than "user" is the assistant.
    """

    model_config = ConfigDict(extra="ignore")

    sender: Any = None
    # forwarded as-is; the upstream API judges the content
    text: Any = None

    def to_upstream(self) -> "UpstreamChatMessage":
        role: Role = "user" if self.sender == USER_SENDER else "assistant"
        return UpstreamChatMessage(role=role, content=self.text)


class UpstreamChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: Any


@dataclass(frozen=True)
class CompletionRequest:
    model: str
    messages: List[UpstreamChatMessage]
    max_tokens: int
    temperature: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [message.model_dump() for message in self.messages],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }


@dataclass(frozen=True)
class ChatResult:
    reply: str
    model: str
    tier: ComplexityTier

    def to_payload(self) -> Dict[str, Any]:
        return {"reply": self.reply, "model": self.model, "complexity": self.tier.value}


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    body: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, result: ChatResult) -> "HttpResult":
        return cls(status_code=200, body=result.to_payload())


__all__ = [
    "ChatResult",
    "CompletionRequest",
    "HistoryTurn",
    "HttpResult",
    "Role",
    "UpstreamChatMessage",
    "USER_SENDER",
]
