from types import MappingProxyType
from typing import List, Optional

import pytest

from chat_proxy.config import ProxySettings
from chat_proxy.errors import UpstreamError
from chat_proxy.models import CompletionRequest
from chat_proxy.tiers import ComplexityTier

TEST_MODELS = MappingProxyType(
    {
        ComplexityTier.SIMPLE: "test/simple",
        ComplexityTier.MEDIUM: "test/medium",
        ComplexityTier.COMPLEX: "test/complex",
    }
)


class RecordingProvider:
    """
    Fake completion provider that records every request it receives.
    """

    def __init__(self, reply: str = "Happy to help!", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.requests: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest, *, logger=None) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def last_request(self) -> CompletionRequest:
        assert self.requests, "provider was never called"
        return self.requests[-1]


@pytest.fixture
def settings() -> ProxySettings:
    return ProxySettings(api_key="sk-test", models=TEST_MODELS, system_prompt="You are a test persona.")


@pytest.fixture
def unconfigured_settings() -> ProxySettings:
    return ProxySettings(api_key=None, models=TEST_MODELS, system_prompt="You are a test persona.")


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def failing_provider() -> RecordingProvider:
    return RecordingProvider(error=UpstreamError("Upstream request failed", status_code=502, body="upstream exploded: key=sk-secret"))


@pytest.fixture
def provider_factory():
    return RecordingProvider
