import asyncio
import threading
from types import SimpleNamespace

import pytest
from google.api_core.exceptions import ServiceUnavailable

from src.functions.news_summarization.core.config import LLMConfig
from src.functions.news_summarization.core.llm import gemini_client
from src.functions.news_summarization.core.llm.gemini_client import GeminiGateway, GeminiGatewayError
from src.functions.news_summarization.core.llm.rate_limiter import RateLimiter, RateLimitExceeded


class FakeModel:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []
        self.request_options = []

    def generate_content(self, prompt, request_options=None):
        self.prompts.append(prompt)
        self.request_options.append(request_options)
        if self.error is not None:
            raise self.error
        return self.response


class BlockedResponse:
    prompt_feedback = SimpleNamespace(block_reason=SimpleNamespace(name="SAFETY"))
    candidates = []

    @property
    def text(self):
        raise ValueError("response has no parts")


@pytest.fixture
def configured(monkeypatch):
    calls = []
    monkeypatch.setattr(gemini_client.genai, "configure", lambda **kwargs: calls.append(kwargs))
    return calls


def test_gateway_configures_key_and_returns_text(configured):
    model = FakeModel(response=SimpleNamespace(text='  {"title": "T", "summary": "S"}  ', candidates=[]))
    gateway = GeminiGateway(LLMConfig(api_key="gem-key"), model=model)

    result = asyncio.run(gateway.generate("prompt"))

    assert configured == [{"api_key": "gem-key"}]
    assert result.text == '{"title": "T", "summary": "S"}'
    assert not result.is_empty
    assert model.prompts == ["prompt"]


def test_request_timeout_bounds_the_sdk_call(configured):
    model = FakeModel(response=SimpleNamespace(text="{}", candidates=[]))
    untimed = FakeModel(response=SimpleNamespace(text="{}", candidates=[]))

    asyncio.run(GeminiGateway(LLMConfig(api_key="k"), model=model, request_timeout=12.5).generate("p"))
    asyncio.run(GeminiGateway(LLMConfig(api_key="k"), model=untimed).generate("p"))

    assert model.request_options == [{"timeout": 12.5}]
    assert untimed.request_options == [None]


def test_gateway_requires_api_key(configured):
    with pytest.raises(ValueError):
        GeminiGateway(LLMConfig(api_key=None), model=FakeModel())
    assert configured == []


def test_blocked_response_reports_reason(configured):
    gateway = GeminiGateway(LLMConfig(api_key="k"), model=FakeModel(response=BlockedResponse()))

    result = asyncio.run(gateway.generate("prompt"))

    assert result.is_empty
    assert result.block_reason == "SAFETY"


def test_text_is_recovered_from_candidate_parts(configured):
    candidate = SimpleNamespace(
        finish_reason=SimpleNamespace(name="STOP"),
        content=SimpleNamespace(parts=[SimpleNamespace(text="{"), SimpleNamespace(text="}")]),
    )
    response = SimpleNamespace(text=None, candidates=[candidate], prompt_feedback=None)
    gateway = GeminiGateway(LLMConfig(api_key="k"), model=FakeModel(response=response))

    result = asyncio.run(gateway.generate("prompt"))

    assert result.text == "{}"
    assert result.finish_reason == "STOP"
    assert result.block_reason is None


def test_api_errors_are_wrapped(configured):
    gateway = GeminiGateway(LLMConfig(api_key="k"), model=FakeModel(error=ServiceUnavailable("overloaded")))

    with pytest.raises(GeminiGatewayError):
        asyncio.run(gateway.generate("prompt"))


def test_ping_reports_failure(configured):
    gateway = GeminiGateway(LLMConfig(api_key="k"), model=FakeModel(error=ServiceUnavailable("bad key")))

    assert asyncio.run(gateway.ping()) is False


def test_rate_limiter_admits_up_to_limit():
    limiter = RateLimiter(max_requests_per_minute=2)

    async def run():
        await limiter.acquire()
        await limiter.acquire()
        with pytest.raises(RateLimitExceeded):
            await limiter.acquire(timeout=0.01)

    asyncio.run(run())
    assert limiter.in_window == 2


def test_rate_limiter_survives_new_event_loops():
    limiter = RateLimiter(max_requests_per_minute=5)

    asyncio.run(limiter.acquire())
    asyncio.run(limiter.acquire())

    assert limiter.in_window == 2


def test_rate_limiter_is_shared_safely_across_threads():
    limiter = RateLimiter(max_requests_per_minute=6)
    admitted = []
    rejected = []
    start = threading.Barrier(4)

    async def claim_slots():
        for _ in range(5):
            try:
                await limiter.acquire(timeout=0)
            except RateLimitExceeded:
                rejected.append(1)
            else:
                admitted.append(1)

    def worker():
        start.wait()
        asyncio.run(claim_slots())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(admitted) == 6
    assert len(rejected) == 14
    assert limiter.in_window == 6


def test_rate_limiter_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        RateLimiter(max_requests_per_minute=0)
