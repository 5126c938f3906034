# tests/conftest.py
from types import SimpleNamespace

import httpx
import pytest

from evfunding.config import Settings


class FakeOpenAI:
    """Stands in for AsyncOpenAI: records calls and returns canned envelopes."""

    def __init__(self, text="Canned funding answer.", response=None, error=None):
        self.text = text
        self.response = response
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._chat))
        self.responses = SimpleNamespace(create=self._responses)

    async def _chat(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"choices": [{"message": {"role": "assistant", "content": self.text}}]}

    async def _responses(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        if self.response is not None:
            return self.response
        return {
            "output": [
                {"type": "message", "content": [{"type": "output_text", "text": self.text}]},
            ]
        }


def serp_payload(*links):
    return {"organic_results": [{"position": i, "link": link} for i, link in enumerate(links, 1)]}


@pytest.fixture
def make_openai():
    return FakeOpenAI


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", serp_api_key="serp-test")


@pytest.fixture
def web_transport():
    """Serves SerpAPI results and two pages; any other host is unreachable."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "serpapi.com":
            return httpx.Response(
                200,
                json=serp_payload("https://energy.example.gov/ev", "https://utility.example.com/rebates"),
            )
        if request.url.host == "energy.example.gov":
            return httpx.Response(
                200,
                html="<html><body><h1>EV grants</h1><p>Up to $5,000 per port.</p></body></html>",
            )
        if request.url.host == "utility.example.com":
            return httpx.Response(
                200,
                html="<html><body><p>Make-ready rebates for commercial sites.</p></body></html>",
            )
        raise httpx.ConnectError("unreachable", request=request)

    return httpx.MockTransport(handler)
