"""In-memory stand-ins for the AI provider and the DuckDuckGo service."""

import asyncio

import httpx

from api.base_client import BaseAIClient
from models.unified_response import NormalizedError, UnifiedResponse
from tools.web.cache import SessionResultCache
from tools.web.duckduckgo_client import DuckDuckGoClient
from tools.web.search_engine import ResultClassificationEngine


class FakeAIClient(BaseAIClient):
    """Deterministic completion client: fixed text, optional delay, error or exception."""

    provider_name = "fake"

    def __init__(self, text="", delay_s=0.0, exc=None, error_code=None):
        super().__init__(model_name="fake-model")
        self.text = text
        self.delay_s = delay_s
        self.exc = exc
        self.error_code = error_code
        self.prompts = []
        self.cancelled = False

    async def get_completion(self, prompt, **kwargs):
        self.prompts.append(prompt)
        try:
            if self.delay_s:
                await asyncio.sleep(self.delay_s)
        except asyncio.CancelledError:
            self.cancelled = True
            raise

        if self.exc is not None:
            raise self.exc
        if self.error_code is not None:
            error = NormalizedError(
                code=self.error_code, message=f"fake {self.error_code}", provider="fake"
            )
            return self._create_error_response(self._generate_request_id(), error, 0, None)
        return UnifiedResponse(
            request_id=self._generate_request_id(),
            text=self.text,
            provider="fake",
            model="fake-model",
            latency_ms=1,
        )


class DuckDuckGoStub:
    """
    httpx.MockTransport handler serving a fixed instant-answer payload.

    ``exc`` simulates a transport failure, ``raw`` a literal body.
    """

    def __init__(self, payload=None, status_code=200, exc=None, raw=None, delay_s=0.0):
        self.payload = payload if payload is not None else {}
        self.status_code = status_code
        self.exc = exc
        self.raw = raw
        self.delay_s = delay_s
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw.encode("utf-8"))
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def call_count(self):
        return len(self.requests)

    def engine(self, cache=None, timeout_s=15.0):
        client = DuckDuckGoClient(timeout_s=timeout_s, transport=httpx.MockTransport(self))
        return ResultClassificationEngine(client=client, cache=cache)

    def cached_engine(self):
        return self.engine(cache=SessionResultCache())


def topic(url, text):
    return {"FirstURL": url, "Text": text}


RICH_PAYLOAD = {
    "Heading": "Photosynthesis",
    "AbstractText": "Photosynthesis is the process by which plants convert light into energy.",
    "AbstractURL": "https://en.wikipedia.org/wiki/Photosynthesis",
    "Image": "",
    "RelatedTopics": [
        topic(
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "Photosynthesis explained - A short animated video",
        ),
        topic("https://www.khanacademy.org/science/photosynthesis", "Khan Academy - Photosynthesis lessons"),
        {
            "Name": "Biology",
            "Topics": [
                topic("https://youtu.be/abcdefghijk", "Light reactions - Crash course clip"),
                topic("https://biology.stackexchange.com/q/1", "Why are leaves green - Q&A thread"),
            ],
        },
    ],
    "Results": [
        topic("https://example.org/blog/plants", "Plant notes - Blog post on chlorophyll"),
    ],
}
