"""Unit tests for external translation providers.

Tests:
  - LibreTranslate request payload and response parsing
  - LibreTranslate HTTP / payload failures raise TranslationProviderError
  - Google mobile page extraction (result-container and legacy t0 markup)
  - Fallback provider switches to the secondary on primary failure
  - External strategy converts failures and timeouts into "no answer"

HTTP is served by httpx.MockTransport; no network access.
"""

from __future__ import annotations

import json

import httpx
import pytest

from lingolive.core.exceptions import TranslationProviderError
from lingolive.services.translation.providers.fallback import FallbackTranslationProvider
from lingolive.services.translation.providers.google_web import GoogleWebProvider, extract_translation
from lingolive.services.translation.providers.libretranslate import LibreTranslateProvider
from lingolive.services.translation.strategies import ExternalServiceStrategy
from tests.conftest import MockTranslationProvider

LIBRE_URL = "https://libre.test/translate"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestLibreTranslateProvider:
    async def test_posts_payload_and_reads_translation(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"translatedText": "Hello"})

        provider = LibreTranslateProvider(LIBRE_URL, api_key="secret", client=_client(handler))

        assert await provider.translate("Hola", "es", "en") == "Hello"
        assert seen == [
            {"q": "Hola", "source": "es", "target": "en", "format": "text", "api_key": "secret"}
        ]
        await provider.aclose()

    async def test_api_key_omitted_when_blank(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"translatedText": "Hello"})

        provider = LibreTranslateProvider(LIBRE_URL, client=_client(handler))
        await provider.translate("Hola", "es", "en")

        assert "api_key" not in seen[0]

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(429, json={"error": "Too many requests"}),
            httpx.Response(500, text="oops"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"translatedText": ""}),
            httpx.Response(200, json=["unexpected"]),
        ],
    )
    async def test_failures_raise_provider_error(self, response: httpx.Response) -> None:
        provider = LibreTranslateProvider(LIBRE_URL, client=_client(lambda request: response))
        with pytest.raises(TranslationProviderError):
            await provider.translate("Hola", "es", "en")

    async def test_network_error_raises_provider_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = LibreTranslateProvider(LIBRE_URL, client=_client(handler))
        with pytest.raises(TranslationProviderError):
            await provider.translate("Hola", "es", "en")


class TestExtractTranslation:
    def test_result_container(self) -> None:
        page = '<html><div class="result-container">Where is my order?</div></html>'
        assert extract_translation(page) == "Where is my order?"

    def test_unescapes_entities(self) -> None:
        page = '<div class="result-container">Tom &amp; Jerry&#39;s order</div>'
        assert extract_translation(page) == "Tom & Jerry's order"

    def test_legacy_markup(self) -> None:
        page = '<div dir="ltr" class="t0">Hello</div>'
        assert extract_translation(page) == "Hello"

    def test_unparseable(self) -> None:
        assert extract_translation("<html>captcha</html>") is None


@pytest.mark.asyncio
class TestGoogleWebProvider:
    async def test_query_parameters(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, text='<div class="result-container">Hello</div>')

        provider = GoogleWebProvider(client=_client(handler))

        assert await provider.translate("namaste", "auto", "en") == "Hello"
        params = seen[0].params
        assert (params["sl"], params["tl"], params["q"]) == ("auto", "en", "namaste")

    async def test_unparseable_page_raises(self) -> None:
        provider = GoogleWebProvider(client=_client(lambda request: httpx.Response(200, text="<html/>")))
        with pytest.raises(TranslationProviderError):
            await provider.translate("namaste", "auto", "en")


@pytest.mark.asyncio
class TestFallbackProvider:
    async def test_primary_success(self) -> None:
        primary = MockTranslationProvider(default="from primary")
        secondary = MockTranslationProvider(default="from secondary")
        provider = FallbackTranslationProvider(primary, secondary)

        assert await provider.translate("Hola", "es", "en") == "from primary"
        assert secondary.calls == []

    async def test_falls_back_on_primary_failure(self) -> None:
        primary = MockTranslationProvider(fail=True)
        secondary = MockTranslationProvider(default="from secondary")
        provider = FallbackTranslationProvider(primary, secondary)

        assert await provider.translate("Hola", "es", "en") == "from secondary"
        assert len(primary.calls) == 1

    async def test_both_fail(self) -> None:
        provider = FallbackTranslationProvider(
            MockTranslationProvider(fail=True),
            MockTranslationProvider(fail=True),
        )
        with pytest.raises(TranslationProviderError):
            await provider.translate("Hola", "es", "en")

    async def test_aclose_closes_both(self) -> None:
        primary, secondary = MockTranslationProvider(), MockTranslationProvider()
        await FallbackTranslationProvider(primary, secondary).aclose()
        assert primary.closed and secondary.closed


@pytest.mark.asyncio
class TestExternalServiceStrategy:
    async def test_returns_translation(self) -> None:
        strategy = ExternalServiceStrategy(MockTranslationProvider(default="Hello"))
        assert await strategy.attempt("Hola", "es", "en") == "Hello"

    async def test_failure_is_no_answer(self) -> None:
        strategy = ExternalServiceStrategy(MockTranslationProvider(fail=True))
        assert await strategy.attempt("Hola", "es", "en") is None

    async def test_timeout_is_no_answer(self) -> None:
        strategy = ExternalServiceStrategy(
            MockTranslationProvider(default="late", delay=0.5),
            timeout_seconds=0.05,
        )
        assert await strategy.attempt("Hola", "es", "en") is None
