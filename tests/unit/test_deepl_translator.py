"""Unit tests for the DeepL translator."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.interfaces.translator import TranslationError
from app.strategies.translators import DeepLTranslator

API_URL = "https://api-free.deepl.com/v2/translate"


def mock_client(response=None, post_side_effect=None):
    """Build a patched httpx.AsyncClient context manager."""
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=post_side_effect)

    client_cm = MagicMock()
    client_cm.__aenter__ = AsyncMock(return_value=client)
    client_cm.__aexit__ = AsyncMock(return_value=False)
    return client_cm, client


def json_response(data, status_code=200):
    return httpx.Response(status_code, json=data, request=httpx.Request("POST", API_URL))


class TestDeepLTranslator:
    """Test suite for DeepLTranslator."""

    @pytest.fixture
    def translator(self):
        return DeepLTranslator(api_key="test-key", api_url=API_URL, timeout=5.0)

    def test_translate_success(self, translator):
        """Test the request shape and the extracted translation."""
        client_cm, client = mock_client(json_response({"translations": [{"text": "Hello"}]}))

        with patch("app.strategies.translators.deepl.httpx.AsyncClient", return_value=client_cm):
            result = asyncio.run(translator.translate("Hola", "en"))

        assert result == "Hello"
        client.post.assert_awaited_once()
        args, kwargs = client.post.call_args
        assert args[0] == API_URL
        assert kwargs["json"] == {"text": ["Hola"], "target_lang": "EN"}
        assert kwargs["headers"]["Authorization"] == "DeepL-Auth-Key test-key"

    def test_missing_key(self):
        translator = DeepLTranslator(api_key="")
        with pytest.raises(TranslationError, match="not configured"):
            asyncio.run(translator.translate("Hola", "EN"))

    def test_unsupported_target(self, translator):
        with pytest.raises(TranslationError, match="Unsupported target"):
            asyncio.run(translator.translate("Hola", "JA"))

    def test_http_status_error(self, translator):
        client_cm, _ = mock_client(json_response({"message": "Quota exceeded"}, status_code=456))

        with patch("app.strategies.translators.deepl.httpx.AsyncClient", return_value=client_cm):
            with pytest.raises(TranslationError, match="HTTP 456"):
                asyncio.run(translator.translate("Hola", "EN"))

    def test_transport_error(self, translator):
        client_cm, _ = mock_client(post_side_effect=httpx.ConnectError("connection refused"))

        with patch("app.strategies.translators.deepl.httpx.AsyncClient", return_value=client_cm):
            with pytest.raises(TranslationError, match="request failed"):
                asyncio.run(translator.translate("Hola", "EN"))

    def test_invalid_json_body(self, translator):
        response = httpx.Response(200, text="not json", request=httpx.Request("POST", API_URL))
        client_cm, _ = mock_client(response)

        with patch("app.strategies.translators.deepl.httpx.AsyncClient", return_value=client_cm):
            with pytest.raises(TranslationError, match="invalid JSON"):
                asyncio.run(translator.translate("Hola", "EN"))

    @pytest.mark.parametrize(
        "data",
        [{}, {"translations": []}, {"translations": [{}]}, {"translations": [{"text": 3}]}, []],
    )
    def test_unexpected_shape(self, translator, data):
        client_cm, _ = mock_client(json_response(data))

        with patch("app.strategies.translators.deepl.httpx.AsyncClient", return_value=client_cm):
            with pytest.raises(TranslationError, match="Unexpected translation response"):
                asyncio.run(translator.translate("Hola", "EN"))

    def test_supported_languages(self, translator):
        assert translator.supported_languages == {"ES", "EN", "FR", "DE", "PT", "IT"}
