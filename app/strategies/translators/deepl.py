"""DeepL-based translator.

Forwards a single text to the DeepL v2 translate endpoint. No retry or
batching: one request per call, any failure surfaces as TranslationError.
"""

import logging

import httpx

from app.interfaces.translator import BaseTranslator, TranslationError

logger = logging.getLogger(__name__)

DEEPL_FREE_API_URL = "https://api-free.deepl.com/v2/translate"


class DeepLTranslator(BaseTranslator):
    """Translator implementation using the DeepL REST API.

    Attributes:
        api_key: The DeepL authentication key.
        api_url: Translate endpoint (free or pro host).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEEPL_FREE_API_URL,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the DeepL translator.

        Args:
            api_key: Your DeepL API key.
            api_url: Translate endpoint URL.
            timeout: Request timeout in seconds.
        """
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout

    async def translate(self, text: str, target_lang: str) -> str:
        """Translate text with DeepL.

        Args:
            text: The text to translate.
            target_lang: Upper-case DeepL target code.

        Returns:
            The translated text.

        Raises:
            TranslationError: On missing key, unsupported target, HTTP
                failure or an unexpected response shape.
        """
        if not self._api_key:
            raise TranslationError("DEEPL_API_KEY is not configured")

        target_lang = target_lang.upper()
        if target_lang not in self.supported_languages:
            raise TranslationError(f"Unsupported target language: {target_lang}")

        headers = {
            "Authorization": f"DeepL-Auth-Key {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {"text": [text], "target_lang": target_lang}

        logger.info(f"Requesting translation: target={target_lang}, chars={len(text)}")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._api_url, headers=headers, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            body_excerpt = e.response.text[:500] if e.response is not None else "No response body"
            logger.error(
                f"DeepL responded with an error: status={e.response.status_code} body={body_excerpt}"
            )
            raise TranslationError(f"DeepL returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to call DeepL: {e}")
            raise TranslationError(f"DeepL request failed: {e}") from e
        except ValueError as e:
            logger.error(f"DeepL returned invalid JSON: {e}")
            raise TranslationError("DeepL returned invalid JSON") from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: object) -> str:
        """Pull the first translation out of `{"translations": [{"text": ...}]}`."""
        try:
            translated = data["translations"][0]["text"]  # type: ignore[index]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected DeepL response shape: {str(data)[:200]}")
            raise TranslationError("Unexpected translation response") from e

        if not isinstance(translated, str):
            raise TranslationError("Unexpected translation response")
        return translated

    @property
    def supported_languages(self) -> set[str]:
        """Return supported target language codes."""
        return {"ES", "EN", "FR", "DE", "PT", "IT"}
