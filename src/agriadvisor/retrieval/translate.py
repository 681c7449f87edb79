"""Translation client — Google Cloud Translation v2 (form-encoded POST).

Translation is strictly best-effort. Every failure mode (no key, HTTP
error, transport error, malformed body) returns the source text tagged
with `translated=False`, so callers can tell a real translation from a
silent fallback without ever handling an exception.
"""

import logging
import unicodedata

import httpx

from agriadvisor.config import settings
from agriadvisor.core.errors import TranslationError
from agriadvisor.core.types import TranslationResult
from agriadvisor.observability.tracing import start_span

logger = logging.getLogger(__name__)

TRANSLATE_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=5.0)


async def _post_translation(
    client: httpx.AsyncClient,
    text: str,
    target_lang: str,
    source_lang: str,
    api_key: str,
) -> str:
    """One round-trip to the translation endpoint. Raises TranslationError."""
    form = {"target": target_lang, "source": source_lang, "key": api_key, "q": text}
    try:
        resp = await client.post(settings.translate_api_url, data=form)
    except httpx.HTTPError as e:
        raise TranslationError(f"transport: {type(e).__name__}: {e}") from e

    if not resp.is_success:
        raise TranslationError(f"http_{resp.status_code}: {resp.text[:200]}")

    try:
        translated = resp.json()["data"]["translations"][0]["translatedText"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise TranslationError(f"malformed response: {e}") from e
    return unicodedata.normalize("NFC", translated)


async def translate(
    text: str,
    target_lang: str,
    source_lang: str = "en",
    api_key: str | None = None,
) -> TranslationResult:
    """Translate one text blob, falling back to the original on any failure.

    Args:
        text: Source text.
        target_lang: ISO-639 target code (e.g. "hi", "te").
        source_lang: ISO-639 source code.
        api_key: Per-request key; the configured key is used when absent.
    """
    key = api_key or settings.google_translate_api_key
    if not key:
        logger.warning("Translation API key not provided, returning original text")
        return TranslationResult(text=text, translated=False, reason="no_api_key")

    logger.info(
        "Translating text to %s (%d chars)", target_lang, len(text),
        extra={"language": target_lang, "step": "translate"},
    )
    with start_span(name="translate", span_type="TOOL") as span:
        span.set_inputs({"target": target_lang, "source": source_lang, "chars": len(text)})
        async with httpx.AsyncClient(timeout=TRANSLATE_TIMEOUT) as client:
            try:
                translated = await _post_translation(client, text, target_lang, source_lang, key)
            except TranslationError as e:
                logger.warning("Translation failed, returning original text: %s", e)
                span.set_outputs({"translated": False, "reason": str(e)})
                return TranslationResult(text=text, translated=False, reason=str(e))

        span.set_outputs({"translated": True, "chars": len(translated)})
    return TranslationResult(text=translated, translated=True)


async def translate_text(
    text: str,
    target_lang: str,
    source_lang: str = "en",
    api_key: str | None = None,
) -> str:
    """Same as translate(), returning only the resulting text."""
    result = await translate(text, target_lang, source_lang, api_key)
    return result.text
