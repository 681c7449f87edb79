"""Generation client — Google Gemini `generateContent`.

One prompt in, one normalized advisory out:
  - fenced JSON (or any `{...}` span that parses) comes back as a dict
  - everything else comes back as cleaned plain text

No retries and no provider fallback: a failed call surfaces as
UpstreamError and the route turns it into a 500.
"""

import json
import logging
import re
import time

import httpx

from agriadvisor.config import settings
from agriadvisor.core.errors import UpstreamError
from agriadvisor.observability.tracing import start_span, trace

logger = logging.getLogger(__name__)

AdvisoryResult = str | dict

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)```")
_BULLET_STAR_RE = re.compile(r"^\*\s*", re.MULTILINE)
_BULLET_DASH_RE = re.compile(r"^- ", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n\s*\n")


def _llm_timeout() -> httpx.Timeout:
    # Read covers the whole generation; other phases stay short
    return httpx.Timeout(connect=10.0, read=settings.llm_timeout_seconds, write=10.0, pool=5.0)


def _generate_url() -> str:
    base = settings.gemini_api_url.rstrip("/")
    return f"{base}/models/{settings.gemini_model}:generateContent"


# ---------------------------------------------------------------------------
# Reply normalization
# ---------------------------------------------------------------------------

def strip_code_fences(content: str) -> str:
    """Remove ```json ... ``` wrappers and any stray ``` markers."""
    content = _FENCED_JSON_RE.sub(r"\1", content)
    return content.replace("```", "").strip()


def clean_prose(content: str) -> str:
    """Drop bold markers and line-leading bullets, collapse blank-line runs."""
    content = content.replace("**", "")
    content = _BULLET_STAR_RE.sub("", content)
    content = _BULLET_DASH_RE.sub("", content)
    return _BLANK_RUN_RE.sub("\n", content)


def _reject_constant(name: str):
    """Raise on NaN, Infinity and -Infinity, which strict JSON does not allow."""
    raise json.JSONDecodeError(f"non-standard constant {name}", name, 0)


def normalize_reply(content: str) -> AdvisoryResult:
    """Turn raw model text into a parsed JSON value or cleaned prose.

    The span from the first `{` to the last `}` is tried as JSON. If it
    does not parse, the fence-stripped text is returned untouched (no
    prose cleaning on that path). Without any brace span the reply is
    treated as prose.
    """
    content = strip_code_fences(content.strip())

    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(content[start:end + 1].strip(), parse_constant=_reject_constant)
        except json.JSONDecodeError:
            logger.info("Reply has a brace span that is not JSON; returning text")
            return content

    return clean_prose(content)


def _extract_text(resp: httpx.Response) -> str:
    """Pull candidates[0].content.parts[0].text out of a generateContent reply."""
    try:
        return resp.json()["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise UpstreamError(f"Gemini API error: unexpected response structure ({e})") from e


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

@trace(name="generate", span_type="LLM")
async def generate(prompt: str) -> AdvisoryResult:
    """Send one prompt to Gemini and return the normalized reply.

    Raises:
        UpstreamError: non-success status (carries the upstream body),
            transport failure, or a reply without candidate text.
    """
    payload = {"contents": [{"parts": [{"text": prompt}]}]}
    t0 = time.monotonic()

    with start_span(name="gemini_generate_content", span_type="CHAT_MODEL") as span:
        span.set_inputs({"model": settings.gemini_model, "prompt_chars": len(prompt)})
        try:
            async with httpx.AsyncClient(timeout=_llm_timeout()) as client:
                resp = await client.post(
                    _generate_url(),
                    params={"key": settings.gemini_api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error("Gemini transport error: %s", e)
            span.set_outputs({"error": type(e).__name__})
            raise UpstreamError(f"Gemini API error: {type(e).__name__}: {e}") from e

        if not resp.is_success:
            logger.error("Gemini error %d: %s", resp.status_code, resp.text[:200])
            span.set_outputs({"error": f"http_{resp.status_code}"})
            raise UpstreamError(f"Gemini API error: {resp.text}")

        text = _extract_text(resp).strip()
        result = normalize_reply(text)
        elapsed_ms = round((time.monotonic() - t0) * 1000)
        span.set_outputs({
            "reply_chars": len(text),
            "structured": not isinstance(result, str),
            "duration_ms": elapsed_ms,
        })

    logger.info(
        "Gemini reply received (model=%s, structured=%s)",
        settings.gemini_model, not isinstance(result, str),
        extra={"step": "generate", "duration_ms": elapsed_ms},
    )
    return result
