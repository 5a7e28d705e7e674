import logging
from typing import Optional, Any, Dict

import httpx

from counsel.config import settings

logger = logging.getLogger(__name__)


def _extract_text_from_api_response(resp: Any) -> str:
    """Try to extract a human-readable response text from various API shapes.

    This is intentionally permissive: many generative APIs return results in
    different keys (`response`, `text`, `output`, `candidates`, ...). We
    normalize to a single string to simplify downstream code.
    """
    if resp is None:
        return ""
    if isinstance(resp, str):
        return resp
    if isinstance(resp, dict):
        # common keys
        for key in ("response", "text", "output", "answer"):
            if key in resp and isinstance(resp[key], str):
                return resp[key]

        # Some APIs return choices or candidates as lists
        for list_key in ("choices", "candidates", "outputs"):
            if (
                list_key in resp
                and isinstance(resp[list_key], (list, tuple))
                and resp[list_key]
            ):
                first = resp[list_key][0]
                if isinstance(first, str):
                    return first
                if isinstance(first, dict):
                    for k in ("text", "content", "output"):
                        if k in first and isinstance(first[k], str):
                            return first[k]
        return ""
    return str(resp)


def _candidate_text(raw: Dict[str, Any]) -> str:
    """Pull candidates[0].content.parts[*].text out of a generateContent reply."""
    candidates = raw.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


async def send_message(prompt: str, model: Optional[str] = None) -> Dict[str, Any]:
    """Send a prompt to Gemini (or return a mock response in DEV).

    Returns a dict of the form {"model": ..., "response": <str>, "raw": ...}.
    Raises RuntimeError when the API call fails.
    """
    model = model or settings.GEMINI_MODEL

    if settings.gemini_mock_mode:
        logger.debug("Using mock Gemini response")
        return {
            "model": model,
            "response": f"(mock) Answer to: {prompt[:200]}",
            "raw": {"mock": True},
        }

    # API Key is appended as a query parameter (standard for REST API access)
    url = settings.GEMINI_API_URL.format(model=model)
    params = {"key": settings.GOOGLE_API_KEY}
    headers = {"Content-Type": "application/json"}
    payload = {
        "contents": [
            {"role": "user", "parts": [{"text": prompt}]}
        ],
    }

    logger.debug("Sending prompt to Gemini endpoint: %s", url)

    async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as client:
        try:
            r = await client.post(url, params=params, json=payload, headers=headers)
            r.raise_for_status()
            raw = r.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini API HTTP Error: %s - Response: %s", e, e.response.text)
            raise RuntimeError(
                f"Gemini API Error: {e.response.status_code} - {e.response.text}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Gemini API General Error: %s", e)
            raise RuntimeError(f"Failed to call Gemini API: {e}") from e

    response_text = _candidate_text(raw)
    # Fallback to the generic extractor if the structure is unexpected
    if not response_text:
        response_text = _extract_text_from_api_response(raw)

    return {"model": model, "response": response_text, "raw": raw}


async def generate_text(prompt: str, model: Optional[str] = None) -> str:
    """Send a prompt and return only the reply text."""
    result = await send_message(prompt, model=model)
    return (result.get("response") or "").strip()
