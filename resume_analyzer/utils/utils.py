import json
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel

from resume_analyzer.models.settings import LLMSettings
from resume_analyzer.utils.exceptions import MalformedUpstreamResponse, UpstreamServiceFailure

SERVICE_NAME = "reasoning-service"


def chat_complete(messages: List[Dict[str, str]], settings: LLMSettings, temperature: float = None) -> str:
    """POST to an OpenAI-compatible /chat/completions endpoint and return the first message."""
    url = f"{settings.base_url}/chat/completions"
    headers = {
        "Content-Type": "application/json",
        "HTTP-Referer": settings.referer,
        "X-Title": settings.app_title,
    }
    if settings.api_key:
        headers["Authorization"] = f"Bearer {settings.api_key}"

    try:
        resp = requests.post(
            url,
            headers=headers,
            json={
                "model": settings.model,
                "messages": messages,
                "temperature": settings.temperature if temperature is None else temperature,
            },
            timeout=settings.timeout,
        )
        resp.raise_for_status()
    except requests.Timeout as e:
        raise UpstreamServiceFailure(
            f"Reasoning service timed out after {settings.timeout}s", service_name=SERVICE_NAME, cause=e
        ) from e
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise UpstreamServiceFailure(
            f"Reasoning service returned HTTP {status}", service_name=SERVICE_NAME, status_code=status, cause=e
        ) from e
    except requests.RequestException as e:
        raise UpstreamServiceFailure(
            f"Reasoning service unreachable: {e}", service_name=SERVICE_NAME, cause=e
        ) from e

    try:
        content = resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedUpstreamResponse(
            "Reasoning service reply has no choices[0].message.content", raw_response=resp.text, cause=e
        ) from e
    if not isinstance(content, str):
        raise MalformedUpstreamResponse("Reasoning service returned non-text content", raw_response=resp.text)
    return content


def _balanced_span(text: str, start: int) -> Optional[str]:
    """The {...} span opening at text[start], ignoring braces inside JSON strings."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def find_json_span(text: str) -> Optional[str]:
    """
    Return the first balanced {...} span in text that decodes to a JSON object.

    Stray braces in surrounding prose (e.g. "{0-100}") are skipped by retrying
    from the next "{". When no candidate decodes, the first balanced span is
    returned so the caller can report why it is invalid.
    """
    text = text or ""
    first_balanced = None
    start = text.find("{")
    while start >= 0:
        span = _balanced_span(text, start)
        if span is not None:
            if parse_json_object(span).ok:
                return span
            if first_balanced is None:
                first_balanced = span
        start = text.find("{", start + 1)
    return first_balanced


class JsonParseResult(BaseModel):
    ok: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def parse_json_object(span: Optional[str]) -> JsonParseResult:
    if span is None:
        return JsonParseResult(ok=False, error="no JSON object found")
    try:
        data = json.loads(span)
    except ValueError as e:
        return JsonParseResult(ok=False, error=f"invalid JSON: {e}")
    if not isinstance(data, dict):
        return JsonParseResult(ok=False, error=f"expected a JSON object, got {type(data).__name__}")
    return JsonParseResult(ok=True, data=data)
