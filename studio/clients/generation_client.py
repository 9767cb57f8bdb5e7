"""
Content generation client (OpenRouter chat completions).

One request per call:

  POST {openrouter_base_url}/chat/completions
  { "model", "messages": [system, user], "temperature", "max_tokens" }

The generated document is choices[0].message.content.

complete() reports the outcome as a tagged result so callers can tell a
network failure, a non-2xx status and an unexpected body apart.
generate() collapses any failure into a GenerationError. There is no retry,
caching or streaming; identical prompts re-issue identical requests.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from studio.config import settings
from studio.errors import FailureReason, GenerationError
from studio.telemetry import GENERATION_LATENCY, GENERATION_REQUESTS_TOTAL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant specialized in generating {category} content. "
    "Your task is to create {content_type} based on the user's requirements."
)


@dataclass(frozen=True)
class GenerationOk:
    text: str


@dataclass(frozen=True)
class GenerationErr:
    reason: FailureReason
    detail: str


GenerationResult = Union[GenerationOk, GenerationErr]


def build_messages(prompt: str, category: str, content_type: str) -> list[dict]:
    return [
        {
            "role": "system",
            "content": SYSTEM_PROMPT.format(category=category, content_type=content_type),
        },
        {"role": "user", "content": prompt},
    ]


def extract_content(data: object) -> str:
    """Pull choices[0].message.content out of a decoded response body."""
    try:
        content = data["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise ValueError(f"missing choices[0].message.content ({exc!r})") from exc
    if not isinstance(content, str):
        raise ValueError(f"content is {type(content).__name__}, expected str")
    return content


class GenerationClient:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def start(self) -> None:
        self._http = httpx.AsyncClient(
            base_url=settings.openrouter_base_url,
            timeout=settings.generation_timeout_seconds,
            transport=self._transport,
        )

    async def stop(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    def _payload(self, prompt: str, category: str, content_type: str) -> dict:
        return {
            "model": settings.generation_model,
            "messages": build_messages(prompt, category, content_type),
            "temperature": settings.generation_temperature,
            "max_tokens": settings.generation_max_tokens,
        }

    async def complete(
        self,
        prompt: str,
        category: str,
        content_type: str,
    ) -> GenerationResult:
        if self._http is None:
            raise RuntimeError("Generation client not started — call start() at startup")

        headers = {"Authorization": f"Bearer {settings.openrouter_api_key}"}
        payload = self._payload(prompt, category, content_type)

        t0 = time.perf_counter()
        try:
            resp = await self._http.post("/chat/completions", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            result: GenerationResult = GenerationErr(FailureReason.NETWORK, str(exc))
        else:
            if not resp.is_success:
                result = GenerationErr(
                    FailureReason.HTTP_STATUS,
                    f"{resp.status_code} {resp.reason_phrase}",
                )
            else:
                try:
                    result = GenerationOk(extract_content(resp.json()))
                except ValueError as exc:
                    result = GenerationErr(FailureReason.MALFORMED_RESPONSE, str(exc))
        GENERATION_LATENCY.observe(time.perf_counter() - t0)

        if isinstance(result, GenerationErr):
            logger.warning(
                "Generation failed (category=%s, type=%s, reason=%s): %s",
                category, content_type, result.reason.value, result.detail,
            )
            GENERATION_REQUESTS_TOTAL.labels(category=category, outcome=result.reason.value).inc()
        else:
            logger.info(
                "Generated %s content (%s): %d chars", category, content_type, len(result.text)
            )
            GENERATION_REQUESTS_TOTAL.labels(category=category, outcome="ok").inc()
        return result

    async def generate(self, prompt: str, category: str, content_type: str) -> str:
        """Return the generated text or raise GenerationError."""
        result = await self.complete(prompt, category, content_type)
        if isinstance(result, GenerationErr):
            raise GenerationError(result.reason, result.detail)
        return result.text


# Singleton
generation_client = GenerationClient()
