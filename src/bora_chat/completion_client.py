from __future__ import annotations

import asyncio

import httpx
from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bora_chat.conversation.models import (
    API_ERROR,
    MAINTENANCE_MESSAGE,
    RATE_LIMITED,
    RATE_LIMITED_MESSAGE,
    SERVICE_UNAVAILABLE,
    CompletionOutcome,
    Failure,
    RequestContext,
    Success,
)

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo-0125"
_DEFAULT_TIMEOUT_SECONDS = 60.0

# Transcript senders to chat-completions roles.
_ROLE_MAP = {
    "assistant": "assistant",
    "user": "user",
}


def to_request_messages(context: RequestContext) -> list[dict]:
    out: list[dict] = [{"role": "system", "content": context.system_prompt}]
    for message in context.prior_messages:
        out.append({"role": _ROLE_MAP[message.sender], "content": message.text})
    out.append({"role": "user", "content": context.new_user_text})
    return out


def build_request_body(context: RequestContext) -> dict:
    return {
        "model": context.model,
        "messages": to_request_messages(context),
    }


def _on_retry(retry_state) -> None:
    attempt = retry_state.attempt_number
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    reason = type(exc).__name__ if exc else "Unknown"
    logger.warning(f"{reason}. Retrying in {wait:.1f}s (attempt {attempt})...")


def default_retry_kwargs(max_attempts: int, backoff_seconds: float) -> dict:
    return {
        "retry": retry_if_exception_type(httpx.ConnectError),
        "wait": wait_exponential(multiplier=backoff_seconds, min=0, max=backoff_seconds * 8),
        "stop": stop_after_attempt(max(1, max_attempts)),
        "before_sleep": _on_retry,
        "reraise": True,
    }


def classify_transport_failure(ex: BaseException) -> Failure:
    description = str(ex)
    if "quota" in description:
        return Failure(RATE_LIMITED, RATE_LIMITED_MESSAGE)
    return Failure(SERVICE_UNAVAILABLE, MAINTENANCE_MESSAGE)


def classify_status_failure(data: object) -> Failure:
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and "message" in error:
        message = error["message"]
        return Failure(API_ERROR, f"Error: {'' if message is None else message}")
    return Failure(SERVICE_UNAVAILABLE, MAINTENANCE_MESSAGE)


class CompletionClient:
    """Single-shot chat-completions call that never raises past ``complete``.

    Every outcome is folded into ``Success`` or a ``Failure`` carrying a
    friendly message; the caller owns the typing flag.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = 1,
        retry_backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._api_url = api_url
        self._timeout_seconds = timeout_seconds
        self._post_with_retry = retry(**default_retry_kwargs(max_attempts, retry_backoff_seconds))(self._post)
        self._transport = transport

    async def complete(self, context: RequestContext) -> CompletionOutcome:
        body = build_request_body(context)
        logger.debug(f"API request: model={context.model}, messages={len(body['messages'])}")

        try:
            async with asyncio.timeout(self._timeout_seconds):
                response = await self._post_with_retry(body)
            data = response.json()
        except (TimeoutError, httpx.TimeoutException) as ex:
            logger.warning(f"Completion timed out after {self._timeout_seconds}s: {type(ex).__name__}")
            return Failure(SERVICE_UNAVAILABLE, MAINTENANCE_MESSAGE)
        except (httpx.HTTPError, ValueError) as ex:
            logger.warning(f"Completion request failed: {ex}")
            return classify_transport_failure(ex)

        if not response.is_success:
            failure = classify_status_failure(data)
            logger.warning(f"API response: status={response.status_code}, kind={failure.kind}")
            return failure

        try:
            text = data["choices"][0]["message"]["content"]
            if text is not None and not isinstance(text, str):
                raise TypeError(f"content is {type(text).__name__}, expected str")
        except (KeyError, IndexError, TypeError) as ex:
            logger.warning(f"Unexpected completion payload: {type(ex).__name__}: {ex}")
            return classify_transport_failure(ex)

        text = text or ""
        logger.debug(f"API response: status={response.status_code}, text_len={len(text)}")
        return Success(text)

    async def _post(self, body: dict) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._transport) as client:
            return await client.post(self._api_url, headers=headers, json=body)
