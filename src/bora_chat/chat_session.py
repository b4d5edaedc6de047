from __future__ import annotations

import asyncio
from typing import Literal

from loguru import logger

from bora_chat.chat_config import ChatConfig
from bora_chat.completion_client import CompletionClient
from bora_chat.conversation.models import (
    SERVICE_UNAVAILABLE,
    UNEXPECTED_MESSAGE,
    CompletionOutcome,
    Failure,
    Message,
    RequestContext,
    Success,
)
from bora_chat.conversation.store import ConversationStore

SendStatus = Literal["sent", "failed", "rejected", "busy", "cancelled"]


class ChatSession:
    """Turns user input into one completion at a time and records the outcome."""

    def __init__(
        self,
        config: ChatConfig,
        *,
        store: ConversationStore | None = None,
        client: CompletionClient | None = None,
    ):
        self._model = config.model
        self._system_prompt = config.system_prompt
        self._history_policy = config.history_policy
        self._store = store if store is not None else ConversationStore(config.greeting)
        self._client = client if client is not None else CompletionClient(
            config.api_key,
            api_url=config.api_url,
            timeout_seconds=config.request_timeout_seconds,
            max_attempts=config.max_attempts,
        )
        self._pending: asyncio.Task[CompletionOutcome] | None = None
        self._abandoned = False

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def busy(self) -> bool:
        return self._pending is not None

    def build_request_context(self, prior_messages: tuple[Message, ...], user_text: str) -> RequestContext:
        return RequestContext(
            system_prompt=self._system_prompt,
            prior_messages=self._history_policy.apply(prior_messages),
            new_user_text=user_text,
            model=self._model,
        )

    async def send(self, text: str, *, pending_attachments: int = 0) -> SendStatus:
        # Single slot: a second send while one is outstanding is turned away
        # before it touches the transcript.
        if self.busy:
            logger.info("Completion already in flight; send rejected")
            return "busy"

        prior_messages = self._store.snapshot()
        if not self._store.append_user_message(text, pending_attachments=pending_attachments):
            return "rejected"

        context = self.build_request_context(prior_messages, text)
        self._abandoned = False
        self._pending = asyncio.create_task(self._client.complete(context))
        try:
            outcome = await self._pending
        except asyncio.CancelledError:
            if not self._abandoned:
                raise
            logger.info("Completion abandoned by caller")
            return "cancelled"
        except Exception:
            logger.exception("Completion raised unexpectedly")
            outcome = Failure(SERVICE_UNAVAILABLE, UNEXPECTED_MESSAGE)
        finally:
            self._pending = None
            self._store.set_typing(False)

        if isinstance(outcome, Success):
            self._store.append_assistant_message(outcome.text)
            return "sent"

        logger.info(f"Completion failed: kind={outcome.kind}")
        self._store.append_system_error(outcome.message)
        return "failed"

    def cancel(self) -> bool:
        if self._pending is None or self._pending.done():
            return False
        self._abandoned = True
        self._pending.cancel()
        return True
