from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from loguru import logger

from bora_chat.chat_session import ChatSession
from bora_chat.commands.router import CommandRouter
from bora_chat.conversation.models import Message
from bora_chat.message_formatter import MessageFormatter
from bora_chat.prompt_input import read_message
from bora_chat.spinner import TypingIndicator
from bora_chat.terminal_render import fragment_to_text


class ChatShell:
    _USER_PROMPT = "you> "

    def __init__(
        self,
        session: ChatSession,
        formatter: MessageFormatter,
        *,
        assistant_name: str = "BoraAI",
        out: TextIO | None = None,
        read_fn: Callable[[], str] | None = None,
        ansi: bool = True,
        show_typing: bool = True,
    ):
        self._session = session
        self._formatter = formatter
        self._line_prefix = f"{assistant_name.lower()}> "
        self._out = out or sys.stdout
        self._read_fn = read_fn or (lambda: read_message(self._USER_PROMPT))
        self._ansi = ansi

        self._command_router = CommandRouter(
            on_help=self._on_help,
            on_history=self._on_history,
            on_unknown=self._on_unknown_command,
        )

        self._session.store.subscribe(self._on_store_event)
        if show_typing:
            self._session.store.subscribe(TypingIndicator(label=f" {assistant_name} is typing...", stream=self._out))

    def render_message(self, message: Message) -> str:
        prefix = self._line_prefix if message.sender == "assistant" else self._USER_PROMPT
        body = fragment_to_text(self._formatter.format(message.text), ansi=self._ansi)
        return prefix + body.replace("\n", "\n" + " " * len(prefix))

    async def run(self) -> None:
        for message in self._session.store.snapshot():
            self._print(self.render_message(message))
        self._print("")

        while True:
            try:
                user_input = self._read_fn()
            except (EOFError, KeyboardInterrupt):
                break

            trimmed = user_input.strip()
            if trimmed in ("exit", "quit"):
                break

            if await self._command_router.try_handle(user_input):
                continue

            try:
                status = await self._session.send(user_input)
            except Exception as ex:
                logger.error(f"Unhandled error: {ex}")
                continue
            logger.debug(f"Send finished: status={status}")

    def _on_store_event(self, event_type: str, payload: dict) -> None:
        if event_type != "message.appended":
            return
        message: Message = payload["message"]
        # The user already sees what they typed.
        if message.sender == "assistant":
            self._print(self.render_message(message) + "\n")

    async def _on_help(self) -> None:
        self._print(f"{self._line_prefix}Commands:")
        self._print(f"{self._line_prefix}  /help            show this help")
        self._print(f"{self._line_prefix}  /history [n]     re-print the last n messages (all by default)")
        self._print(f"{self._line_prefix}  exit | quit      leave the chat")
        self._print(f"{self._line_prefix}End a line with \\ to continue the message on the next line.")

    async def _on_history(self, command: str) -> None:
        parts = command.split()
        messages = self._session.store.snapshot()
        if len(parts) > 1:
            try:
                limit = int(parts[1])
            except ValueError:
                self._print(f"{self._line_prefix}Usage: /history [n]")
                return
            messages = messages[-limit:] if limit > 0 else ()
        for message in messages:
            self._print(self.render_message(message))

    def _on_unknown_command(self, command: str) -> None:
        self._print(f"{self._line_prefix}Unknown command: {command} (try /help)")

    def _print(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()
