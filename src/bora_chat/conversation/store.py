from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from bora_chat.conversation.models import Message

DEFAULT_GREETING = "Hello, I am BoraAI. How can I assist you?"

StoreListener = Callable[[str, dict], None]


class ConversationStore:
    """Append-only transcript for one conversation plus its typing flag.

    Listeners receive ``("message.appended", {"index", "message"})`` after every
    append and ``("typing.changed", {"typing"})`` whenever the flag flips.
    """

    def __init__(self, greeting: str | None = DEFAULT_GREETING):
        self._messages: list[Message] = []
        self._typing = False
        self._listeners: list[StoreListener] = []
        if greeting:
            self._messages.append(Message(text=greeting, sender="assistant"))

    @property
    def typing(self) -> bool:
        return self._typing

    def __len__(self) -> int:
        return len(self._messages)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def snapshot(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def last_user_text(self) -> str | None:
        for message in reversed(self._messages):
            if message.sender == "user":
                return message.text
        return None

    def append_user_message(self, text: str, *, pending_attachments: int = 0) -> bool:
        trimmed = text.strip()
        if not trimmed and pending_attachments <= 0:
            return False

        # Only the nearest user message counts as a duplicate (double-submit guard).
        last = self.last_user_text()
        if trimmed and last is not None and last.strip() == trimmed:
            logger.debug("Ignoring repeated user message")
            return False

        if trimmed:
            self._append(Message(text=text, sender="user"))
        self.set_typing(True)
        return True

    def append_assistant_message(self, text: str) -> None:
        self._append(Message(text=text, sender="assistant"))

    def append_system_error(self, friendly_message: str) -> None:
        # Errors share the assistant rendering path.
        self._append(Message(text=friendly_message, sender="assistant"))

    def set_typing(self, typing: bool) -> None:
        if typing == self._typing:
            return
        self._typing = typing
        self._notify("typing.changed", {"typing": typing})

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._notify("message.appended", {"index": len(self._messages) - 1, "message": message})

    def _notify(self, event_type: str, payload: dict) -> None:
        for listener in list(self._listeners):
            try:
                listener(event_type, payload)
            except Exception as ex:
                logger.warning(f"Store listener failed on {event_type}: {ex}")
