from typing import Protocol, runtime_checkable

from loguru import logger

from bora_chat.conversation.models import Message


@runtime_checkable
class HistoryPolicy(Protocol):
    def apply(self, messages: tuple[Message, ...]) -> tuple[Message, ...]: ...


class FullHistoryPolicy:
    def apply(self, messages: tuple[Message, ...]) -> tuple[Message, ...]:
        return messages


class WindowHistoryPolicy:
    def __init__(self, max_messages: int = 50):
        self._max_messages = max_messages

    def apply(self, messages: tuple[Message, ...]) -> tuple[Message, ...]:
        if self._max_messages <= 0 or len(messages) <= self._max_messages:
            return messages

        remove_count = len(messages) - self._max_messages
        logger.info(
            f"Request history trimmed - dropped {remove_count} oldest message(s) "
            f"to stay within the {self._max_messages} message limit"
        )
        return messages[remove_count:]


class TokenBudgetHistoryPolicy:
    def __init__(self, max_tokens: int = 12_000):
        self._max_tokens = max_tokens

    def apply(self, messages: tuple[Message, ...]) -> tuple[Message, ...]:
        if not messages:
            return messages

        estimated = estimate_tokens(messages)
        if estimated <= self._max_tokens:
            return messages

        # Walk back from the newest message; the newest one is always kept.
        kept = 0
        budget = 0
        for message in reversed(messages):
            cost = estimate_tokens((message,))
            if kept and budget + cost > self._max_tokens:
                break
            budget += cost
            kept += 1

        result = messages[len(messages) - kept:]
        logger.info(
            f"Request history trimmed - ~{estimated:,} tokens over the {self._max_tokens:,} budget, "
            f"kept {kept} of {len(messages)} message(s) (~{budget:,} tokens)"
        )
        return result


def estimate_tokens(messages: tuple[Message, ...]) -> int:
    return sum(len(m.text) for m in messages) // 4


def create_history_policy(name: str, *, max_messages: int = 50, max_tokens: int = 12_000) -> HistoryPolicy:
    """Factory: create a HistoryPolicy by config name."""
    key = name.strip().lower()
    if key == "full":
        return FullHistoryPolicy()
    if key == "window":
        return WindowHistoryPolicy(max_messages)
    if key == "tokens":
        return TokenBudgetHistoryPolicy(max_tokens)
    raise ValueError(f"Unknown history policy: {name!r}. Supported: 'full', 'window', 'tokens'")
