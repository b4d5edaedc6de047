import unittest

from bora_chat.conversation.models import Message
from bora_chat.history_window import (
    FullHistoryPolicy,
    HistoryPolicy,
    TokenBudgetHistoryPolicy,
    WindowHistoryPolicy,
    create_history_policy,
    estimate_tokens,
)


def _messages(count: int, size: int = 8) -> tuple[Message, ...]:
    return tuple(
        Message(f"{i:0{size}d}", "user" if i % 2 else "assistant")
        for i in range(count)
    )


class HistoryPolicyTests(unittest.TestCase):
    def test_full_policy_keeps_everything(self) -> None:
        messages = _messages(120)
        self.assertEqual(messages, FullHistoryPolicy().apply(messages))

    def test_window_keeps_most_recent_messages(self) -> None:
        messages = _messages(10)
        out = WindowHistoryPolicy(max_messages=4).apply(messages)
        self.assertEqual(messages[-4:], out)

    def test_window_below_limit_is_untouched(self) -> None:
        messages = _messages(3)
        self.assertIs(messages, WindowHistoryPolicy(max_messages=4).apply(messages))

    def test_window_zero_disables_trimming(self) -> None:
        messages = _messages(10)
        self.assertEqual(messages, WindowHistoryPolicy(max_messages=0).apply(messages))

    def test_token_budget_drops_oldest_first(self) -> None:
        # 40 chars ~ 10 tokens each.
        messages = _messages(6, size=40)
        out = TokenBudgetHistoryPolicy(max_tokens=25).apply(messages)
        self.assertEqual(messages[-2:], out)

    def test_token_budget_always_keeps_newest_message(self) -> None:
        messages = (Message("x" * 400, "user"),)
        self.assertEqual(messages, TokenBudgetHistoryPolicy(max_tokens=1).apply(messages))

    def test_token_budget_under_limit_is_untouched(self) -> None:
        messages = _messages(4)
        self.assertEqual(messages, TokenBudgetHistoryPolicy(max_tokens=1_000).apply(messages))

    def test_estimate_tokens_uses_character_count(self) -> None:
        self.assertEqual(5, estimate_tokens((Message("a" * 12, "user"), Message("b" * 8, "assistant"))))

    def test_policies_do_not_mutate_input(self) -> None:
        messages = _messages(10)
        before = tuple(messages)
        WindowHistoryPolicy(max_messages=2).apply(messages)
        TokenBudgetHistoryPolicy(max_tokens=2).apply(messages)
        self.assertEqual(before, messages)


class CreateHistoryPolicyTests(unittest.TestCase):
    def test_known_names(self) -> None:
        self.assertIsInstance(create_history_policy("full"), FullHistoryPolicy)
        self.assertIsInstance(create_history_policy(" Window "), WindowHistoryPolicy)
        self.assertIsInstance(create_history_policy("tokens"), TokenBudgetHistoryPolicy)
        self.assertIsInstance(create_history_policy("window"), HistoryPolicy)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaises(ValueError):
            create_history_policy("summarize")


if __name__ == "__main__":
    unittest.main()
