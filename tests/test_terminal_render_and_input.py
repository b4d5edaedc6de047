import io
import unittest

from bora_chat.message_formatter import format_message
from bora_chat.prompt_input import read_message
from bora_chat.spinner import TypingIndicator
from bora_chat.terminal_render import fragment_to_text


class FragmentToTextTests(unittest.TestCase):
    def test_bold_is_plain_without_ansi(self) -> None:
        self.assertEqual("Title", fragment_to_text(format_message("### Title"), ansi=False))

    def test_bold_uses_ansi_escape(self) -> None:
        self.assertEqual("\033[1mbold\033[0m", fragment_to_text(format_message("**bold**")))

    def test_labelled_link_shows_url(self) -> None:
        text = fragment_to_text(format_message("[click](http://a.com)"), ansi=False)
        self.assertEqual("click (http://a.com)", text)

    def test_self_labelled_link_shows_url_once(self) -> None:
        text = fragment_to_text(format_message("see http://a.com now"), ansi=False)
        self.assertEqual("see http://a.com now", text)

    def test_escaped_markup_is_shown_literally(self) -> None:
        text = fragment_to_text(format_message("use <b> & </b>"), ansi=False)
        self.assertEqual("use <b> & </b>", text)

    def test_accepts_raw_html_string(self) -> None:
        self.assertEqual("x", fragment_to_text("<strong>x</strong>", ansi=False))


class ReadMessageTests(unittest.TestCase):
    def test_single_line(self) -> None:
        lines = iter(["hello"])
        self.assertEqual("hello", read_message(input_fn=lambda prompt: next(lines)))

    def test_trailing_backslash_continues_message(self) -> None:
        lines = iter(["first line\\", "second line\\", "third"])
        prompts: list[str] = []

        def _input(prompt: str) -> str:
            prompts.append(prompt)
            return next(lines)

        message = read_message(input_fn=_input)

        self.assertEqual("first line\nsecond line\nthird", message)
        self.assertEqual(["you> ", "...> ", "...> "], prompts)

    def test_eof_propagates(self) -> None:
        def _input(prompt: str) -> str:
            raise EOFError

        with self.assertRaises(EOFError):
            read_message(input_fn=_input)


class TypingIndicatorTests(unittest.TestCase):
    def test_show_draws_label_and_hide_clears_line(self) -> None:
        stream = io.StringIO()
        indicator = TypingIndicator(label=" typing", stream=stream)
        indicator.show()
        indicator.hide()
        indicator.hide()
        output = stream.getvalue()
        self.assertTrue(output.startswith("\r⠋ typing"))
        self.assertTrue(output.endswith("\r\033[K"))
        self.assertFalse(indicator.active)

    def test_can_be_shown_again_after_hide(self) -> None:
        stream = io.StringIO()
        indicator = TypingIndicator(label=" typing", stream=stream)
        indicator.show()
        indicator.hide()
        indicator.show()
        self.assertTrue(indicator.active)
        indicator.hide()
        self.assertEqual(2, stream.getvalue().count("\r\033[K"))

    def test_indicator_follows_typing_events(self) -> None:
        indicator = TypingIndicator(stream=io.StringIO())
        indicator("typing.changed", {"typing": True})
        self.assertTrue(indicator.active)
        indicator("message.appended", {"index": 1})
        self.assertTrue(indicator.active)
        indicator("typing.changed", {"typing": False})
        self.assertFalse(indicator.active)


if __name__ == "__main__":
    unittest.main()
