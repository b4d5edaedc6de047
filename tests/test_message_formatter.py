import unittest

from bora_chat.message_formatter import HtmlFragment, MessageFormatter, format_message, linkify_bare_urls

_LINK_ATTRS = 'target="_blank" rel="noopener noreferrer"'


class FormatMessageTests(unittest.TestCase):
    def test_heading_becomes_bold_without_marker(self) -> None:
        html = format_message("### Title").html
        self.assertEqual("<strong>Title</strong>", html)
        self.assertNotIn("#", html)

    def test_heading_without_space(self) -> None:
        self.assertEqual("<strong>Title</strong>", format_message("###Title").html)

    def test_heading_only_spans_its_line(self) -> None:
        html = format_message("### Intro\nbody text").html
        self.assertEqual("<strong>Intro</strong>\nbody text", html)

    def test_double_asterisks_become_bold(self) -> None:
        self.assertEqual("<strong>bold</strong>", format_message("**bold**").html)

    def test_bold_is_non_greedy(self) -> None:
        html = format_message("**a** and **b**").html
        self.assertEqual("<strong>a</strong> and <strong>b</strong>", html)

    def test_markdown_link_becomes_isolated_hyperlink(self) -> None:
        html = format_message("[click](http://a.com)").html
        self.assertEqual(f'<a href="http://a.com" {_LINK_ATTRS}>click</a>', html)
        self.assertEqual(1, html.count("<a "))

    def test_markdown_link_requires_http_target(self) -> None:
        html = format_message("[x](javascript:alert(1))").html
        self.assertNotIn("<a ", html)

    def test_bare_url_becomes_self_labelled_link(self) -> None:
        html = format_message("see http://a.com now").html
        self.assertEqual(f'see <a href="http://a.com" {_LINK_ATTRS}>http://a.com</a> now', html)

    def test_https_url_is_linked(self) -> None:
        html = format_message("docs: https://example.org/path?q=1").html
        self.assertIn('href="https://example.org/path?q=1"', html)

    def test_markdown_link_with_url_label_is_not_double_wrapped(self) -> None:
        html = format_message("[http://a.com](http://a.com)").html
        self.assertEqual(1, html.count("<a "))

    def test_bare_url_pass_does_not_rewrap_existing_links(self) -> None:
        once = format_message("see http://a.com now").html
        self.assertEqual(once, linkify_bare_urls(once))

    def test_mixed_markup(self) -> None:
        html = format_message("### Links\n**Read** [docs](https://d.io) or https://x.io").html
        self.assertIn("<strong>Links</strong>", html)
        self.assertIn("<strong>Read</strong>", html)
        self.assertIn(f'<a href="https://d.io" {_LINK_ATTRS}>docs</a>', html)
        self.assertIn(f'<a href="https://x.io" {_LINK_ATTRS}>https://x.io</a>', html)
        self.assertEqual(2, html.count("<a "))

    def test_raw_html_is_escaped_by_default(self) -> None:
        html = format_message('<script>alert("x")</script> **ok**').html
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)
        self.assertIn("<strong>ok</strong>", html)

    def test_escaping_can_be_disabled_for_trusted_text(self) -> None:
        html = format_message("<em>trusted</em>", escape_html=False).html
        self.assertEqual("<em>trusted</em>", html)

    def test_fragment_str_is_html(self) -> None:
        fragment = format_message("plain")
        self.assertIsInstance(fragment, HtmlFragment)
        self.assertEqual("plain", str(fragment))


class MessageFormatterTests(unittest.TestCase):
    def test_keyword_replacement_runs_before_markup(self) -> None:
        formatter = MessageFormatter(keyword_replacements={"mooseAnkle": "**KEYWORD USED**"})
        html = formatter.format("say mooseAnkle").html
        self.assertEqual("say <strong>KEYWORD USED</strong>", html)

    def test_formatter_without_replacements_matches_function(self) -> None:
        formatter = MessageFormatter()
        self.assertEqual(format_message("**x**"), formatter.format("**x**"))


if __name__ == "__main__":
    unittest.main()
