from collections.abc import Callable

CONTINUATION_MARKER = "\\"


def read_message(
    prompt: str = "you> ",
    continuation_prompt: str = "...> ",
    input_fn: Callable[[str], str] = input,
) -> str:
    """Read one message from the terminal.

    Enter sends the message; a line ending in a backslash continues on the
    next line, the terminal counterpart of Shift+Enter in a textarea.
    """
    lines: list[str] = []
    line = input_fn(prompt)
    while line.endswith(CONTINUATION_MARKER):
        lines.append(line[: -len(CONTINUATION_MARKER)])
        line = input_fn(continuation_prompt)
    lines.append(line)
    return "\n".join(lines)
