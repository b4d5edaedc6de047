import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO

from loguru import logger

# Erases whatever the typing indicator left on the current terminal line.
_CLEAR_LINE = "\r\033[K"

_CONSOLE_FORMAT = "{level:<8} | {name}:{function}:{line} - {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"

# One log file per chat session; loguru fills in the start time.
_DEFAULT_LOG_PATH = "logs/bora_chat_{time:YYYYMMDD_HHmmss}.log"


def _line_clearing_writer(stream: TextIO | None) -> Callable[[str], None]:
    def write(message: str) -> None:
        out = stream or sys.stderr
        out.write(_CLEAR_LINE + message)
        out.flush()

    return write


def _add_console(config: dict[str, Any], level: str, stream: TextIO | None) -> str:
    logger.add(_line_clearing_writer(stream), level=level, format=_CONSOLE_FORMAT)
    return f"console ({level})"


def _add_file(config: dict[str, Any], level: str, stream: TextIO | None) -> str:
    path = config.get("path", _DEFAULT_LOG_PATH)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        path,
        level=level,
        format=_FILE_FORMAT,
        rotation=config.get("rotation", "10 MB"),
        retention=config.get("retention", 5),
    )
    return f"file ({path}, {level})"


_SINK_BUILDERS: dict[str, Callable[[dict[str, Any], str, TextIO | None], str]] = {
    "console": _add_console,
    "file": _add_file,
}

# The chat owns the terminal, so the console only carries warnings by default.
_DEFAULT_CONSUMERS = [
    {"type": "console", "level": "WARNING"},
    {"type": "file"},
]


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
    *,
    stream: TextIO | None = None,
) -> list[str]:
    """Replace loguru's sinks with the configured ones.

    ``consumers`` entries come from the ``LogConsumers`` config key; each has a
    ``type`` (``console`` or ``file``) and an optional ``level``. File entries
    may also set ``path``, ``rotation`` and ``retention``. Console output goes
    to ``stream`` (stderr by default) and starts by clearing the current line
    so a warning never lands in the middle of the typing indicator.

    Returns a short description of every sink that was added.
    """
    logger.remove()

    descriptions: list[str] = []
    for config in consumers if consumers is not None else _DEFAULT_CONSUMERS:
        sink_type = config.get("type", "")
        builder = _SINK_BUILDERS.get(sink_type)
        if builder is None:
            logger.warning(f"Unknown log consumer type: {sink_type!r}")
            continue
        descriptions.append(builder(config, config.get("level", level), stream))

    return descriptions
