import sys
import threading
from typing import TextIO

_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
_FRAME_SECONDS = 0.08
_CLEAR_LINE = "\r\033[K"


class TypingIndicator:
    """Store listener that animates "<name> is typing..." while the typing flag is set.

    Each ``show`` starts a fresh animation thread, so the indicator can be shown
    and hidden any number of times over a session.
    """

    def __init__(self, label: str = " BoraAI is typing...", stream: TextIO | None = None):
        self._label = label
        self._stream = stream or sys.stdout
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def __call__(self, event_type: str, payload: dict) -> None:
        if event_type != "typing.changed":
            return
        if payload["typing"]:
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        if self._thread is not None:
            return
        self._draw(0)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._animate, args=(self._stop,), daemon=True)
        self._thread.start()

    def hide(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self._stop = None
        self._write(_CLEAR_LINE)

    def _animate(self, stop: threading.Event) -> None:
        frame = 1
        while not stop.wait(_FRAME_SECONDS):
            self._draw(frame)
            frame += 1

    def _draw(self, frame: int) -> None:
        self._write("\r" + _FRAMES[frame % len(_FRAMES)] + self._label)

    def _write(self, text: str) -> None:
        try:
            self._stream.write(text)
            self._stream.flush()
        except (UnicodeEncodeError, OSError):
            pass  # Terminal can't draw the frames; the reply still prints.
