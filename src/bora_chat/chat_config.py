from dataclasses import dataclass, field

from bora_chat.completion_client import DEFAULT_API_URL, DEFAULT_MODEL
from bora_chat.conversation.store import DEFAULT_GREETING
from bora_chat.history_window import HistoryPolicy, WindowHistoryPolicy


@dataclass
class ChatConfig:
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    system_prompt: str = ""
    greeting: str | None = DEFAULT_GREETING
    request_timeout_seconds: float = 60.0
    max_attempts: int = 1
    history_policy: HistoryPolicy = field(default_factory=WindowHistoryPolicy)
