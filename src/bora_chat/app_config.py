from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from bora_chat.completion_client import DEFAULT_API_URL, DEFAULT_MODEL
from bora_chat.conversation.store import DEFAULT_GREETING

API_KEY_ENV_VAR = "OPENAI_API_KEY"

_DEFAULT_KEYWORD_REPLACEMENTS = {"mooseAnkle": "**KEYWORD USED**"}


@dataclass
class RuntimeEnv:
    api_key: str
    api_key_env_var: str


@dataclass
class AppConfig:
    model: str
    api_url: str
    system_prompt: str | None
    assistant_name: str
    greeting: str
    history_policy_name: str
    max_history_messages: int
    max_history_tokens: int
    request_timeout_seconds: float
    max_attempts: int
    escape_html: bool
    keyword_replacements: dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"
    log_consumers: list | None = None


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def _to_bool(value: object, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def parse_app_config(config: dict) -> AppConfig:
    keyword_replacements = config.get("KeywordReplacements")
    if keyword_replacements is None:
        keyword_replacements = dict(_DEFAULT_KEYWORD_REPLACEMENTS)

    return AppConfig(
        model=config.get("Model", DEFAULT_MODEL),
        api_url=config.get("ApiUrl", DEFAULT_API_URL),
        system_prompt=config.get("SystemPrompt"),
        assistant_name=config.get("AssistantName", "BoraAI"),
        greeting=config.get("Greeting", DEFAULT_GREETING),
        history_policy_name=str(config.get("HistoryPolicy", "window")).strip().lower(),
        max_history_messages=int(config.get("MaxHistoryMessages", 50)),
        max_history_tokens=int(config.get("MaxHistoryTokens", 12_000)),
        request_timeout_seconds=float(config.get("RequestTimeoutSeconds", 60)),
        max_attempts=int(config.get("MaxAttempts", 1)),
        escape_html=_to_bool(config.get("EscapeHtml", True), default=True),
        keyword_replacements={str(k): str(v) for k, v in keyword_replacements.items()},
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env() -> RuntimeEnv:
    return RuntimeEnv(
        api_key=os.environ.get(API_KEY_ENV_VAR, ""),
        api_key_env_var=API_KEY_ENV_VAR,
    )
