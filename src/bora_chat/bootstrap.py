from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from bora_chat.app_config import AppConfig, RuntimeEnv
from bora_chat.chat_config import ChatConfig
from bora_chat.chat_session import ChatSession
from bora_chat.history_window import create_history_policy
from bora_chat.logging_config import setup_logging
from bora_chat.message_formatter import MessageFormatter
from bora_chat.system_prompt import build_system_prompt


@dataclass
class AppRuntime:
    session: ChatSession
    formatter: MessageFormatter
    log_descriptions: list[str]


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    if not env.api_key:
        # Surfaces later as a classified completion failure, not a startup error.
        logger.warning(f"{env.api_key_env_var} is not set; completions will fail until it is provided.")

    history_policy = create_history_policy(
        app.history_policy_name,
        max_messages=app.max_history_messages,
        max_tokens=app.max_history_tokens,
    )

    session = ChatSession(
        ChatConfig(
            model=app.model,
            api_url=app.api_url,
            api_key=env.api_key,
            system_prompt=build_system_prompt(app.system_prompt),
            greeting=app.greeting,
            request_timeout_seconds=app.request_timeout_seconds,
            max_attempts=app.max_attempts,
            history_policy=history_policy,
        )
    )

    formatter = MessageFormatter(
        escape_html=app.escape_html,
        keyword_replacements=app.keyword_replacements,
    )

    return AppRuntime(
        session=session,
        formatter=formatter,
        log_descriptions=log_descriptions,
    )
