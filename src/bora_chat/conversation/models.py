from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "assistant"]
MessageKind = Literal["text", "image"]
ErrorKind = Literal["rate_limited", "service_unavailable", "api_error"]

RATE_LIMITED: ErrorKind = "rate_limited"
SERVICE_UNAVAILABLE: ErrorKind = "service_unavailable"
API_ERROR: ErrorKind = "api_error"

RATE_LIMITED_MESSAGE = (
    "Looks like BoraAI's got too excited and needs a moment. "
    "Let's give it some space and try again after a short break."
)
MAINTENANCE_MESSAGE = "BoraAI might be on maintenance right now. Please check back in a bit."
UNEXPECTED_MESSAGE = "Oops! There was an unexpected hiccup."


@dataclass(frozen=True)
class Message:
    text: str
    sender: Role
    kind: MessageKind = "text"


@dataclass(frozen=True)
class RequestContext:
    system_prompt: str
    prior_messages: tuple[Message, ...]
    new_user_text: str
    model: str


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


CompletionOutcome = Success | Failure
