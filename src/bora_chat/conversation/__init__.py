from bora_chat.conversation.models import (
    API_ERROR,
    MAINTENANCE_MESSAGE,
    RATE_LIMITED,
    RATE_LIMITED_MESSAGE,
    SERVICE_UNAVAILABLE,
    UNEXPECTED_MESSAGE,
    CompletionOutcome,
    Failure,
    Message,
    RequestContext,
    Success,
)
from bora_chat.conversation.store import DEFAULT_GREETING, ConversationStore

__all__ = [
    "API_ERROR",
    "DEFAULT_GREETING",
    "MAINTENANCE_MESSAGE",
    "RATE_LIMITED",
    "RATE_LIMITED_MESSAGE",
    "SERVICE_UNAVAILABLE",
    "UNEXPECTED_MESSAGE",
    "CompletionOutcome",
    "ConversationStore",
    "Failure",
    "Message",
    "RequestContext",
    "Success",
]
