"""Message-level types shared by both normalizers."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TokenUsage:
    """Per-event usage as reported by the source. None means not reported."""
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: dict) -> "TokenUsage":
        return cls(
            input_tokens=_as_count(raw.get("input_tokens")),
            output_tokens=_as_count(raw.get("output_tokens")),
            cache_read_input_tokens=_as_count(raw.get("cache_read_input_tokens")),
            cache_creation_input_tokens=_as_count(raw.get("cache_creation_input_tokens")),
        )


@dataclass(frozen=True)
class ConversationMessage:
    role: MessageRole
    timestamp: str
    id: str
    content: str = ""
    usage: Optional[TokenUsage] = None


def _as_count(value) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)
