from pydantic import BaseModel
from typing import Any, Dict, List, Union
from enum import Enum


class TurnRole(str, Enum):
    """Conversation turn roles."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationMessage(BaseModel):
    """Message format accepted by the wrapped provider calls."""

    role: TurnRole
    content: Union[str, List[Any]]


MessageLike = Union[ConversationMessage, Dict[str, Any]]
