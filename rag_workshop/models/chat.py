"""Answer and group chat transcript models."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Answer:
    """Grounded answer produced from retrieved chunks."""

    question: str
    answer: str
    sources: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChatTurn:
    """A single message in a group chat transcript."""

    role: str
    message: str


@dataclass(frozen=True)
class GroupChatResult:
    """Outcome of a round-robin group chat run."""

    question: str
    final_response: str
    conversation: List[ChatTurn]
