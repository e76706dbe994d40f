"""Chat module: grounded answers, group chat and the simple assistant."""

from rag_workshop.chat.answer_synthesizer import (
    DOCUMENT_QA_INSTRUCTIONS,
    NO_DOCUMENTS_ANSWER,
    AnswerSynthesizer,
    build_rag_prompt,
    unique_sources,
)
from rag_workshop.chat.assistant import ChatAssistant
from rag_workshop.chat.group_chat import (
    Participant,
    TurnCoordinator,
    default_team,
    render_transcript,
)

__all__ = [
    "DOCUMENT_QA_INSTRUCTIONS",
    "NO_DOCUMENTS_ANSWER",
    "AnswerSynthesizer",
    "ChatAssistant",
    "Participant",
    "TurnCoordinator",
    "build_rag_prompt",
    "default_team",
    "render_transcript",
    "unique_sources",
]
