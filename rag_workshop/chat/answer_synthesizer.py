"""Grounded answer synthesis over retrieved document chunks."""

import logging
from typing import List, Sequence

from rag_workshop.clients.base import TextCompleter
from rag_workshop.errors import SynthesisFailed
from rag_workshop.models import Answer, RetrievalResult

logger = logging.getLogger(__name__)

CONTEXT_DELIMITER = "\n\n---\n\n"

NO_DOCUMENTS_ANSWER = (
    "No documents found. Upload documents first via /api/documents/upload."
)
NO_ANSWER_AVAILABLE = "No answer available."

DOCUMENT_QA_INSTRUCTIONS = """You are an expert document analysis assistant.
Answer questions based EXCLUSIVELY on the provided context.
DO NOT rely on your own knowledge.
If the context does not contain enough information, say so clearly."""

RAG_PROMPT_TEMPLATE = """Context from the documents:
{context}

User question: {question}

Answer based on the provided context."""


def unique_sources(chunks: Sequence[RetrievalResult]) -> List[str]:
    """Source names in order of first appearance, without duplicates."""
    return list(dict.fromkeys(chunk.source for chunk in chunks))


def build_context(chunks: Sequence[RetrievalResult]) -> str:
    """Join chunk texts in the order received."""
    return CONTEXT_DELIMITER.join(chunk.text for chunk in chunks)


def build_rag_prompt(question: str, chunks: Sequence[RetrievalResult]) -> str:
    """Build the user prompt carrying the retrieved context and the question."""
    return RAG_PROMPT_TEMPLATE.format(context=build_context(chunks), question=question)


class AnswerSynthesizer:
    """Answers a question from retrieved chunks with one completion call."""

    def __init__(self, completer: TextCompleter, instructions: str = DOCUMENT_QA_INSTRUCTIONS):
        self._completer = completer
        self._instructions = instructions

    def answer(self, question: str, retrieved_chunks: Sequence[RetrievalResult]) -> Answer:
        """
        Produce an answer grounded in the retrieved chunks.

        Args:
            question: The user's question.
            retrieved_chunks: Chunks returned by the repository, most relevant first.

        Returns:
            Answer with the completion text and the contributing source names.
            When there is nothing to answer from, the fixed no-documents answer.

        Raises:
            SynthesisFailed: If the completion call fails.
        """
        if not retrieved_chunks or not question.strip():
            return Answer(question=question, answer=NO_DOCUMENTS_ANSWER, sources=[])

        prompt = build_rag_prompt(question, retrieved_chunks)

        try:
            response = self._completer.complete(prompt, instructions=self._instructions)
        except Exception as e:
            raise SynthesisFailed(f"Failed to synthesize answer: {e}") from e

        logger.info(f"Answered question from {len(retrieved_chunks)} chunks")
        return Answer(
            question=question,
            answer=response or NO_ANSWER_AVAILABLE,
            sources=unique_sources(retrieved_chunks),
        )
