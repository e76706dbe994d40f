"""Round-robin group chat among fixed participant roles.

Each participant is an AutoGen ``AssistantAgent`` with its own persona; a
``RoundRobinGroupChat`` makes them speak in fixed cyclic order. The run
stops when the turn budget is spent.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Sequence

from autogen_agentchat.agents import AssistantAgent
from autogen_agentchat.messages import TextMessage
from autogen_agentchat.teams import RoundRobinGroupChat
from autogen_core.model_context import BufferedChatCompletionContext
from autogen_core.models import ChatCompletionClient

from rag_workshop.errors import TurnFailed
from rag_workshop.models import ChatTurn, GroupChatResult

logger = logging.getLogger(__name__)

USER_ROLE = "user"
MAX_GROUP_CHAT_TURNS = 6

HISTORY_FULL = "full"
HISTORY_LATEST = "latest"

ANALYST_SYSTEM_MESSAGE = """You are an expert software analyst. Your role is to:
- Analyze the requirements provided by the user
- Propose an appropriate architecture and design pattern
- Identify potential risks and challenges
- Provide a clear technical specification for the Developer
Be concise but precise."""

DEVELOPER_SYSTEM_MESSAGE = """You are a senior software developer. Your role is to:
- Write clean, well structured code
- Follow the best practices and design patterns suggested by the Analyst
- Implement the solution completely
Include comments in the code."""

REVIEWER_SYSTEM_MESSAGE = """You are a meticulous code reviewer. Your role is to:
- Review the code produced by the Developer
- Check correctness, performance and security
- Suggest improvements and refactorings
- Give a final verdict (Approved / Changes requested)
Be constructive in your feedback."""


@dataclass(frozen=True)
class Participant:
    """A named role with a fixed persona instruction."""

    name: str
    instructions: str


def default_team() -> List[Participant]:
    """Analyst, Developer and Reviewer, in speaking order."""
    return [
        Participant(name="Analyst", instructions=ANALYST_SYSTEM_MESSAGE),
        Participant(name="Developer", instructions=DEVELOPER_SYSTEM_MESSAGE),
        Participant(name="Reviewer", instructions=REVIEWER_SYSTEM_MESSAGE),
    ]


def render_transcript(transcript: Sequence[ChatTurn]) -> str:
    """Render the conversation as ``[role]: message`` lines."""
    return "\n".join(f"[{turn.role}]: {turn.message}" for turn in transcript)


class TurnCoordinator:
    """Drives participants in fixed round-robin order for a turn budget."""

    def __init__(
        self,
        model_client: ChatCompletionClient,
        participants: Sequence[Participant],
        history_mode: str = HISTORY_FULL,
    ):
        """
        Args:
            model_client: AutoGen model client shared by every participant.
            participants: Roles in speaking order.
            history_mode: "full" shows each participant the whole conversation,
                "latest" only the previous message.

        Raises:
            ValueError: If the team is empty, names are invalid or repeated,
                or the history mode is unknown.
        """
        if not participants:
            raise ValueError("A group chat needs at least one participant")
        names = [participant.name for participant in participants]
        invalid = [name for name in names if not name.isidentifier() or name == USER_ROLE]
        if invalid:
            raise ValueError(f"Invalid participant names: {', '.join(invalid)}")
        if len(set(names)) != len(names):
            raise ValueError("Participant names must be unique")
        if history_mode not in (HISTORY_FULL, HISTORY_LATEST):
            raise ValueError(f"Unknown history mode: {history_mode}")

        self._model_client = model_client
        self._participants = list(participants)
        self._history_mode = history_mode

    @property
    def participants(self) -> List[Participant]:
        return list(self._participants)

    def _create_agent(self, participant: Participant) -> AssistantAgent:
        model_context = None
        if self._history_mode == HISTORY_LATEST:
            model_context = BufferedChatCompletionContext(buffer_size=1)

        return AssistantAgent(
            name=participant.name,
            model_client=self._model_client,
            system_message=participant.instructions,
            model_context=model_context,
        )

    def create_team(self, max_turns: int) -> RoundRobinGroupChat:
        """
        Create a fresh round-robin team for one run.

        There is no termination condition: the team stops only after
        ``max_turns`` participant messages.
        """
        agents = [self._create_agent(participant) for participant in self._participants]
        return RoundRobinGroupChat(agents, max_turns=max_turns)

    async def run_async(self, initial_message: str, max_turns: int = MAX_GROUP_CHAT_TURNS) -> GroupChatResult:
        """
        Run the group chat.

        Args:
            initial_message: The user's request, seeding the transcript.
            max_turns: Number of participant messages to produce.

        Returns:
            GroupChatResult whose conversation holds the seed message followed
            by exactly ``max_turns`` participant messages.

        Raises:
            ValueError: If the message is empty or max_turns is not positive.
            TurnFailed: If a participant cannot produce its message.
        """
        if not initial_message or not initial_message.strip():
            raise ValueError("Initial message must not be empty")
        if max_turns < 1:
            raise ValueError(f"max_turns must be positive, got {max_turns}")

        team = self.create_team(max_turns)
        speakers = {participant.name for participant in self._participants}
        transcript = [ChatTurn(role=USER_ROLE, message=initial_message)]

        try:
            async for event in team.run_stream(task=initial_message):
                if isinstance(event, TextMessage) and event.source in speakers:
                    transcript.append(ChatTurn(role=event.source, message=event.content))
                    logger.debug(f"Turn {len(transcript) - 1}/{max_turns}: {event.source}")
        except Exception as e:
            completed = len(transcript) - 1
            participant = self._participants[completed % len(self._participants)]
            raise TurnFailed(
                f"{participant.name} failed on turn {completed + 1} of {max_turns}: {e}"
            ) from e

        logger.info(f"Group chat finished after {len(transcript) - 1} turns")
        return GroupChatResult(
            question=initial_message,
            final_response=transcript[-1].message,
            conversation=transcript,
        )

    def run(self, initial_message: str, max_turns: int = MAX_GROUP_CHAT_TURNS) -> GroupChatResult:
        """Blocking wrapper around :meth:`run_async` for callers without an event loop."""
        return asyncio.run(self.run_async(initial_message, max_turns=max_turns))
