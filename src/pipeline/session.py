"""
Match session - the single state object behind the CLI.

Transitions:
    select_topology  -> clears documents, batch run and conversation
    upload_*         -> replaces one document slot
    run              -> replaces the batch run, conversation follows the new focus
    refocus          -> changes focus only, conversation cleared
    ask              -> appends a chat turn pair for the focused result
"""

from typing import Optional, Sequence

from loguru import logger

from batch.orchestrator import BatchOrchestrator
from chat.conversation import Conversation, ConversationManager
from matcher.evaluator import PairEvaluator
from matcher.reasoning import ReasoningClient, resolve_credential
from shared.config import Settings, get_settings
from shared.exceptions import InputPreconditionError
from shared.models import BatchRun, ConversationTurn, Document, Topology


class MatchSession:
    """Owns topology, document slots, the current batch run and its conversation."""

    def __init__(
        self,
        topology: Topology = Topology.ONE_TO_ONE,
        reasoning_client: Optional[ReasoningClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.reasoning_client = reasoning_client or ReasoningClient(self.settings)
        self.orchestrator = BatchOrchestrator(
            PairEvaluator(self.reasoning_client, self.settings), self.settings
        )
        self.conversation_manager = ConversationManager(self.reasoning_client, self.settings)

        self.topology = topology
        self.candidates: tuple[Document, ...] = ()
        self.descriptions: tuple[Document, ...] = ()
        self.batch_run: Optional[BatchRun] = None
        self.conversation = Conversation()
        # Bumped on topology changes and run starts; stale runs are dropped
        self._generation = 0

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return self.conversation.turns

    def select_topology(self, topology: Topology) -> None:
        """Switch topology and reset everything that depends on it."""
        logger.info(f"Topology set to {topology.value}")
        self.topology = topology
        self.candidates = ()
        self.descriptions = ()
        self.batch_run = None
        self.conversation.reset(None)
        self._generation += 1

    def upload_candidates(self, documents: Sequence[Document]) -> None:
        if len(documents) > 1 and not self.topology.allows_many_candidates:
            raise InputPreconditionError(
                f"{self.topology.value} accepts a single resume, got {len(documents)}"
            )
        self.candidates = tuple(documents)

    def upload_descriptions(self, documents: Sequence[Document]) -> None:
        if len(documents) > 1 and not self.topology.allows_many_descriptions:
            raise InputPreconditionError(
                f"{self.topology.value} accepts a single job description, got {len(documents)}"
            )
        self.descriptions = tuple(documents)

    async def run(self, credential: Optional[str] = None) -> Optional[BatchRun]:
        """
        Evaluate the uploaded documents under the current topology.

        Returns:
            The new BatchRun, or None if the session moved on while it ran

        Raises:
            InputPreconditionError: if either slot is empty
            CredentialRequiredError: if no API key is available
        """
        self._generation += 1
        generation = self._generation

        batch_run = await self.orchestrator.run(
            self.topology, self.candidates, self.descriptions, credential
        )

        if generation != self._generation:
            logger.warning("Discarding results of a superseded batch run")
            return None

        self.batch_run = batch_run
        self.conversation.reset(batch_run.focus_id)
        return batch_run

    def refocus(self, result_id: str) -> BatchRun:
        """
        Focus another result of the current batch and clear the conversation.

        Raises:
            InputPreconditionError: if no batch has been run
            UnknownResultError: if the id is not in the batch
        """
        if self.batch_run is None:
            raise InputPreconditionError("Run a match before choosing a result")

        self.batch_run = self.batch_run.refocus(result_id)
        if self.conversation.focus_id != result_id:
            self.conversation.reset(result_id)
        return self.batch_run

    async def ask(self, text: str, credential: Optional[str] = None) -> ConversationTurn:
        """
        Ask the assistant about the focused result.

        Raises:
            InputPreconditionError: if no batch has been run or the text is blank
            CredentialRequiredError: if no API key is available
            TurnInProgressError: if the previous question is still pending
        """
        if self.batch_run is None or self.batch_run.focused is None:
            raise InputPreconditionError("Analyze first, then ask about the result")

        api_key = resolve_credential(credential, self.settings)
        focused = self.batch_run.focused
        candidate, description = self.batch_run.pair_for(focused)

        return await self.conversation_manager.send(
            self.conversation, focused, candidate, description, text, api_key
        )
