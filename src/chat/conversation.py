"""
Contextual chat about the focused match result.
"""

from typing import Optional

from loguru import logger

from matcher.analysis import truncate
from matcher.reasoning import ReasoningClient
from shared.config import Settings, get_settings
from shared.exceptions import (
    InputPreconditionError,
    ReasoningServiceError,
    TurnInProgressError,
)
from shared.models import ConversationTurn, Document, MatchResult, Speaker

CHAT_ERROR_REPLY = (
    "Sorry, I couldn't reach the AI service just now. Please try asking again."
)


class Conversation:
    """Append-only transcript scoped to one focused result."""

    def __init__(self, focus_id: Optional[str] = None):
        self.focus_id = focus_id
        self._turns: list[ConversationTurn] = []
        # Bumped on every reset; replies from an older epoch are dropped
        self._epoch = 0
        self._pending_epoch: Optional[int] = None

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    @property
    def busy(self) -> bool:
        return self._pending_epoch == self._epoch

    def reset(self, focus_id: Optional[str]) -> None:
        """Clear the transcript and re-scope it to another result."""
        self.focus_id = focus_id
        self._turns = []
        self._epoch += 1

    def begin_turn(self, user_text: str) -> int:
        """Append the user turn and mark a reply as pending; returns the epoch it belongs to."""
        if self.busy:
            raise TurnInProgressError("Wait for the previous answer before asking again")
        self._pending_epoch = self._epoch
        self._turns.append(ConversationTurn(speaker=Speaker.USER, text=user_text))
        return self._epoch

    def finish_turn(self, epoch: int, reply: Optional[ConversationTurn]) -> bool:
        """
        Clear the pending mark and append the reply if the transcript was not reset meanwhile.

        Returns:
            True if the reply was appended
        """
        if self._pending_epoch == epoch:
            self._pending_epoch = None
        if reply is None or epoch != self._epoch:
            return False
        self._turns.append(reply)
        return True

    def __len__(self) -> int:
        return len(self._turns)


def build_context(candidate: Document, description: Document, budget: int) -> str:
    return (
        f"JD: {truncate(description.text, budget)}... "
        f"Resume: {truncate(candidate.text, budget)}..."
    )


class ConversationManager:
    """Sends chat turns to the reasoning client, one at a time per conversation."""

    def __init__(
        self,
        reasoning_client: ReasoningClient,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.reasoning_client = reasoning_client

    async def send(
        self,
        conversation: Conversation,
        focused: MatchResult,
        candidate: Document,
        description: Document,
        user_text: str,
        credential: str,
    ) -> ConversationTurn:
        """
        Append the user's turn, then the assistant's reply.

        Returns:
            The assistant turn (an apology if the AI service failed)

        Raises:
            InputPreconditionError: blank text or conversation scoped to another result
            TurnInProgressError: a previous turn is still awaiting its reply
        """
        if not user_text.strip():
            raise InputPreconditionError("Message is empty")
        if conversation.focus_id != focused.id:
            raise InputPreconditionError(
                f"Conversation is scoped to {conversation.focus_id!r}, not {focused.id!r}"
            )

        prior_turns = conversation.turns
        epoch = conversation.begin_turn(user_text)
        context = build_context(
            candidate, description, self.settings.chat_context_char_budget
        )

        turn: Optional[ConversationTurn] = None
        try:
            try:
                reply = await self.reasoning_client.chat(
                    prior_turns, user_text, context, credential
                )
            except ReasoningServiceError as e:
                logger.error(f"Chat reply failed for {focused.display_name}: {e}")
                reply = ""
            turn = ConversationTurn(speaker=Speaker.ASSISTANT, text=reply or CHAT_ERROR_REPLY)
        finally:
            appended = conversation.finish_turn(epoch, turn)

        if not appended:
            logger.warning(
                f"Focus moved away from {focused.display_name} while waiting, discarding reply"
            )
        else:
            logger.debug(f"Chat turn {len(conversation) // 2} for {focused.display_name}")
        return turn
