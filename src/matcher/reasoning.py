"""
OpenAI-backed reasoning client used for semantic scoring and chat.
"""

from typing import Optional, Sequence

from loguru import logger
from openai import AsyncOpenAI

from shared.config import Settings, get_settings
from shared.exceptions import CredentialRequiredError, ReasoningServiceError
from shared.models import ConversationTurn, Speaker

from .analysis import SYSTEM_PROMPT

CHAT_PRIMER = (
    "Understood. I am ready to answer questions about the candidate's fit "
    "based on this context."
)


def resolve_credential(credential: Optional[str], settings: Optional[Settings] = None) -> str:
    """
    Pick the API key for a call: explicit credential first, then the ambient one.

    Raises:
        CredentialRequiredError: if neither is available
    """
    if credential and credential.strip():
        return credential.strip()

    settings = settings or get_settings()
    if settings.default_credential:
        return settings.default_credential

    raise CredentialRequiredError()


class ReasoningClient:
    """Thin async wrapper over the chat completions API."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._clients: dict[str, AsyncOpenAI] = {}

    def client(self, credential: str) -> AsyncOpenAI:
        """Get or create an OpenAI client for a credential."""
        if credential not in self._clients:
            self._clients[credential] = AsyncOpenAI(
                api_key=credential,
                base_url=self.settings.openai_base_url,
            )
        return self._clients[credential]

    async def _complete(self, messages: list[dict], credential: str, **kwargs) -> str:
        try:
            response = await self.client(credential).chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                temperature=self.settings.openai_temperature,
                max_tokens=self.settings.openai_max_tokens,
                **kwargs,
            )
        except Exception as e:
            raise ReasoningServiceError("LLM request failed", original_error=e) from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content.strip() if content else ""

    async def analyze(self, prompt_text: str, credential: str) -> str:
        """
        Send a scoring prompt.

        Returns:
            Raw reply text, expected to hold the analysis JSON object
        """
        logger.debug(f"Analysis request ({len(prompt_text)} chars)")
        return await self._complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt_text},
            ],
            credential,
            response_format={"type": "json_object"},
        )

    async def chat(
        self,
        prior_turns: Sequence[ConversationTurn],
        new_text: str,
        context_text: str,
        credential: str,
    ) -> str:
        """Answer a question about the focused pair, given the transcript so far."""
        messages = [
            {
                "role": "system",
                "content": (
                    "You are a strict technical recruiter. Here is the Job Description (JD) "
                    f"and Resume context: {context_text}"
                ),
            },
            {"role": "assistant", "content": CHAT_PRIMER},
        ]
        for turn in prior_turns:
            role = "user" if turn.speaker is Speaker.USER else "assistant"
            messages.append({"role": role, "content": turn.text})
        messages.append({"role": "user", "content": new_text})

        logger.debug(f"Chat request with {len(prior_turns)} prior turns")
        return await self._complete(messages, credential)
