"""
Pytest configuration and shared fixtures.
"""

import asyncio
import json
from typing import Callable, Optional, Union

import pytest

from shared.config import Settings
from shared.exceptions import ReasoningServiceError
from shared.models import Document

Reply = Union[str, Exception]


def analysis_json(score=80, skills=None, verdict="Solid backend fit.") -> str:
    """Analysis reply in the shape the matcher asks for."""
    return json.dumps(
        {
            "ai_score_0_to_100": score,
            "missing_skills": skills if skills is not None else ["gRPC"],
            "verdict": verdict,
        }
    )


class FakeReasoningClient:
    """
    Scripted stand-in for ReasoningClient.

    `responder` maps the analysis prompt to a reply string, or to an
    exception instance which is raised instead.
    """

    def __init__(
        self,
        responder: Optional[Callable[[str], Reply]] = None,
        chat_responder: Optional[Callable[[str], Reply]] = None,
        delay: Callable[[str], float] = lambda prompt: 0,
    ):
        self.responder = responder or (lambda prompt: analysis_json())
        self.chat_responder = chat_responder or (lambda text: f"Answer to: {text}")
        self.delay = delay
        self.analyze_calls: list[tuple[str, str]] = []
        self.chat_calls: list[dict] = []

    async def analyze(self, prompt_text: str, credential: str) -> str:
        self.analyze_calls.append((prompt_text, credential))
        await asyncio.sleep(self.delay(prompt_text))
        reply = self.responder(prompt_text)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def chat(self, prior_turns, new_text, context_text, credential) -> str:
        self.chat_calls.append(
            {
                "prior_turns": list(prior_turns),
                "new_text": new_text,
                "context_text": context_text,
                "credential": credential,
            }
        )
        reply = self.chat_responder(new_text)
        if isinstance(reply, Exception):
            raise reply
        return reply


def failing_for(marker: str, otherwise: Reply = None) -> Callable[[str], Reply]:
    """Responder that fails for prompts containing `marker`."""

    def respond(prompt: str) -> Reply:
        if marker in prompt:
            return ReasoningServiceError("LLM request failed", ConnectionError("boom"))
        return otherwise if otherwise is not None else analysis_json()

    return respond


@pytest.fixture
def settings() -> Settings:
    """Settings with an ambient API key and no .env lookup."""
    return Settings(_env_file=None, openai_api_key="test-key")


@pytest.fixture
def keyless_settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="")


@pytest.fixture
def fake_client() -> FakeReasoningClient:
    return FakeReasoningClient()


@pytest.fixture
def resume() -> Document:
    return Document(
        id="resume-1",
        display_name="resume.pdf",
        text="Built scalable APIs using Go and Kubernetes",
    )


@pytest.fixture
def job() -> Document:
    return Document(
        id="job-1",
        display_name="job.pdf",
        text="Looking for a Go developer with Kubernetes and gRPC experience",
    )


@pytest.fixture
def resumes() -> list[Document]:
    return [
        Document(id=f"cand-{i}", display_name=f"candidate_{i}.pdf", text=f"Candidate {i} writes Python and Kubernetes operators")
        for i in range(1, 6)
    ]


@pytest.fixture
def jobs() -> list[Document]:
    return [
        Document(id=f"jd-{i}", display_name=f"job_{i}.txt", text=f"Role {i}: senior Python engineer, Kubernetes required")
        for i in range(1, 4)
    ]
