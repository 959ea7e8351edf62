"""
Pydantic models for documents, match results and batch runs.
"""

import math
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import UnknownResultError

# Hybrid score weights
LEXICAL_WEIGHT = 0.4
SEMANTIC_WEIGHT = 0.6


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def hybrid_score(lexical_rate: int, semantic_rate: float) -> int:
    """Weighted combination of keyword and AI sub-scores."""
    return round_half_up(lexical_rate * LEXICAL_WEIGHT + semantic_rate * SEMANTIC_WEIGHT)


class Topology(str, Enum):
    """Which documents are paired in a batch."""

    ONE_TO_ONE = "one-to-one"
    MANY_CANDIDATES_TO_ONE_DESCRIPTION = "many-to-one"
    ONE_CANDIDATE_TO_MANY_DESCRIPTIONS = "one-to-many"

    @property
    def varying_side(self) -> "Side":
        """Side whose document changes from one pair to the next."""
        if self is Topology.ONE_CANDIDATE_TO_MANY_DESCRIPTIONS:
            return Side.DESCRIPTION
        return Side.CANDIDATE

    @property
    def allows_many_candidates(self) -> bool:
        return self is Topology.MANY_CANDIDATES_TO_ONE_DESCRIPTION

    @property
    def allows_many_descriptions(self) -> bool:
        return self is Topology.ONE_CANDIDATE_TO_MANY_DESCRIPTIONS


class Side(str, Enum):
    """Role of a document within a pair."""

    CANDIDATE = "candidate"  # Resume-like text
    DESCRIPTION = "description"  # Requirement-like text


class MatchStatus(str, Enum):
    """How a match result was produced."""

    SCORED = "scored"  # Lexical + AI score combined
    IDENTICAL = "identical"  # Same text in both slots, no remote call
    ERROR = "error"  # Remote call failed or returned garbage


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Document(BaseModel):
    """Uploaded file reduced to plain text."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex, description="Opaque document token")
    display_name: str = Field(..., description="Name shown to the user (usually the file name)")
    text: str = Field(default="", description="Extracted text")


class MatchResult(BaseModel):
    """Outcome of evaluating one candidate/description pair."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Id of the varying document")
    display_name: str = Field(..., description="Name of the varying document")
    hybrid_score: int = Field(..., ge=0, le=100)
    missing_skills: tuple[str, ...] = Field(default_factory=tuple)
    matched_keywords: tuple[str, ...] = Field(
        default_factory=tuple, description="Description keywords found in the candidate"
    )
    verdict: str = Field(default="")
    lexical_rate: int = Field(default=0, ge=0, le=100, description="Keyword match rate")
    semantic_rate: float = Field(default=0.0, ge=0, le=100, description="AI rating")

    # Originating pair
    candidate_id: str = Field(...)
    description_id: str = Field(...)
    status: MatchStatus = Field(default=MatchStatus.SCORED)

    @model_validator(mode="after")
    def _check_hybrid_score(self) -> "MatchResult":
        expected = hybrid_score(self.lexical_rate, self.semantic_rate)
        if self.hybrid_score != expected:
            raise ValueError(
                f"hybrid_score {self.hybrid_score} does not match weighted "
                f"sub-scores (expected {expected})"
            )
        return self

    @property
    def band(self) -> str:
        """Coarse fit label used in reports."""
        if self.hybrid_score > 70:
            return "strong"
        if self.hybrid_score > 40:
            return "moderate"
        return "weak"

    @property
    def is_sentinel(self) -> bool:
        return self.status is not MatchStatus.SCORED


class ConversationTurn(BaseModel):
    """One chat message."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str


class BatchRun(BaseModel):
    """Ranked results of one orchestration pass and the focused member."""

    model_config = ConfigDict(frozen=True)

    topology: Topology
    results: tuple[MatchResult, ...] = Field(default_factory=tuple)
    focus_id: Optional[str] = None

    # Documents the run was computed from
    candidates: tuple[Document, ...] = Field(default_factory=tuple)
    descriptions: tuple[Document, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_focus(self) -> "BatchRun":
        if not self.results:
            if self.focus_id is not None:
                raise ValueError("focus_id must be unset for an empty batch")
        elif self.focus_id not in {r.id for r in self.results}:
            raise ValueError(f"focus_id {self.focus_id!r} is not a member of the batch")
        return self

    @classmethod
    def from_results(
        cls,
        topology: Topology,
        results: list[MatchResult],
        candidates: list[Document],
        descriptions: list[Document],
    ) -> "BatchRun":
        """Rank results by hybrid score (stable, highest first) and focus the top one."""
        ranked = sorted(results, key=lambda r: r.hybrid_score, reverse=True)
        return cls(
            topology=topology,
            results=tuple(ranked),
            focus_id=ranked[0].id if ranked else None,
            candidates=tuple(candidates),
            descriptions=tuple(descriptions),
        )

    @property
    def focused(self) -> Optional[MatchResult]:
        if self.focus_id is None:
            return None
        return self.get(self.focus_id)

    def get(self, result_id: str) -> MatchResult:
        for result in self.results:
            if result.id == result_id:
                return result
        raise UnknownResultError(f"No result with id {result_id!r} in this batch")

    def refocus(self, result_id: str) -> "BatchRun":
        """Return a copy focused on another member."""
        self.get(result_id)
        return self.model_copy(update={"focus_id": result_id})

    def pair_for(self, result: MatchResult) -> tuple[Document, Document]:
        """Originating (candidate, description) documents of a result."""
        candidate = next((d for d in self.candidates if d.id == result.candidate_id), None)
        description = next(
            (d for d in self.descriptions if d.id == result.description_id), None
        )
        if candidate is None or description is None:
            raise UnknownResultError(
                f"Documents for result {result.id!r} are not part of this batch"
            )
        return candidate, description
