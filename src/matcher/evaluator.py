"""
Scores one candidate/description pair by combining keyword overlap with an AI rating.
"""

from typing import Optional

from loguru import logger

from shared.config import Settings, get_settings
from shared.exceptions import ReasoningServiceError
from shared.models import (
    Document,
    MatchResult,
    MatchStatus,
    Side,
    hybrid_score,
    round_half_up,
)

from . import lexical
from .analysis import Malformed, build_analysis_prompt, parse_analysis
from .reasoning import ReasoningClient

IDENTICAL_SKILL = "Identical Files Detected"
IDENTICAL_VERDICT = (
    "The resume and the job description contain the same text. "
    "Check that each file was uploaded into the right slot."
)
ERROR_SKILL = "Error"
ERROR_VERDICT = "AI analysis failed. Check your API key and try again."


class PairEvaluator:
    """Produces a MatchResult for exactly one pair; never raises on remote failure."""

    def __init__(
        self,
        reasoning_client: ReasoningClient,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.reasoning_client = reasoning_client

    @staticmethod
    def _sentinel(
        candidate: Document,
        description: Document,
        varying: Side,
        status: MatchStatus,
        skill: str,
        verdict: str,
    ) -> MatchResult:
        subject = candidate if varying is Side.CANDIDATE else description
        return MatchResult(
            id=subject.id,
            display_name=subject.display_name,
            hybrid_score=0,
            missing_skills=(skill,),
            verdict=verdict,
            lexical_rate=0,
            semantic_rate=0.0,
            candidate_id=candidate.id,
            description_id=description.id,
            status=status,
        )

    async def evaluate(
        self,
        candidate: Document,
        description: Document,
        varying: Side,
        credential: str,
    ) -> MatchResult:
        """
        Evaluate a pair.

        Args:
            candidate: Resume-like document
            description: Requirement-like document
            varying: Side whose id and name the result carries
            credential: Resolved API key

        Returns:
            Scored MatchResult, or a sentinel for identical inputs and failures
        """
        if candidate.text.strip() == description.text.strip():
            logger.warning(
                f"Identical text in {candidate.display_name} and {description.display_name}, "
                "skipping AI analysis"
            )
            return self._sentinel(
                candidate, description, varying,
                MatchStatus.IDENTICAL, IDENTICAL_SKILL, IDENTICAL_VERDICT,
            )

        lexical_rate = round_half_up(lexical.score(candidate.text, description.text))

        prompt = build_analysis_prompt(
            candidate.text, description.text, self.settings.analysis_char_budget
        )
        try:
            raw = await self.reasoning_client.analyze(prompt, credential)
        except ReasoningServiceError as e:
            logger.error(f"AI analysis failed for {candidate.display_name}: {e}")
            return self._sentinel(
                candidate, description, varying,
                MatchStatus.ERROR, ERROR_SKILL, ERROR_VERDICT,
            )

        outcome = parse_analysis(raw)
        if isinstance(outcome, Malformed):
            logger.error(
                f"Unusable AI analysis for {candidate.display_name}: {outcome.reason}"
            )
            logger.debug(f"Raw AI reply: {(outcome.raw or '')[:500]!r}")
            return self._sentinel(
                candidate, description, varying,
                MatchStatus.ERROR, ERROR_SKILL, ERROR_VERDICT,
            )

        subject = candidate if varying is Side.CANDIDATE else description
        result = MatchResult(
            id=subject.id,
            display_name=subject.display_name,
            hybrid_score=hybrid_score(lexical_rate, outcome.semantic_score),
            missing_skills=outcome.missing_skills,
            matched_keywords=lexical.matched_keywords(candidate.text, description.text),
            verdict=outcome.verdict,
            lexical_rate=lexical_rate,
            semantic_rate=outcome.semantic_score,
            candidate_id=candidate.id,
            description_id=description.id,
        )

        logger.info(
            f"Matched {candidate.display_name} against {description.display_name}: "
            f"score={result.hybrid_score} (keywords={lexical_rate}, ai={outcome.semantic_score:g}), "
            f"matched: {', '.join(result.matched_keywords) or '-'}"
        )
        return result
