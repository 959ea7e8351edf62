"""
Prompt construction and parsing of the reasoning service's analysis reply.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

DEFAULT_VERDICT = "Analysis failed."

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


SYSTEM_PROMPT = """You are a strict technical recruiter. You compare a candidate's resume with a job description and judge how well the candidate fits.

IMPORTANT: Respond ONLY with a single valid JSON object in the exact format requested. No Markdown, no code blocks, no other text."""


@dataclass(frozen=True)
class Parsed:
    """Analysis reply in the expected shape."""

    semantic_score: float
    missing_skills: list[str] = field(default_factory=list)
    verdict: str = DEFAULT_VERDICT


@dataclass(frozen=True)
class Malformed:
    """Analysis reply that could not be used."""

    reason: str
    raw: Optional[str] = None


AnalysisOutcome = Union[Parsed, Malformed]


def truncate(text: str, budget: int) -> str:
    return text[:budget]


def build_analysis_prompt(candidate_text: str, description_text: str, budget: int) -> str:
    """Embed both texts, each cut to `budget` characters, in the scoring instruction."""
    return f"""Analyze this Resume against the Job Description.

RESUME TEXT:
{truncate(candidate_text, budget)}

JOB DESCRIPTION:
{truncate(description_text, budget)}

Output a valid JSON object strictly in this format (do not use Markdown code blocks):
{{"ai_score_0_to_100": <number>, "missing_skills": ["skill1", "skill2", "skill3"], "verdict": "<one ruthless sentence on why they fit or fail>"}}"""


def strip_code_fences(raw: str) -> str:
    return _CODE_FENCE.sub("", raw).strip()


def _coerce_score(value) -> float:
    # bool is an int subclass but never a meaningful score
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0

    if number != number:  # NaN
        return 0.0
    if not 0 <= number <= 100:
        logger.warning(f"AI score {number} out of range, clamping to 0-100")
        number = max(0.0, min(100.0, number))
    return number


def parse_analysis(raw: Optional[str]) -> AnalysisOutcome:
    """
    Parse the analysis reply into Parsed or Malformed.

    A missing or non-numeric score becomes 0 rather than failing the pair.
    """
    if raw is None or not raw.strip():
        return Malformed(reason="Empty response from LLM", raw=raw)

    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return Malformed(reason=f"JSON parse error: {e}", raw=raw)

    if not isinstance(data, dict):
        return Malformed(reason=f"Expected a JSON object, got {type(data).__name__}", raw=raw)

    skills = data.get("missing_skills", [])
    if skills is None:
        skills = []
    if not isinstance(skills, list):
        return Malformed(reason="missing_skills is not a list", raw=raw)

    verdict = data.get("verdict")
    if not isinstance(verdict, str) or not verdict.strip():
        verdict = DEFAULT_VERDICT

    return Parsed(
        semantic_score=_coerce_score(data.get("ai_score_0_to_100")),
        missing_skills=[str(s) for s in skills],
        verdict=verdict.strip(),
    )
