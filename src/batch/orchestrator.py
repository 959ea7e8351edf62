"""
Batch orchestration across the three pairing topologies.
"""

import asyncio
import time
from typing import Optional, Sequence

from loguru import logger

from matcher.evaluator import PairEvaluator
from matcher.reasoning import resolve_credential
from shared.config import Settings, get_settings
from shared.exceptions import InputPreconditionError
from shared.models import BatchRun, Document, MatchResult, MatchStatus, Topology


def plan_pairs(
    topology: Topology,
    candidates: Sequence[Document],
    descriptions: Sequence[Document],
) -> list[tuple[Document, Document]]:
    """
    List the (candidate, description) pairs a topology evaluates, in upload order.

    Raises:
        InputPreconditionError: if either side has no documents
    """
    if not candidates:
        raise InputPreconditionError("Upload at least one resume before running a match")
    if not descriptions:
        raise InputPreconditionError("Upload at least one job description before running a match")

    if not topology.allows_many_candidates and len(candidates) > 1:
        logger.warning(
            f"{topology.value}: using {candidates[0].display_name}, "
            f"ignoring {len(candidates) - 1} extra resume(s)"
        )
    if not topology.allows_many_descriptions and len(descriptions) > 1:
        logger.warning(
            f"{topology.value}: using {descriptions[0].display_name}, "
            f"ignoring {len(descriptions) - 1} extra job description(s)"
        )

    if topology is Topology.MANY_CANDIDATES_TO_ONE_DESCRIPTION:
        return [(candidate, descriptions[0]) for candidate in candidates]
    if topology is Topology.ONE_CANDIDATE_TO_MANY_DESCRIPTIONS:
        return [(candidates[0], description) for description in descriptions]
    return [(candidates[0], descriptions[0])]


class BatchOrchestrator:
    """
    Evaluates every pair of a topology and ranks the outcome.

    Pairs run one at a time by default; with matcher_max_concurrency > 1 they
    fan out, but results are slotted by upload index so ranking is unaffected.
    """

    def __init__(
        self,
        evaluator: PairEvaluator,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.evaluator = evaluator

    async def run(
        self,
        topology: Topology,
        candidates: Sequence[Document],
        descriptions: Sequence[Document],
        credential: Optional[str] = None,
    ) -> BatchRun:
        """
        Run one orchestration pass.

        Raises:
            InputPreconditionError: if either side has no documents
            CredentialRequiredError: if no API key is available
        """
        pairs = plan_pairs(topology, candidates, descriptions)
        # Identical pairs never reach the reasoning client
        needs_client = any(c.text.strip() != d.text.strip() for c, d in pairs)
        api_key = resolve_credential(credential, self.settings) if needs_client else ""
        varying = topology.varying_side

        logger.info(f"Starting {topology.value} batch with {len(pairs)} pair(s)")
        start = time.time()

        slots: list[Optional[MatchResult]] = [None] * len(pairs)
        semaphore = asyncio.Semaphore(self.settings.matcher_max_concurrency)

        async def evaluate_slot(index: int, candidate: Document, description: Document) -> None:
            async with semaphore:
                slots[index] = await self.evaluator.evaluate(
                    candidate, description, varying, api_key
                )

        if self.settings.matcher_max_concurrency == 1:
            for index, (candidate, description) in enumerate(pairs):
                await evaluate_slot(index, candidate, description)
        else:
            await asyncio.gather(
                *(evaluate_slot(i, c, d) for i, (c, d) in enumerate(pairs))
            )

        results = [result for result in slots if result is not None]
        batch = BatchRun.from_results(
            topology,
            results,
            candidates=list(candidates),
            descriptions=list(descriptions),
        )

        failed = sum(1 for r in results if r.status is MatchStatus.ERROR)
        unscored = sum(1 for r in results if r.is_sentinel)
        logger.info(
            f"Batch complete: {len(results)} result(s), {unscored} unscored ({failed} failed), "
            f"top={batch.focused.display_name if batch.focused else '-'}, "
            f"duration={time.time() - start:.1f}s"
        )
        return batch
