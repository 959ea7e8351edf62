"""
Matcher Service - hybrid resume/job-description matching.

Combines a deterministic keyword-overlap score with an LLM rating
into a single 0-100 fit score per pair.
"""

from .document_loader import load_document, load_documents
from .evaluator import PairEvaluator
from .reasoning import ReasoningClient, resolve_credential

__all__ = [
    "PairEvaluator",
    "ReasoningClient",
    "load_document",
    "load_documents",
    "resolve_credential",
]
