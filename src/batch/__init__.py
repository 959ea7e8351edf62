"""
Batch Service - runs the pair evaluator over a topology and ranks the results.
"""

from .orchestrator import BatchOrchestrator

__all__ = ["BatchOrchestrator"]
