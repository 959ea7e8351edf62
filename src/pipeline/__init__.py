"""
Pipeline - session state and CLI.
Upload → Match → Rank → Chat in one session.
"""

from .session import MatchSession

__all__ = ["MatchSession"]
