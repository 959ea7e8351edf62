# Shared module for common utilities, models, and configuration
from .config import Settings, get_settings
from .exceptions import (
    CredentialRequiredError,
    DocumentLoadError,
    InputPreconditionError,
    ReasoningServiceError,
    SprintFitError,
    TurnInProgressError,
    UnknownResultError,
)
from .models import (
    BatchRun,
    ConversationTurn,
    Document,
    MatchResult,
    MatchStatus,
    Side,
    Speaker,
    Topology,
)

__all__ = [
    "Settings",
    "get_settings",
    "SprintFitError",
    "InputPreconditionError",
    "CredentialRequiredError",
    "ReasoningServiceError",
    "DocumentLoadError",
    "UnknownResultError",
    "TurnInProgressError",
    "BatchRun",
    "ConversationTurn",
    "Document",
    "MatchResult",
    "MatchStatus",
    "Side",
    "Speaker",
    "Topology",
]
