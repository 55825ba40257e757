"""Client-side quiz sessions and optimistic mutations for the educational games platform."""

from .api import GamePlatformAPI
from .config import ClientSettings, configure_logging
from .errors import (
    FetchFailure,
    GameClientError,
    InvalidTransition,
    MutationFailure,
    SideEffectFailure,
    SubmitFailure,
)
from .filters import ListFilterQueryBuilder, SortDirection, SortKey
from .library import GameLibrary, ProjectManager
from .optimistic import MutationOutcome, OptimisticMutation, OptimisticMutationController
from .quiz_session import FailedStep, QuizSession, QuizSessionMachine, SessionPhase
from .remote import (
    FailureKind,
    HttpRemoteClient,
    RemoteFailure,
    RemoteMutationClient,
    RemoteResult,
)
from .scoring import FeedbackTier, ScoreCard, ScorePresentation, StarRating, present

__all__ = [
    "GamePlatformAPI",
    "ClientSettings",
    "configure_logging",
    "GameClientError",
    "InvalidTransition",
    "FetchFailure",
    "SubmitFailure",
    "SideEffectFailure",
    "MutationFailure",
    "ListFilterQueryBuilder",
    "SortKey",
    "SortDirection",
    "GameLibrary",
    "ProjectManager",
    "MutationOutcome",
    "OptimisticMutation",
    "OptimisticMutationController",
    "QuizSession",
    "QuizSessionMachine",
    "SessionPhase",
    "FailedStep",
    "FailureKind",
    "RemoteFailure",
    "RemoteResult",
    "RemoteMutationClient",
    "HttpRemoteClient",
    "FeedbackTier",
    "StarRating",
    "ScorePresentation",
    "ScoreCard",
    "present",
]
