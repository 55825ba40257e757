from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .remote import RemoteFailure


class GameClientError(Exception):
    """Base class for failures scoped to one session or one entity."""

    default_message = "Request failed."

    def __init__(self, message: Optional[str] = None, *, failure: Optional["RemoteFailure"] = None):
        self.failure = failure
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidTransition(GameClientError):
    default_message = "Transition not allowed in the current phase."


class FetchFailure(GameClientError):
    """The quiz could not be loaded; the session never reaches Playing."""

    default_message = "Failed to load quiz."


class SubmitFailure(GameClientError):
    """The answer set was not scored; recorded answers are kept for a resubmit."""

    default_message = "Failed to submit quiz."


class SideEffectFailure(GameClientError):
    default_message = "Failed to update play count."


class MutationFailure(GameClientError):
    """An optimistic change was rejected and rolled back."""

    default_message = "Failed to update. Please try again."
