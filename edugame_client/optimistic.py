from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, Sequence, TypeVar

from .errors import MutationFailure
from .remote import FailureKind, RemoteResult

logger = logging.getLogger("edugame_client.optimistic")

E = TypeVar("E")


class MutationOutcome(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    # a later mutation on the same entity owns the displayed state
    SUPERSEDED = "superseded"
    DISCARDED = "discarded"


@dataclass(eq=False)
class OptimisticMutation(Generic[E]):
    entity: E
    key: Hashable
    generation: int
    previous_state: dict[str, Any]
    speculative_state: dict[str, Any]
    outcome: MutationOutcome = MutationOutcome.PENDING
    error: Optional[MutationFailure] = None
    result: Optional[RemoteResult] = None

    @property
    def pending(self) -> bool:
        return self.outcome is MutationOutcome.PENDING


@dataclass
class _Track:
    baseline: dict[str, Any]
    latest: int = 0
    confirmed: int = 0
    in_flight: int = 0
    # generation of the last latest-mutation rollback
    rolled_back: int = 0


@dataclass
class OptimisticMutationController(Generic[E]):
    """Apply a change locally, confirm it remotely, then commit or roll back.

    ``fields`` names the attributes that make up the snapshot. Mutations on
    the same entity are correlated by generation: only the most recent one
    may touch the entity when it settles, and a rollback restores the last
    state the server confirmed. An earlier success that lands after that
    rollback replaces the restored state with its own.
    """

    fields: Sequence[str]
    key: Callable[[Any], Hashable] = id
    name: str = "mutation"
    _tracks: dict[Hashable, _Track] = field(default_factory=dict, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    def snapshot(self, entity: E) -> dict[str, Any]:
        return {f: copy.deepcopy(getattr(entity, f)) for f in self.fields}

    def restore(self, entity: E, state: dict[str, Any]) -> None:
        for f, value in state.items():
            setattr(entity, f, copy.deepcopy(value))

    def has_pending(self, entity: E) -> bool:
        track = self._tracks.get(self.key(entity))
        return bool(track and track.in_flight)

    def begin(self, entity: E, transform: Callable[[E], None]) -> OptimisticMutation[E]:
        """Snapshot ``entity`` and apply ``transform`` to it synchronously."""
        k = self.key(entity)
        previous = self.snapshot(entity)
        track = self._tracks.get(k)
        if track is None:
            track = self._tracks[k] = _Track(baseline=previous)

        self._generation += 1
        track.latest = self._generation
        track.in_flight += 1

        transform(entity)
        return OptimisticMutation(
            entity=entity,
            key=k,
            generation=self._generation,
            previous_state=previous,
            speculative_state=self.snapshot(entity),
        )

    def settle(
        self,
        mutation: OptimisticMutation[E],
        result: RemoteResult,
        *,
        merge: Optional[Callable[[E, Any], None]] = None,
    ) -> MutationOutcome:
        if not mutation.pending:
            return mutation.outcome
        mutation.result = result
        if not result.ok:
            mutation.error = MutationFailure(result.failure.detail, failure=result.failure)

        track = self._tracks.get(mutation.key)
        if self._closed or track is None:
            mutation.outcome = MutationOutcome.DISCARDED
            return mutation.outcome

        track.in_flight -= 1
        is_latest = mutation.generation == track.latest

        if result.ok:
            confirms_newer = mutation.generation > track.confirmed
            if confirms_newer:
                track.baseline = mutation.speculative_state
                track.confirmed = mutation.generation
            # the entity shows a baseline that this success just replaced
            shows_stale_baseline = confirms_newer and track.rolled_back == track.latest
            if is_latest or shows_stale_baseline:
                if shows_stale_baseline:
                    self.restore(mutation.entity, track.baseline)
                if merge is not None:
                    merge(mutation.entity, result.data)
                mutation.outcome = MutationOutcome.COMMITTED
            else:
                mutation.outcome = MutationOutcome.SUPERSEDED
        elif is_latest:
            self.restore(mutation.entity, track.baseline)
            track.rolled_back = mutation.generation
            mutation.outcome = MutationOutcome.ROLLED_BACK
            logger.warning("%s rolled back: %s", self.name, result.failure.detail)
        else:
            mutation.outcome = MutationOutcome.SUPERSEDED
            logger.info("%s failed after being superseded: %s", self.name, result.failure.detail)

        if track.in_flight == 0:
            del self._tracks[mutation.key]
        return mutation.outcome

    async def apply(
        self,
        entity: E,
        transform: Callable[[E], None],
        remote_call: Callable[[], Awaitable[RemoteResult]],
        *,
        merge: Optional[Callable[[E, Any], None]] = None,
    ) -> OptimisticMutation[E]:
        mutation = self.begin(entity, transform)
        try:
            result = await remote_call()
        except BaseException:
            self.settle(mutation, RemoteResult.failed(FailureKind.NETWORK, "Request aborted"))
            raise
        self.settle(mutation, result, merge=merge)
        return mutation

    def close(self) -> None:
        """Forget in-flight mutations; their responses no longer touch entities."""
        self._closed = True
        self._tracks.clear()
