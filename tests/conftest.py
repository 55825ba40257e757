"""Test configuration for the game client."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Optional, Union

import pytest

from edugame_client.api import GamePlatformAPI
from edugame_client.remote import FailureKind, RemoteMutationClient, RemoteResult

QueuedResult = Union[RemoteResult, "asyncio.Future[RemoteResult]"]


class FakeRemoteClient(RemoteMutationClient):
    """Scriptable remote authority; unscripted calls succeed with no payload."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._queued: dict[tuple[str, str], list[QueuedResult]] = defaultdict(list)

    def queue(self, method: str, path: str, result: RemoteResult) -> None:
        self._queued[(method, path)].append(result)

    def hold(self, method: str, path: str) -> "asyncio.Future[RemoteResult]":
        """Queue a response the test settles later with ``set_result``."""

        future: asyncio.Future[RemoteResult] = asyncio.get_running_loop().create_future()
        self._queued[(method, path)].append(future)
        return future

    def calls_to(self, method: str, path: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[Any] = None,
        form: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        self.calls.append(
            {
                "method": method,
                "path": path,
                "json": json_body,
                "params": list(params or []),
                "form": form,
                "timeout": timeout,
            }
        )
        queued = self._queued.get((method, path))
        if not queued:
            return RemoteResult.success(None)
        item = queued.pop(0)
        if isinstance(item, asyncio.Future):
            return await item
        return item


QUIZ_ID = "quiz-1"
FETCH_PATH = f"/api/game/game-type/quiz/{QUIZ_ID}/play/public"
CHECK_PATH = f"/api/game/game-type/quiz/{QUIZ_ID}/check"
PLAY_COUNT_PATH = "/api/game/play-count"


def make_quiz(question_ids: tuple[int, ...] = (10, 11, 12)) -> dict[str, Any]:
    return {
        "id": QUIZ_ID,
        "name": "Capitals",
        "description": "Name the capital city",
        "thumbnail_image": None,
        "is_published": True,
        "score_per_question": 10,
        "questions": [
            {
                "question_text": f"Question {qid}",
                "question_image": None,
                "question_index": qid,
                "answers": [
                    {"answer_index": i, "answer_text": f"Option {i}"} for i in range(4)
                ],
            }
            for qid in question_ids
        ],
    }


SCORE = {
    "correct_answers": 2,
    "total_questions": 3,
    "max_score": 30,
    "score": 20,
    "percentage": 66.67,
}


def failed(kind: FailureKind = FailureKind.NETWORK, detail: str = "boom") -> RemoteResult:
    return RemoteResult.failed(kind, detail)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def remote() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture()
def api(remote: FakeRemoteClient) -> GamePlatformAPI:
    return GamePlatformAPI(remote, submit_timeout=60.0)


@pytest.fixture()
def notices() -> list[tuple[str, str]]:
    return []


@pytest.fixture()
def notify(notices: list[tuple[str, str]]):
    def _notify(level: str, message: str) -> None:
        notices.append((level, message))

    return _notify
