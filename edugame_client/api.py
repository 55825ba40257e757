from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .remote import FailureKind, RemoteMutationClient, RemoteResult
from .schemas import (
    GameSummary,
    GameTemplate,
    LikeIn,
    PlayCountIn,
    Project,
    QuizData,
    ScoreResult,
    SubmitAnswerIn,
    SubmitQuizIn,
)

logger = logging.getLogger("edugame_client.api")

_games = TypeAdapter(list[GameSummary])
_templates = TypeAdapter(list[GameTemplate])
_projects = TypeAdapter(list[Project])


def _parse(result: RemoteResult, adapter: Any) -> RemoteResult:
    if not result.ok:
        return result
    try:
        if isinstance(adapter, TypeAdapter):
            data = adapter.validate_python(result.data)
        else:
            data = adapter.model_validate(result.data)
    except ValidationError as e:
        logger.error("Unexpected response shape: %s", e)
        return RemoteResult.failed(FailureKind.SERVER, "Malformed response", result.status_code)
    return RemoteResult.success(data, result.status_code or 200)


class GamePlatformAPI:
    """Typed calls for the game platform endpoints."""

    def __init__(self, client: RemoteMutationClient, *, submit_timeout: Optional[float] = None) -> None:
        self.client = client
        self.submit_timeout = submit_timeout

    # -------------------------
    # Quiz
    # -------------------------

    async def fetch_quiz(self, quiz_id: str) -> RemoteResult:
        result = await self.client.request("GET", f"/api/game/game-type/quiz/{quiz_id}/play/public")
        return _parse(result, QuizData)

    async def submit_quiz(self, quiz_id: str, answers: Sequence[SubmitAnswerIn]) -> RemoteResult:
        payload = SubmitQuizIn(answers=list(answers))
        result = await self.client.request(
            "POST",
            f"/api/game/game-type/quiz/{quiz_id}/check",
            json_body=payload.model_dump(),
            timeout=self.submit_timeout,
        )
        return _parse(result, ScoreResult)

    async def add_play_count(self, game_id: str) -> RemoteResult:
        payload = PlayCountIn(game_id=game_id)
        return await self.client.request("POST", "/api/game/play-count", json_body=payload.model_dump())

    # -------------------------
    # Games
    # -------------------------

    async def list_games(self, params: Sequence[tuple[str, str]] = ()) -> RemoteResult:
        result = await self.client.request("GET", "/api/game", params=params)
        return _parse(result, _games)

    async def list_templates(self) -> RemoteResult:
        result = await self.client.request("GET", "/api/game/template")
        return _parse(result, _templates)

    async def set_like(self, game_id: str, is_like: bool) -> RemoteResult:
        payload = LikeIn(game_id=game_id, is_like=is_like)
        return await self.client.request("POST", "/api/game/like", json_body=payload.model_dump())

    # -------------------------
    # Projects
    # -------------------------

    async def list_my_projects(self) -> RemoteResult:
        result = await self.client.request("GET", "/api/auth/me/game")
        return _parse(result, _projects)

    async def set_published(self, slug: str, game_id: str, publish: bool) -> RemoteResult:
        result = await self.client.request(
            "PATCH",
            f"/api/game/game-type/{slug}/{game_id}",
            form={"is_publish": "true" if publish else "false"},
        )
        if result.ok and result.status_code != 200:
            return RemoteResult.failed(FailureKind.SERVER, "Failed to update status.", result.status_code)
        return result

    async def delete_project(self, slug: str, game_id: str) -> RemoteResult:
        return await self.client.request("DELETE", f"/api/game/game-type/{slug}/{game_id}")
