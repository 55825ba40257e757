from __future__ import annotations

import logging
from typing import Callable, Optional

from .api import GamePlatformAPI
from .errors import InvalidTransition
from .filters import ListFilterQueryBuilder
from .optimistic import MutationOutcome, OptimisticMutation, OptimisticMutationController
from .schemas import GameSummary, GameTemplate, Project

logger = logging.getLogger("edugame_client.library")

Notify = Callable[[str, str], None]


def _normalize_game(game: GameSummary) -> GameSummary:
    game.total_liked = game.total_liked or 0
    game.total_played = game.total_played or 0
    game.is_liked = bool(game.is_game_liked)
    return game


def _flip_like(game: GameSummary) -> None:
    game.is_liked = not game.is_liked
    game.total_liked = game.total_liked + 1 if game.is_liked else game.total_liked - 1


# -------------------------
# Browse + like
# -------------------------

class GameLibrary:
    def __init__(
        self,
        api: GamePlatformAPI,
        *,
        authenticated: bool,
        query: Optional[ListFilterQueryBuilder] = None,
        notify: Optional[Notify] = None,
    ) -> None:
        self.api = api
        self.authenticated = authenticated
        self.query = query or ListFilterQueryBuilder()
        self.games: list[GameSummary] = []
        self.templates: list[GameTemplate] = []
        self.error: Optional[str] = None
        self.likes: OptimisticMutationController[GameSummary] = OptimisticMutationController(
            fields=("is_liked", "total_liked"), name="like"
        )
        self._notify = notify

    def get(self, game_id: str) -> Optional[GameSummary]:
        return next((g for g in self.games if g.id == game_id), None)

    async def load_templates(self) -> list[GameTemplate]:
        result = await self.api.list_templates()
        if not result.ok:
            logger.error("Failed to fetch game templates: %s", result.failure.detail)
            return self.templates
        self.templates = result.data
        return self.templates

    async def refresh(self) -> list[GameSummary]:
        self.error = None
        result = await self.api.list_games(self.query.to_params())
        if not result.ok:
            logger.error("Fetch error: %s", result.failure.detail)
            self.error = "Failed to fetch games. Please try again later."
            return self.games
        self.games = [_normalize_game(g) for g in result.data]
        return self.games

    async def toggle_like(self, game_id: str) -> Optional[OptimisticMutation[GameSummary]]:
        if not self.authenticated:
            raise InvalidTransition("Sign in to like games.")
        game = self.get(game_id)
        if game is None:
            return None

        desired = not game.is_liked
        mutation = await self.likes.apply(
            game,
            _flip_like,
            lambda: self.api.set_like(game_id, desired),
        )
        if mutation.outcome is MutationOutcome.ROLLED_BACK:
            logger.error("Failed to like game %s: %s", game_id, mutation.error)
            self._emit("error", "Failed to update like. Please try again.")
        return mutation

    def _emit(self, level: str, message: str) -> None:
        if self._notify is not None:
            self._notify(level, message)


# -------------------------
# Creator projects
# -------------------------

class ProjectManager:
    def __init__(self, api: GamePlatformAPI, *, notify: Optional[Notify] = None) -> None:
        self.api = api
        self.projects: list[Project] = []
        self.error: Optional[str] = None
        self.publishing: OptimisticMutationController[Project] = OptimisticMutationController(
            fields=("is_published",), name="publish"
        )
        self._notify = notify

    def get(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def search(self, term: str) -> list[Project]:
        needle = (term or "").strip().lower()
        if not needle:
            return list(self.projects)
        return [p for p in self.projects if needle in p.name.lower()]

    async def refresh(self) -> list[Project]:
        self.error = None
        result = await self.api.list_my_projects()
        if not result.ok:
            logger.error("Failed to fetch projects: %s", result.failure.detail)
            self.error = "Failed to fetch projects. Please try again later."
            return self.projects
        self.projects = result.data
        return self.projects

    async def set_published(self, project_id: str, publish: bool) -> Optional[OptimisticMutation[Project]]:
        project = self.get(project_id)
        if project is None:
            return None

        def _apply(p: Project) -> None:
            p.is_published = publish

        mutation = await self.publishing.apply(
            project,
            _apply,
            lambda: self.api.set_published(project.slug, project_id, publish),
        )
        if mutation.outcome is MutationOutcome.COMMITTED:
            self._emit("success", "Published successfully" if publish else "Unpublished successfully")
        elif mutation.outcome is MutationOutcome.ROLLED_BACK:
            logger.error("Failed to update publish status of %s: %s", project_id, mutation.error)
            self._emit("error", "Failed to update status. Please try again.")
        return mutation

    async def delete(self, project_id: str) -> bool:
        project = self.get(project_id)
        if project is None:
            return False

        result = await self.api.delete_project(project.slug, project_id)
        if not result.ok:
            logger.error("Failed to delete project %s: %s", project_id, result.failure.detail)
            self._emit("error", "Failed to delete project. Please try again.")
            return False

        self.projects = [p for p in self.projects if p.id != project_id]
        self._emit("success", "Project deleted successfully!")
        return True

    def _emit(self, level: str, message: str) -> None:
        if self._notify is not None:
            self._notify(level, message)
