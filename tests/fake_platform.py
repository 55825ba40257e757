"""In-process stand-in for the game platform API, served over ASGI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import FastAPI, Form, HTTPException, Request

from edugame_client.schemas import SubmitQuizIn


@dataclass
class PlatformState:
    token: str = "secret-token"
    quizzes: dict[str, dict[str, Any]] = field(default_factory=dict)
    answer_key: dict[int, int] = field(default_factory=dict)
    games: list[dict[str, Any]] = field(default_factory=list)
    templates: list[dict[str, Any]] = field(default_factory=list)
    projects: list[dict[str, Any]] = field(default_factory=list)
    play_counts: dict[str, int] = field(default_factory=dict)
    likes: list[tuple[str, bool]] = field(default_factory=list)
    last_query: list[tuple[str, str]] = field(default_factory=list)
    last_auth: Optional[str] = None
    fail_publish: bool = False


def build_app(state: PlatformState) -> FastAPI:
    app = FastAPI(title="Fake Game Platform")

    def require_user(request: Request) -> None:
        state.last_auth = request.headers.get("authorization")
        if state.last_auth != f"Bearer {state.token}":
            raise HTTPException(status_code=401, detail="Unauthorized")

    def find_project(game_id: str) -> dict[str, Any]:
        for p in state.projects:
            if p["id"] == game_id:
                return p
        raise HTTPException(status_code=404, detail="Project not found")

    @app.get("/api/game/game-type/quiz/{quiz_id}/play/public")
    async def play_public(quiz_id: str):
        quiz = state.quizzes.get(quiz_id)
        if quiz is None:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return {"data": quiz}

    @app.post("/api/game/game-type/quiz/{quiz_id}/check")
    async def check(quiz_id: str, payload: SubmitQuizIn):
        quiz = state.quizzes.get(quiz_id)
        if quiz is None:
            raise HTTPException(status_code=404, detail="Quiz not found")
        if len(payload.answers) != len(quiz["questions"]):
            raise HTTPException(status_code=400, detail="Answer count mismatch")

        correct = sum(
            1 for a in payload.answers if state.answer_key.get(a.question_index) == a.selected_answer_index
        )
        total = len(quiz["questions"])
        per_question = quiz["score_per_question"]
        return {
            "data": {
                "correct_answers": correct,
                "total_questions": total,
                "max_score": total * per_question,
                "score": correct * per_question,
                "percentage": round(correct / total * 100, 2),
            }
        }

    @app.post("/api/game/play-count")
    async def play_count(request: Request):
        body = await request.json()
        game_id = body["game_id"]
        state.play_counts[game_id] = state.play_counts.get(game_id, 0) + 1
        return {"data": {"game_id": game_id}}

    @app.get("/api/game")
    async def list_games(request: Request):
        state.last_query = list(request.query_params.multi_items())
        state.last_auth = request.headers.get("authorization")
        return {"data": state.games}

    @app.get("/api/game/template")
    async def list_templates():
        return {"data": state.templates}

    @app.post("/api/game/like")
    async def like(request: Request):
        require_user(request)
        body = await request.json()
        state.likes.append((body["game_id"], body["is_like"]))
        return {"data": None}

    @app.get("/api/auth/me/game")
    async def my_projects(request: Request):
        require_user(request)
        return {"data": state.projects}

    @app.patch("/api/game/game-type/{slug}/{game_id}")
    async def update_status(slug: str, game_id: str, request: Request, is_publish: str = Form(...)):
        require_user(request)
        if state.fail_publish:
            raise HTTPException(status_code=500, detail="Storage unavailable")
        project = find_project(game_id)
        project["is_published"] = is_publish == "true"
        return {"data": project}

    @app.delete("/api/game/game-type/{slug}/{game_id}")
    async def delete_project(slug: str, game_id: str, request: Request):
        require_user(request)
        project = find_project(game_id)
        state.projects.remove(project)
        return {"data": None}

    return app
