"""HTTP service backing the remote resume store.

Endpoints:
    GET  /api/resume  -> {"resume": ..., "updatedAt": ...}
    POST /api/resume  {"resume": ...} -> {"success": true, "updatedAt": ...}

The signed-in user comes from the session cookie (``user_id`` key). Run with:

    uvicorn --factory resume_matcher.server.app:create_app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import aiosqlite
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from resume_matcher.config.settings import Settings, get_settings
from resume_matcher.documents.validation import DocumentValidationError, validate_resume
from resume_matcher.server.repository import ResumeRepository
from resume_matcher.sync.storage import format_timestamp

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def get_current_user_id(request: Request) -> str | None:
    """Return the signed-in user's id, or None for anonymous requests."""
    user_id = request.session.get(SESSION_USER_KEY)
    return str(user_id) if user_id else None


def _unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


def create_app(
    settings: Settings | None = None,
    repository: ResumeRepository | None = None,
) -> FastAPI:
    """Build the resume store application."""
    settings = settings or get_settings()
    repository = repository or ResumeRepository(settings.server_db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await repository.initialize()
        logger.info("Resume store ready (database: %s)", repository.db_path)
        yield
        await repository.close()

    app = FastAPI(title="Resume Matcher", lifespan=lifespan)
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)
    app.state.repository = repository

    @app.get("/api/resume")
    async def get_resume(user_id: str | None = Depends(get_current_user_id)):
        if user_id is None:
            return _unauthorized()

        try:
            stored = await repository.get_by_user(user_id)
        except (aiosqlite.Error, OSError):
            logger.exception("Error loading resume from database")
            return JSONResponse({"error": "Failed to load resume"}, status_code=500)

        if stored is None:
            return {"resume": None, "updatedAt": None}

        try:
            resume = validate_resume(stored.resume_data)
        except DocumentValidationError as e:
            logger.error("Invalid resume data in database for user %s: %s", user_id, e)
            return {"resume": None, "updatedAt": None}

        return {"resume": resume.to_dict(), "updatedAt": format_timestamp(stored.updated_at)}

    @app.post("/api/resume")
    async def save_resume(request: Request, user_id: str | None = Depends(get_current_user_id)):
        if user_id is None:
            return _unauthorized()

        try:
            body = await request.json()
        except ValueError:
            body = None
        raw = body.get("resume") if isinstance(body, dict) else None

        try:
            resume = validate_resume(raw)
        except DocumentValidationError as e:
            return JSONResponse(
                {"error": "Invalid resume data", "details": e.issues},
                status_code=400,
            )

        try:
            updated_at = await repository.upsert(user_id, resume.to_dict())
        except (aiosqlite.Error, OSError):
            logger.exception("Error saving resume to database")
            return JSONResponse({"error": "Failed to save resume"}, status_code=500)

        logger.info("Saved resume for user %s", user_id)
        return {"success": True, "updatedAt": format_timestamp(updated_at)}

    return app
