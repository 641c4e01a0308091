"""Remote resume store service.

Public API:
- create_app: FastAPI application serving /api/resume
- ResumeRepository: aiosqlite storage of one resume per user
"""

from resume_matcher.server.app import create_app, get_current_user_id
from resume_matcher.server.repository import ResumeRepository, StoredResume

__all__ = ["create_app", "get_current_user_id", "ResumeRepository", "StoredResume"]
