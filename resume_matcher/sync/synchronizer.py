"""Keeps the working resume in step with the local cache and the remote store.

Session start (``load``):
    1. Read the local cache (resume + last-modified timestamp).
    2. If a remote store is configured, fetch the remote copy.
    3. Both exist: the remote copy wins when its timestamp is not older than
       the local one; otherwise the local copy wins and is pushed.
       Only one exists: it wins (a local-only copy is pushed).
       Neither: the blank resume.

After load, every change is written to the local cache immediately and a
remote push is scheduled once edits have been quiet for the debounce window.
Pushes never overlap and are never retried automatically.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from resume_matcher.config.settings import Settings, get_settings
from resume_matcher.documents.models import Resume, empty_resume
from resume_matcher.sync.remote import RemoteResumeStore, SaveResult
from resume_matcher.sync.scheduler import AsyncioScheduler, ScheduledHandle, Scheduler
from resume_matcher.sync.storage import LocalResumeCache

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

StatusListener = Callable[["SyncStatus"], None]


class SyncStatus(str, Enum):
    """Remote sync state, for display only."""

    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


class ResumeSynchronizer:
    """Owns the in-session resume and its two persistent copies."""

    def __init__(
        self,
        local: LocalResumeCache,
        remote: RemoteResumeStore | None = None,
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.local = local
        self.remote = remote
        self.scheduler = scheduler or AsyncioScheduler()
        self.settings = settings or get_settings()

        self._resume: Resume = empty_resume()
        self._loaded = False
        self._authenticated = remote is not None
        self._status = SyncStatus.IDLE
        self._revision = 0
        self._push_lock = asyncio.Lock()
        self._pending_push: ScheduledHandle | None = None
        self._status_timer: ScheduledHandle | None = None
        self._listeners: list[StatusListener] = []
        self.last_synced_at: datetime | None = None

    # State

    @property
    def resume(self) -> Resume:
        return self._resume

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def has_pending_push(self) -> bool:
        return self._pending_push is not None

    def add_status_listener(self, listener: StatusListener) -> None:
        """Call ``listener(status)`` on every status change."""
        self._listeners.append(listener)

    def _set_status(self, status: SyncStatus, reset_after: float | None = None) -> None:
        if self._status_timer is not None:
            self._status_timer.cancel()
            self._status_timer = None

        self._status = status
        for listener in self._listeners:
            listener(status)

        if reset_after is not None:
            self._status_timer = self.scheduler.schedule_after(reset_after, self._reset_status)

    def _reset_status(self) -> None:
        self._status_timer = None
        self._set_status(SyncStatus.IDLE)

    # Session start

    async def load(self) -> Resume:
        """Resolve the starting resume from the local and remote copies."""
        local = self.local.read()

        if self.remote is None:
            self._resume = local.resume or empty_resume()
            self._loaded = True
            logger.info("Loaded resume from %s", "local cache" if local.resume else "defaults")
            return self._resume

        remote = await self.remote.fetch()

        if remote.unauthorized:
            logger.warning("Remote store rejected the session; continuing local-only")
            self._authenticated = False
            self._resume = local.resume or empty_resume()
        elif remote.error is not None:
            # Unknown remote state: keep local, do not overwrite the remote copy
            logger.warning("Remote store unavailable (%s); using local copy", remote.error)
            self._resume = local.resume or empty_resume()
            self._set_status(SyncStatus.ERROR, self.settings.sync_error_display_seconds)
        elif remote.resume is not None:
            local_time = local.updated_at or _EPOCH
            remote_time = remote.updated_at or _EPOCH
            if local.resume is None or remote_time >= local_time:
                logger.info("Remote copy is current (%s >= %s)", remote_time, local_time)
                self._resume = remote.resume
                self.local.write(remote.resume, remote.updated_at)
                self.last_synced_at = remote.updated_at
            else:
                logger.info("Local copy is newer (%s > %s); pushing", local_time, remote_time)
                self._resume = local.resume
                await self._push()
        elif local.resume is not None:
            logger.info("No remote copy; pushing local copy")
            self._resume = local.resume
            await self._push()
        else:
            self._resume = empty_resume()

        self._loaded = True
        return self._resume

    # Edits

    def set_resume(self, resume: Resume) -> None:
        """Replace the working resume.

        The local cache is written before this returns; the remote push
        follows after the debounce window.
        """
        if not self._loaded:
            raise RuntimeError("Resume synchronizer used before load()")
        if resume == self._resume:
            return

        self._resume = resume
        self._revision += 1
        self.local.write(resume)
        if self._authenticated:
            self._schedule_push()

    def update_field(self, name: str, value: Any) -> None:
        """Replace one top-level section, e.g. ``experience`` or ``personalInfo``."""
        attribute = name
        if name not in Resume.model_fields:
            attribute = next(
                (attr for attr, info in Resume.model_fields.items() if info.alias == name),
                None,
            )
        if attribute is None:
            raise ValueError(f"Unknown resume field: {name}")
        self.set_resume(self._resume.model_copy(update={attribute: value}))

    async def clear(self) -> None:
        """Reset to the blank resume everywhere."""
        self._cancel_pending_push()
        self.local.clear()
        self._resume = empty_resume()
        self._revision += 1
        if self._authenticated:
            await self._push()

    # Remote pushes

    def _cancel_pending_push(self) -> None:
        if self._pending_push is not None:
            self._pending_push.cancel()
            self._pending_push = None

    def _schedule_push(self) -> None:
        self._cancel_pending_push()
        self._pending_push = self.scheduler.schedule_after(
            self.settings.sync_debounce_seconds, self._debounced_push
        )

    async def _debounced_push(self) -> None:
        self._pending_push = None
        await self._push()

    async def _push(self) -> SaveResult:
        assert self.remote is not None
        async with self._push_lock:
            revision = self._revision
            resume = self._resume
            self._set_status(SyncStatus.SYNCING)
            try:
                result = await self.remote.save(resume)
            except Exception as e:
                logger.exception("Unexpected error pushing resume")
                result = SaveResult(success=False, error=str(e))

            if not result.success:
                logger.warning("Remote push failed: %s", result.error)
                self._set_status(SyncStatus.ERROR, self.settings.sync_error_display_seconds)
                return result

            if result.updated_at is not None:
                self.last_synced_at = result.updated_at
                # A newer edit keeps its own, later local stamp
                if self._revision == revision:
                    self.local.stamp(result.updated_at)
            self._set_status(SyncStatus.SYNCED, self.settings.sync_synced_display_seconds)
            return result

    async def flush(self) -> SaveResult | None:
        """Send a pending debounced push now. Returns None if nothing was pending."""
        if self._pending_push is None:
            return None
        self._cancel_pending_push()
        return await self._push()

    def close(self) -> None:
        """Cancel timers. Unflushed changes stay in the local cache."""
        self._cancel_pending_push()
        if self._status_timer is not None:
            self._status_timer.cancel()
            self._status_timer = None
