"""Local and remote persistence of the working resume.

Public API:
- ResumeSynchronizer: load/edit/push lifecycle with sync status
- LocalResumeCache, MemoryStore, JsonFileStore: local key-value cache
- HttpResumeStore: client for the remote resume store
- JobHistory: bounded list of analyzed jobs
- AsyncioScheduler, ManualScheduler: debounce timers
"""

from resume_matcher.sync.history import JobHistory
from resume_matcher.sync.remote import (
    HttpResumeStore,
    RemoteResumeStore,
    RemoteSnapshot,
    SaveResult,
)
from resume_matcher.sync.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from resume_matcher.sync.storage import (
    JsonFileStore,
    KeyValueStore,
    LocalResumeCache,
    LocalSnapshot,
    MemoryStore,
)
from resume_matcher.sync.synchronizer import ResumeSynchronizer, SyncStatus

__all__ = [
    "ResumeSynchronizer",
    "SyncStatus",
    "LocalResumeCache",
    "LocalSnapshot",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "RemoteResumeStore",
    "RemoteSnapshot",
    "SaveResult",
    "HttpResumeStore",
    "JobHistory",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
]
