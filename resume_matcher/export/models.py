"""Result type shared by the exporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RenderResult:
    """Result of an export operation."""

    success: bool
    file_path: str | None = None
    error: str | None = None
    rendered_at: datetime = field(default_factory=datetime.now)
