"""Per-session capture watermark.

Each session gets one plain-text file under the trackers directory holding the
uuid of the last transcript entry already captured. Missing or empty files mean
"no watermark"; only real I/O failures raise (as WatermarkError).
"""

from __future__ import annotations

import hashlib
import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from structlog import get_logger

from supermemory_claude.errors import WatermarkError
from supermemory_claude.paths import trackers_dir
from supermemory_claude.transcript.entries import TranscriptEntry

logger = get_logger(__name__)


def _safe_session_path_component(value: str) -> str:
    if re.fullmatch(r"[A-Za-z0-9._-]{1,128}", value) and value not in (".", ".."):
        return value
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:32]


class WatermarkStore:
    """Read and advance capture watermarks, one file per session."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory if self._directory is not None else trackers_dir()

    def path_for(self, session_id: str) -> Path:
        return self.directory / f"{_safe_session_path_component(session_id)}.txt"

    def get(self, session_id: str) -> Optional[str]:
        path = self.path_for(session_id)
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            logger.warning("Ignoring unreadable watermark", session_id=session_id[:8], path=str(path))
            return None
        except OSError as exc:
            raise WatermarkError(f"Failed to read watermark {path}: {exc}") from exc
        return value or None

    def set(self, session_id: str, uuid: str) -> None:
        """Persist the watermark atomically (write temp file, then rename)."""
        if not uuid:
            raise ValueError("watermark uuid must be non-empty")

        path = self.path_for(session_id)
        tmp_path = path.with_name(f"{path.name}.{os.getpid()}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(uuid)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise WatermarkError(f"Failed to write watermark {path}: {exc}") from exc
        logger.debug("Watermark advanced", session_id=session_id[:8], uuid=uuid)

    def clear(self, session_id: str) -> None:
        path = self.path_for(session_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise WatermarkError(f"Failed to clear watermark {path}: {exc}") from exc


def entries_since(entries: Sequence[TranscriptEntry], watermark: Optional[str]) -> list[TranscriptEntry]:
    """Return the user/assistant entries after the watermark, in order.

    A watermark that is absent, or not present in this transcript (reset or
    rotated), means everything is new.
    """
    start = 0
    if watermark:
        for index, entry in enumerate(entries):
            if entry.uuid == watermark:
                start = index + 1
                break
        else:
            logger.debug("Watermark not found in transcript; capturing everything", watermark=watermark)

    return [entry for entry in entries[start:] if entry.is_conversational]
