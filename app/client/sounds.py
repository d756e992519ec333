"""Audible cues played when notifications arrive."""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol, TextIO

from app.domain.entities import Notification, NotificationType

logger = logging.getLogger(__name__)

CUE_NAMES: tuple[str, ...] = tuple(dict.fromkeys(member.sound_cue for member in NotificationType))


class CueBackend(Protocol):
    """Something able to load, play and release named sound cues."""

    def load(self, name: str) -> Any: ...

    def play(self, handle: Any) -> None: ...

    def release(self, handle: Any) -> None: ...


class TerminalBellBackend:
    """Play cues as terminal bells; errors ring twice."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def load(self, name: str) -> int:
        return 2 if name == "error" else 1

    def play(self, handle: int) -> None:
        self.stream.write("\a" * handle)
        self.stream.flush()

    def release(self, handle: int) -> None:
        return None


class SoundCueService:
    """Own the loaded cue handles between :meth:`init` and :meth:`dispose`."""

    def __init__(self, backend: CueBackend, cues: tuple[str, ...] = CUE_NAMES) -> None:
        self.backend = backend
        self.cues = cues
        self._handles: dict[str, Any] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        if self._initialized:
            return
        for name in self.cues:
            self._handles[name] = self.backend.load(name)
        self._initialized = True

    def dispose(self) -> None:
        if not self._initialized:
            return
        handles, self._handles = self._handles, {}
        self._initialized = False
        for name, handle in handles.items():
            try:
                self.backend.release(handle)
            except Exception:
                logger.warning("Failed to release sound cue %s", name, exc_info=True)

    def play_for(self, notification: Notification) -> bool:
        """Play the cue for ``notification`` when it is important enough.

        Returns whether a cue was played. Low importance notifications stay
        silent, as does a service that is not initialized.
        """

        if not self._initialized or not notification.importance.is_audible:
            return False
        handle = self._handles.get(notification.type.sound_cue)
        if handle is None:
            return False
        try:
            self.backend.play(handle)
        except Exception:
            logger.warning(
                "Failed to play sound cue %s", notification.type.sound_cue, exc_info=True
            )
            return False
        return True


__all__ = ["CUE_NAMES", "CueBackend", "SoundCueService", "TerminalBellBackend"]
