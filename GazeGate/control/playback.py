"""
Playback gating.

PlaybackBackend is whatever actually plays the media (see
ui/video_player.py for the Qt one). PlaybackController sits in front of it
and only forwards a command when it changes the backend's state, so repeated
identical decisions never reach the backend.

A backend may also expose ``is_ready() -> bool``; while it reports False no
play() is sent. A play() the backend did not act on is not re-sent until the
backend has been seen playing or the decision has gone back to pause.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from .events import PlaybackCommand

logger = logging.getLogger(__name__)

PLAY = "play"
PAUSE = "pause"


class PlaybackBackend(Protocol):
    def is_playing(self) -> bool: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...


class PlaybackController:
    def __init__(self, backend: Optional[PlaybackBackend] = None) -> None:
        self.backend = backend
        self._play_pending = False
        self._listeners: List[Callable[[PlaybackCommand], None]] = []

    def set_backend(self, backend: Optional[PlaybackBackend]) -> None:
        self.backend = backend
        self._play_pending = False

    def add_listener(self, cb: Callable[[PlaybackCommand], None]) -> None:
        self._listeners.append(cb)

    def _backend_ready(self) -> bool:
        is_ready = getattr(self.backend, "is_ready", None)
        return True if is_ready is None else bool(is_ready())

    def apply(self, should_play: bool) -> Optional[str]:
        """Issue at most one play()/pause() call; return the command sent."""
        if self.backend is None:
            return None
        playing = bool(self.backend.is_playing())
        if playing or not should_play:
            self._play_pending = False
        if should_play and not playing:
            if self._play_pending or not self._backend_ready():
                return None
            self.backend.play()
            self._play_pending = True
            return self._emit(PLAY)
        if not should_play and playing:
            self.backend.pause()
            return self._emit(PAUSE)
        return None

    def hold(self) -> Optional[str]:
        """Keep the media paused (used while uncalibrated)."""
        return self.apply(False)

    def _emit(self, command: str) -> str:
        logger.info("Playback %s", command)
        event = PlaybackCommand(command=command)
        for cb in list(self._listeners):
            cb(event)
        return command
