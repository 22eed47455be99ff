"""
QMediaPlayer-backed playback backend.

Implements the PlaybackBackend protocol (is_playing/play/pause). play() is a
no-op until a media file has loaded, so the gate cannot start playback on an
empty player.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

try:
    from PyQt6.QtCore import QObject, QUrl, pyqtSignal
    from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer
except Exception:  # pragma: no cover
    QObject = object  # type: ignore
    pyqtSignal = lambda *a, **k: None  # type: ignore

logger = logging.getLogger(__name__)


class QtVideoPlayer(QObject):  # type: ignore[misc]
    stateChanged = pyqtSignal(bool)  # playing
    readyChanged = pyqtSignal(bool)

    def __init__(self, video_output=None):  # type: ignore[no-redef]
        super().__init__()
        self._player = QMediaPlayer()
        self._audio = QAudioOutput()
        self._player.setAudioOutput(self._audio)
        if video_output is not None:
            self._player.setVideoOutput(video_output)
        self._ready = False
        self._path: Optional[str] = None
        self._player.mediaStatusChanged.connect(self._on_media_status)  # type: ignore[attr-defined]
        self._player.playbackStateChanged.connect(self._on_playback_state)  # type: ignore[attr-defined]
        self._player.errorOccurred.connect(self._on_error)  # type: ignore[attr-defined]

    # Media -------------------------------------------------------------
    def load(self, path: str) -> None:
        if not os.path.isfile(path):
            raise FileNotFoundError(path)
        self._ready = False
        self._path = path
        self._player.setSource(QUrl.fromLocalFile(os.path.abspath(path)))
        logger.info("Loading video %s", path)

    @property
    def path(self) -> Optional[str]:
        return self._path

    def is_ready(self) -> bool:
        return self._ready

    def set_volume(self, volume: float) -> None:
        self._audio.setVolume(max(0.0, min(1.0, float(volume))))

    # PlaybackBackend ---------------------------------------------------
    def is_playing(self) -> bool:
        return self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def play(self) -> None:
        if not self._ready:
            return
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    # Qt callbacks ------------------------------------------------------
    def _on_media_status(self, status) -> None:
        ready = status in (
            QMediaPlayer.MediaStatus.LoadedMedia,
            QMediaPlayer.MediaStatus.BufferedMedia,
            QMediaPlayer.MediaStatus.BufferingMedia,
            QMediaPlayer.MediaStatus.EndOfMedia,
        )
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            # Loop from the start so the next play() resumes content
            self._player.setPosition(0)
        if ready != self._ready:
            self._ready = ready
            self.readyChanged.emit(ready)  # type: ignore[attr-defined]

    def _on_playback_state(self, _state) -> None:
        self.stateChanged.emit(self.is_playing())  # type: ignore[attr-defined]

    def _on_error(self, _error, message: str = "") -> None:
        logger.error("Media player error: %s", message or self._player.errorString())
        self._ready = False
        self.readyChanged.emit(False)  # type: ignore[attr-defined]
