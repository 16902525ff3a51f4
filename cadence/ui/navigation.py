"""
Router and player the host directives drive.

Both are in-memory: the router keeps a back/forward history, the player
keeps a queue and a playback state. Anything that renders them reads these.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Router:

    def __init__(self, start_page: str = "/explore-music"):
        self.current = start_page
        self._back: list[str] = []
        self._forward: list[str] = []

    def go(self, path: str):
        if path == self.current:
            return
        self._back.append(self.current)
        self._forward.clear()
        self.current = path

    def back(self) -> bool:
        if not self._back:
            return False
        self._forward.append(self.current)
        self.current = self._back.pop()
        return True

    def forward(self) -> bool:
        if not self._forward:
            return False
        self._back.append(self.current)
        self.current = self._forward.pop()
        return True


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class Player:

    def __init__(self, queue: Optional[list[str]] = None):
        self.queue: list[str] = list(queue or [])
        self.position = 0
        self.state = PlaybackState.STOPPED

    @property
    def current(self) -> Optional[str]:
        if 0 <= self.position < len(self.queue):
            return self.queue[self.position]
        return None

    def play(self):
        if self.current is not None:
            self.state = PlaybackState.PLAYING

    def pause(self):
        if self.state == PlaybackState.PLAYING:
            self.state = PlaybackState.PAUSED

    def play_pause(self):
        if self.state == PlaybackState.PLAYING:
            self.pause()
        else:
            self.play()

    def stop(self):
        self.state = PlaybackState.STOPPED

    def next(self):
        if self.position + 1 < len(self.queue):
            self.position += 1

    def previous(self):
        if self.position > 0:
            self.position -= 1
