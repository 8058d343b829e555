from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import threading
import time

import numpy as np
import torch


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresentEvent:
    event_id: int
    revision: int
    ts_ns: int


class TensorSurface:
    """Host-side RGBA255 frame that receives one composited pixel buffer per present.

    Drawing is single-threaded; the lock only guards readers (a presenter or
    display thread) against a frame swap in progress.
    """

    def __init__(self, width: int, height: int, background: tuple[int, int, int, int] = (0, 0, 0, 255)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = width
        self.height = height
        self._background = background
        self._frame_lock = threading.Lock()
        self._event_lock = threading.Lock()
        self._events: deque[PresentEvent] = deque()
        self._next_event_id = 1
        self._revision = 0
        self._frame = self._blank(height, width)

    @property
    def revision(self) -> int:
        return self._revision

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        with self._frame_lock:
            self.width = width
            self.height = height
            self._frame = self._blank(height, width)
        LOGGER.debug("surface resized to %dx%d", width, height)

    def read_snapshot(self) -> torch.Tensor:
        with self._frame_lock:
            return self._frame.clone()

    def submit_frame(self, pixels: np.ndarray) -> PresentEvent:
        expected = (self.height, self.width, 4)
        if tuple(pixels.shape) != expected:
            raise ValueError(f"frame has invalid shape: {tuple(pixels.shape)} expected {expected}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"frame must be uint8, got {pixels.dtype}")
        frame = torch.from_numpy(np.ascontiguousarray(pixels).copy())

        with self._frame_lock:
            self._frame = frame
            self._revision += 1
            event = PresentEvent(event_id=self._next_event_id, revision=self._revision, ts_ns=time.time_ns())
            self._next_event_id += 1

        with self._event_lock:
            self._events.append(event)
        return event

    def pop_present_event(self) -> PresentEvent | None:
        with self._event_lock:
            if not self._events:
                return None
            return self._events.popleft()

    def pending_present_count(self) -> int:
        with self._event_lock:
            return len(self._events)

    def _blank(self, height: int, width: int) -> torch.Tensor:
        bg = torch.tensor(self._background, dtype=torch.uint8).view(1, 1, 4)
        return bg.expand(height, width, 4).clone()
