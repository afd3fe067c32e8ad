"""Per-card redraw loop.

Each visible card runs one ``RedrawLoop``: an asyncio task that samples
the playback session for its owner, renders a frame and hands it to a
callback at the configured frame rate. Stopping the loop cancels and
awaits the task so nothing is left scheduled.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from enum import Enum
from typing import TYPE_CHECKING

from crypt_cards.audio.playback import PlaybackSession
from crypt_cards.soul.renderer import Frame, SoulSurface

if TYPE_CHECKING:
    from crypt_cards.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60

FrameCallback = Callable[[Frame], Awaitable[None] | None]


class LoopState(Enum):
    """Redraw loop state."""

    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


class RedrawLoop:
    """Repeating redraw task for one card surface.

    Example:
        ```python
        loop = RedrawLoop(surface, session, owner=card.id, on_frame=show)
        loop.start()
        ...
        await loop.stop()  # card scrolled out of view
        ```
    """

    def __init__(
        self,
        surface: SoulSurface,
        session: PlaybackSession,
        owner: Hashable,
        *,
        fps: int = DEFAULT_FPS,
        on_frame: FrameCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the loop.

        Args:
            surface: Surface already pointed at the card.
            session: Shared playback session.
            owner: Identity this card uses when asking for audio levels.
            fps: Target frames per second.
            on_frame: Optional sync or async callback receiving each frame.
            clock: Monotonic time source.
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self._surface = surface
        self._session = session
        self._owner = owner
        self._interval = 1.0 / fps
        self._on_frame = on_frame
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._state = LoopState.STOPPED
        self.frames_rendered = 0
        self.last_frame: Frame | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        surface: SoulSurface,
        session: PlaybackSession,
        owner: Hashable,
        *,
        on_frame: FrameCallback | None = None,
    ) -> RedrawLoop:
        """Build a loop running at the configured frame rate."""
        return cls(surface, session, owner, fps=settings.render.fps, on_frame=on_frame)

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self.is_running:
            logger.warning("Redraw loop for %s already running", self._owner)
            return
        self._state = LoopState.RUNNING
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._state = LoopState.STOPPING
        self._task.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        finally:
            self._task = None
            self._state = LoopState.STOPPED
        logger.debug("Redraw loop for %s stopped after %d frames", self._owner, self.frames_rendered)

    async def draw_frame(self) -> Frame:
        """Render and deliver a single frame."""
        now = self._clock()
        levels = self._session.levels_for(self._owner, now)
        rings = self._session.rings_for(self._owner, now)
        frame = self._surface.render(levels, rings, now)
        self.frames_rendered += 1
        self.last_frame = frame
        if self._on_frame is not None:
            result = self._on_frame(frame)
            if result is not None:
                await result
        return frame

    async def _run(self) -> None:
        while True:
            started = self._clock()
            await self.draw_frame()
            elapsed = self._clock() - started
            await asyncio.sleep(max(0.0, self._interval - elapsed))
