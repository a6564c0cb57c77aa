"""Character state and run-cycle frames driven by the moving signal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CharacterState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"


RUN_FRAMES: tuple[str, ...] = ("run1", "run2")


@dataclass(frozen=True, slots=True)
class CharacterConfig:
    """Animation timings (seconds)."""

    frame_interval_s: float = 0.5
    sleep_after_seconds: float = 60.0

    def __post_init__(self) -> None:
        if self.frame_interval_s <= 0:
            raise ValueError(f"frame_interval_s 必须为正：{self.frame_interval_s!r}")
        if self.sleep_after_seconds < 0:
            raise ValueError(f"sleep_after_seconds 不能为负：{self.sleep_after_seconds!r}")


class CharacterAnimator:
    """Track what the character is doing and which image to show.

    Time is passed in explicitly (seconds, any monotonic origin) so the same
    animator works for a live frame timer and for replays.
    """

    def __init__(self, config: CharacterConfig | None = None, now: float = 0.0) -> None:
        self.config = config or CharacterConfig()
        self.state = CharacterState.IDLE
        self.frame_index = 0
        self._idle_since = now
        self._last_frame_at = now

    @property
    def image_name(self) -> str:
        if self.state is CharacterState.RUNNING:
            return RUN_FRAMES[self.frame_index]
        if self.state is CharacterState.SLEEPING:
            return "sleep"
        return "idle"

    @property
    def button_label(self) -> str:
        return "Stop" if self.state is CharacterState.RUNNING else "Run"

    def toggle(self, now: float = 0.0) -> CharacterState:
        """Manual Run/Stop button."""

        self._set_running(self.state is not CharacterState.RUNNING, now)
        return self.state

    def on_motion_change(self, is_moving: bool, now: float = 0.0) -> None:
        """Listener for the classifier / monitor moving signal."""

        self._set_running(is_moving, now)

    def tick(self, now: float) -> str:
        """Advance timers to `now` and return the image to display."""

        cfg = self.config
        if self.state is CharacterState.RUNNING:
            steps = int((now - self._last_frame_at) // cfg.frame_interval_s)
            if steps > 0:
                self.frame_index = (self.frame_index + steps) % len(RUN_FRAMES)
                self._last_frame_at += steps * cfg.frame_interval_s
        elif self.state is CharacterState.IDLE and now - self._idle_since >= cfg.sleep_after_seconds:
            self.state = CharacterState.SLEEPING
        return self.image_name

    def _set_running(self, running: bool, now: float) -> None:
        if running:
            if self.state is not CharacterState.RUNNING:
                self.state = CharacterState.RUNNING
                self.frame_index = 0
                self._last_frame_at = now
            return
        if self.state is CharacterState.RUNNING:
            self.state = CharacterState.IDLE
            self.frame_index = 0
            self._idle_since = now
