"""Debounced moving / not-moving classification of location samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from motion_state.geo import sample_distance_m
from motion_state.models import Sample

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


@dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """Tunables for motion detection.

    Attributes:
        speed_threshold_mps: A valid speed reading strictly above this means movement (~2.5 km/h).
        distance_threshold_m: Fallback: consecutive positions farther apart than this mean movement.
        decay_seconds: Keep reporting "moving" this long after the last detected movement.
    """

    speed_threshold_mps: float = 0.7
    distance_threshold_m: float = 3.0
    decay_seconds: float = 3.0

    def __post_init__(self) -> None:
        if self.speed_threshold_mps < 0:
            raise ValueError(f"speed_threshold_mps 不能为负：{self.speed_threshold_mps!r}")
        if self.distance_threshold_m < 0:
            raise ValueError(f"distance_threshold_m 不能为负：{self.distance_threshold_m!r}")
        if self.decay_seconds < 0:
            raise ValueError(f"decay_seconds 不能为负：{self.decay_seconds!r}")

    @classmethod
    def walking(cls) -> ClassifierConfig:
        """Preset for on-foot use (the defaults)."""

        return cls()

    @classmethod
    def cycling(cls) -> ClassifierConfig:
        """Preset for bikes: ignore slow drift, tolerate longer stops at lights."""

        return cls(speed_threshold_mps=2.0, distance_threshold_m=8.0, decay_seconds=10.0)


PRESETS: dict[str, Callable[[], ClassifierConfig]] = {
    "walking": ClassifierConfig.walking,
    "cycling": ClassifierConfig.cycling,
}


@dataclass(slots=True)
class ClassifierState:
    """Mutable classifier state. Not persisted; reset() restores the defaults."""

    last_sample: Sample | None = None
    last_moving_at: float | None = None
    is_moving: bool = False


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of evaluating one sample.

    reason is one of "speed", "distance", "first_sample" or "none".
    """

    movement_detected: bool
    reason: str
    is_moving: bool
    changed: bool


@dataclass(slots=True)
class MotionClassifier:
    """Turn a push stream of samples into a stable moving / not-moving signal.

    Samples must arrive serialized with monotonic timestamps. "Now" is the
    sample timestamp unless a clock callable (seconds) is supplied.
    Listeners are called only when the public state actually changes.
    """

    config: ClassifierConfig = field(default_factory=ClassifierConfig)
    clock: Callable[[], float] | None = None
    state: ClassifierState = field(default_factory=ClassifierState)
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    @property
    def is_moving(self) -> bool:
        return self.state.is_moving

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change listener. Returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def process(self, sample: Sample) -> Decision:
        """Evaluate one incoming sample and update the public state."""

        now = self.clock() if self.clock is not None else sample.geo_time_s
        cfg = self.config
        detected = False
        reason = "none"

        # Negative speed means the reading is unavailable.
        if sample.has_valid_speed and sample.speed_mps > cfg.speed_threshold_mps:
            detected = True
            reason = "speed"

        last = self.state.last_sample
        if not detected:
            if last is None:
                reason = "first_sample"
            elif sample_distance_m(last, sample) > cfg.distance_threshold_m:
                detected = True
                reason = "distance"

        self.state.last_sample = sample

        changed = False
        if detected:
            self.state.last_moving_at = now
            if not self.state.is_moving:
                changed = self._set_moving(True)
        else:
            lm = self.state.last_moving_at
            within_decay = lm is not None and now - lm < cfg.decay_seconds
            if not within_decay and self.state.is_moving:
                changed = self._set_moving(False)

        return Decision(movement_detected=detected, reason=reason, is_moving=self.state.is_moving, changed=changed)

    def force_stationary(self) -> None:
        """Fail-safe: report "not moving" immediately (signal lost or revoked)."""

        if self.state.is_moving:
            self._set_moving(False)

    def reset(self) -> None:
        """Drop all history. Listeners stay registered and are notified if the state flips."""

        was_moving = self.state.is_moving
        self.state = ClassifierState()
        if was_moving:
            self._notify(False)

    def _set_moving(self, value: bool) -> bool:
        if self.state.is_moving == value:
            return False
        self.state.is_moving = value
        logger.debug("is_moving -> %s", value)
        self._notify(value)
        return True

    def _notify(self, value: bool) -> None:
        for listener in list(self._listeners):
            listener(value)
