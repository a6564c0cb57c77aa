from __future__ import annotations

import pytest

from motion_state.character import CharacterAnimator, CharacterConfig, CharacterState


def test_starts_idle() -> None:
    a = CharacterAnimator()
    assert a.state is CharacterState.IDLE
    assert a.image_name == "idle"
    assert a.button_label == "Run"


def test_manual_toggle_runs_and_stops() -> None:
    a = CharacterAnimator()
    assert a.toggle(now=1.0) is CharacterState.RUNNING
    assert a.button_label == "Stop"
    assert a.image_name == "run1"
    assert a.toggle(now=2.0) is CharacterState.IDLE
    assert a.image_name == "idle"


def test_run_frames_alternate_every_half_second() -> None:
    a = CharacterAnimator()
    a.toggle(now=0.0)
    assert a.tick(0.49) == "run1"
    assert a.tick(0.5) == "run2"
    assert a.tick(1.0) == "run1"
    # a late tick catches up by whole frames
    assert a.tick(2.5) == "run2"


def test_frames_do_not_advance_while_idle() -> None:
    a = CharacterAnimator()
    for t in (0.5, 1.0, 1.5):
        assert a.tick(t) == "idle"
    assert a.frame_index == 0


def test_motion_signal_drives_state() -> None:
    a = CharacterAnimator()
    a.on_motion_change(True, now=3.0)
    assert a.state is CharacterState.RUNNING
    a.on_motion_change(True, now=3.2)
    assert a.state is CharacterState.RUNNING
    a.on_motion_change(False, now=5.0)
    assert a.state is CharacterState.IDLE


def test_falls_asleep_after_long_idle_and_wakes_on_motion() -> None:
    a = CharacterAnimator(CharacterConfig(sleep_after_seconds=60.0), now=0.0)
    a.on_motion_change(True, now=10.0)
    a.on_motion_change(False, now=20.0)
    assert a.tick(79.0) == "idle"
    assert a.tick(80.0) == "sleep"
    assert a.state is CharacterState.SLEEPING
    a.on_motion_change(True, now=90.0)
    assert a.state is CharacterState.RUNNING
    assert a.image_name == "run1"


@pytest.mark.parametrize("kwargs", [{"frame_interval_s": 0.0}, {"sleep_after_seconds": -1.0}])
def test_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        CharacterConfig(**kwargs)
