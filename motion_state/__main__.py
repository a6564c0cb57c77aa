"""Module entry point: python -m motion_state ..."""

from __future__ import annotations

from motion_state.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
