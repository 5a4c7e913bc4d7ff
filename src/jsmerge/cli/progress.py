"""Terminal progress rendering for merge progress samples."""

from __future__ import annotations

import time
from typing import Callable, Optional

import click

from ..discovery import format_bytes
from ..models import ProgressSample

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class SpinnerReporter:
    """Single-line spinner on stderr.

    Redraws only when progress advanced by at least 0.1 percentage points
    and ``interval`` seconds passed since the last redraw (the final 100%
    is always drawn). Every other sample returns immediately.
    """

    def __init__(
        self,
        interval: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = interval
        self._clock = clock
        self._frame = 0
        self._last_step = -1
        self._last_render: Optional[float] = None
        self.renders = 0

    def __call__(self, sample: ProgressSample) -> None:
        step = int(sample.percent_complete * 10)
        if step <= self._last_step:
            return

        now = self._clock()
        if (
            self._last_render is not None
            and now - self._last_render < self.interval
            and sample.percent_complete < 100
        ):
            return

        self._last_step = step
        self._last_render = now
        self._frame = (self._frame + 1) % len(SPINNER_FRAMES)
        self.renders += 1
        click.echo(f"\r{self.render(sample)}", nl=False, err=True)

    def render(self, sample: ProgressSample) -> str:
        return (
            f"{SPINNER_FRAMES[self._frame]} Processing: "
            f"{sample.percent_complete:.1f}% "
            f"({format_bytes(sample.processed_bytes)} / "
            f"{format_bytes(sample.total_bytes)}) "
            f"[{sample.megabytes_per_second:.1f} MB/s]"
        )

    def finish(self) -> None:
        """End the spinner line if anything was drawn."""
        if self.renders:
            click.echo("", err=True)
