# src/lab_planner/progress.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TextIO
import sys
import shutil
import threading


@dataclass
class _RunState:
    label: str
    total_stages: int
    completed: int = 0
    current: Optional[str] = None
    finished: bool = False


class RunProgress:
    """
    Progress of one analysis run. Returned by ProgressReporter.begin_run;
    each run owns its own handle, so concurrent runs never share counts.
    """

    def __init__(self, reporter: "ProgressReporter", state: _RunState) -> None:
        self._reporter = reporter
        self._state = state

    @property
    def completed(self) -> int:
        return self._state.completed

    def stage(self, name: str) -> None:
        """Mark the previous stage complete and show `name` as running."""
        state = self._state
        if state.finished:
            return
        if state.current is not None:
            state.completed += 1
        state.current = name
        self._reporter._render(state)

    def finish(self, succeeded: bool = True) -> None:
        state = self._state
        if state.finished:
            return
        if succeeded and state.current is not None:
            state.completed += 1
        state.finished = True
        self._reporter._write_final(state, succeeded)


class ProgressReporter:
    """
    Textual stage bar for analysis runs, written to stderr.

        Analysis [##########----------]  50% (2/4) FDM band analysis

    Writes to the stream are serialised, so one reporter may be handed to a
    pipeline that serves several threads (their lines interleave).
    """

    def __init__(self, stream: Optional[TextIO] = None, enabled: bool = True) -> None:
        self.stream = stream or sys.stderr
        self.enabled = enabled
        self._lock = threading.Lock()

    def begin_run(self, total_stages: int, label: str = "Analysis") -> RunProgress:
        state = _RunState(label=label, total_stages=total_stages)
        self._render(state)
        return RunProgress(self, state)

    # Internal helpers --------------------------------------------------

    @staticmethod
    def _width() -> int:
        try:
            return shutil.get_terminal_size(fallback=(80, 20)).columns
        except (OSError, ValueError):
            return 80

    def _render(self, state: _RunState) -> None:
        if not self.enabled:
            return
        width = self._width()
        total = max(state.total_stages, 1)
        frac = max(0.0, min(1.0, state.completed / float(total)))
        bar_width = 20
        filled = int(bar_width * frac)
        bar = "#" * filled + "-" * (bar_width - filled)
        text = (
            f"{state.label} [{bar}] {int(frac * 100):3d}% "
            f"({state.completed}/{state.total_stages}) {state.current or ''}"
        )
        with self._lock:
            self._clear_line(width)
            self.stream.write(text[: width - 1])
            self.stream.flush()

    def _write_final(self, state: _RunState, succeeded: bool) -> None:
        if not self.enabled:
            return
        if succeeded:
            line = f"{state.label}: {state.completed}/{state.total_stages} stages done\n"
        elif state.current is not None:
            line = f"{state.label}: stopped during '{state.current}'\n"
        else:
            line = f"{state.label}: stopped before the first stage\n"
        with self._lock:
            self._clear_line(self._width())
            self.stream.write(line)
            self.stream.flush()

    def _clear_line(self, width: int) -> None:
        self.stream.write("\r" + " " * (width - 1) + "\r")


class NullProgressReporter(ProgressReporter):
    """Reporter that prints nothing; the default for programmatic use."""

    def __init__(self) -> None:
        super().__init__(enabled=False)
