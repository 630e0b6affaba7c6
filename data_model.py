"""Records produced by one loader run.

LoadResult, PathTiming and LoadFailure are created during the load pass and
never mutated afterwards. LoadSession groups everything one run produced so
the statistics store, the error reporter and the dialogs can consume it
without reaching back into the loader.
"""
from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


class LoadOutcome(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class LoadFailure:
    file: str
    folder: str
    message: str
    trace: str
    duration: float = 0.0

    def format(self) -> str:
        lines = [
            "=== Load Error ===",
            f"File: {os.path.basename(self.file)}",
            f"Path: {self.folder}",
            "--- Error Message ---",
            self.message,
        ]
        if self.trace:
            lines.append(self.trace.rstrip("\n"))
        return "\n".join(lines) + "\n\n"


@dataclass(frozen=True)
class LoadResult:
    file_path: str
    folder: str
    duration: float
    outcome: LoadOutcome = LoadOutcome.SUCCESS
    failure: Optional[LoadFailure] = None

    @property
    def ok(self) -> bool:
        return self.outcome is LoadOutcome.SUCCESS


@dataclass(frozen=True)
class PathTiming:
    path: str
    duration: float
    file_count: int = 0


@dataclass
class PersistedStat:
    path: str
    cumulative_time: float = 0.0
    cumulative_count: int = 0
    last_run: Optional[str] = None

    @property
    def average(self) -> Optional[float]:
        if self.cumulative_count <= 0:
            return None
        return self.cumulative_time / self.cumulative_count


class ErrorLog:
    """Accumulated failure reports of one run."""

    def __init__(self) -> None:
        self.entries: List[LoadFailure] = []

    def append(self, failure: LoadFailure) -> None:
        self.entries.append(failure)

    @property
    def text(self) -> str:
        return "".join(entry.format() for entry in self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LoadFailure]:
        return iter(self.entries)


@dataclass
class LoadSession:
    folders: List[str] = field(default_factory=list)
    results: List[LoadResult] = field(default_factory=list)
    path_timings: List[PathTiming] = field(default_factory=list)
    error_log: ErrorLog = field(default_factory=ErrorLog)
    preload_timings: Dict[str, float] = field(default_factory=dict)
    locations: List[str] = field(default_factory=list)
    total_time: float = 0.0

    # ------------------------------------------------------------------
    # Session accessors
    # ------------------------------------------------------------------
    @property
    def load_results(self) -> List[LoadResult]:
        """Files that loaded successfully, in load order."""
        return [r for r in self.results if r.ok]

    def file_load_times(self) -> List[Tuple[str, float]]:
        return [(r.file_path, r.duration) for r in self.load_results]

    def load_times(self) -> List[PathTiming]:
        return list(self.path_timings)

    def results_for(self, folder: str) -> List[LoadResult]:
        return [r for r in self.results if r.folder == folder]

    def timing_for(self, folder: str) -> Optional[PathTiming]:
        for timing in self.path_timings:
            if timing.path == folder:
                return timing
        return None

    @property
    def subtotal(self) -> float:
        return sum(t.duration for t in self.path_timings)
