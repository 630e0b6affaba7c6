"""Load pass over discovered plugin folders."""
from __future__ import annotations

import logging
import os
import time
from typing import Callable, Iterable, List, Optional, Sequence

from data_model import LoadFailure, LoadOutcome, LoadResult, LoadSession, PathTiming
from errors import LoadClassError
from loader_config import DEFAULT_EXTENSIONS
from script_loader import ScriptLoader

logger = logging.getLogger(__name__)


class PluginLoader:
    def __init__(
        self,
        script_loader: ScriptLoader,
        extensions: Sequence[str] = tuple(DEFAULT_EXTENSIONS),
        sort_files: bool = True,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.script_loader = script_loader
        self.extensions = tuple(e.lower() for e in extensions)
        self.sort_files = sort_files
        self.clock = clock

    def script_files(self, folder: str) -> List[str]:
        if not os.path.isdir(folder):
            return []
        names = os.listdir(folder)
        if self.sort_files:
            names.sort()
        files: List[str] = []
        for fname in names:
            if not fname.lower().endswith(self.extensions):
                continue
            path = os.path.join(folder, fname)
            if os.path.isfile(path):
                files.append(path)
        return files

    # ------------------------------------------------------------------
    def load_file(self, path: str, folder: str, session: LoadSession) -> LoadResult:
        start = self.clock()
        try:
            self.script_loader.load(path)
        except LoadClassError as exc:
            duration = self.clock() - start
            failure = LoadFailure(file=path, folder=folder, message=exc.message, trace=exc.trace, duration=duration)
            logger.debug("%s", failure.format())
            session.error_log.append(failure)
            result = LoadResult(path, folder, duration, LoadOutcome.FAILURE, failure)
        else:
            result = LoadResult(path, folder, self.clock() - start)
        session.results.append(result)
        return result

    def load_folder(self, folder: str, session: LoadSession) -> PathTiming:
        attempted = [self.load_file(path, folder, session) for path in self.script_files(folder)]
        timing = PathTiming(path=folder, duration=sum((r.duration for r in attempted), 0.0), file_count=len(attempted))
        session.path_timings.append(timing)
        return timing

    def load_all(self, folders: Iterable[str], session: Optional[LoadSession] = None) -> LoadSession:
        if session is None:
            session = LoadSession()
        for folder in folders:
            if folder not in session.folders:
                session.folders.append(folder)
            self.load_folder(folder, session)
        return session
