"""ProxyLoader runs one complete startup pass.

Discovery registers every plugin folder on the search path before anything
is loaded, so the order folders are processed in does not matter to
plugins importing each other by name. Load errors are collected and shown
once, after the pass and any other pending startup work has finished.
"""
from __future__ import annotations

import logging
import os
import time
from typing import List, Optional, Tuple

from data_model import LoadFailure, LoadSession, PathTiming
from error_reporter import ErrorReporter
from errors import LoadClassError
from loader_config import LoaderConfig
from path_discovery import SearchPath, discover
from plugin_system import PluginLoader
from script_loader import ScriptLoader
from stats_store import SettingsRegistry, StatisticsStore

logger = logging.getLogger(__name__)


class ProxyLoader:
    def __init__(
        self,
        config: Optional[LoaderConfig] = None,
        registry: Optional[SettingsRegistry] = None,
        reporter: Optional[ErrorReporter] = None,
        search_path: Optional[SearchPath] = None,
    ) -> None:
        self.config = config or LoaderConfig()
        self.search_path = search_path if search_path is not None else SearchPath()
        self.script_loader = ScriptLoader(self.search_path)
        self.pipeline = PluginLoader(self.script_loader, self.config.extensions, self.config.sort_files)
        if registry is None:
            registry = SettingsRegistry(self.config.settings_path, self.config.namespace, self.config.namespace)
        self.stats = StatisticsStore(registry, self.config.namespace)
        self.reporter = reporter or ErrorReporter()
        self.session: Optional[LoadSession] = None

    # ------------------------------------------------------------------
    def _preload(self, session: LoadSession) -> None:
        for rel in self.config.preload:
            path = self.search_path.resolve(rel)
            if path is None:
                session.error_log.append(
                    LoadFailure(file=rel, folder="", message=f"cannot resolve '{rel}' on the plugin search path", trace="")
                )
                continue
            start = time.perf_counter()
            try:
                self.script_loader.load(path)
            except LoadClassError as exc:
                session.error_log.append(
                    LoadFailure(file=path, folder=os.path.dirname(path), message=exc.message, trace=exc.trace,
                                duration=time.perf_counter() - start)
                )
                continue
            session.preload_timings[rel] = time.perf_counter() - start

    def run(self) -> LoadSession:
        time_start = time.perf_counter()
        session = LoadSession(locations=list(self.config.locations))
        session.folders = discover(self.config.locations, self.search_path)
        self._preload(session)
        logger.info("Loading %d plugins from %d locations...", len(session.folders), len(self.config.locations))
        self.pipeline.load_all(session.folders, session)
        session.total_time = time.perf_counter() - time_start
        logger.info("Done! %.3fs", session.total_time)
        self.session = session
        self.stats.record(session.path_timings)
        self.reporter.report(session.error_log)
        return session

    # ------------------------------------------------------------------
    # Accessors for the last run
    # ------------------------------------------------------------------
    def total_load_time(self) -> float:
        return self.session.total_time if self.session else 0.0

    def load_times(self) -> List[PathTiming]:
        return self.session.load_times() if self.session else []

    def file_load_times(self) -> List[Tuple[str, float]]:
        return self.session.file_load_times() if self.session else []

    def report_text(self) -> str:
        if self.session is None:
            return ""
        return self.stats.format_report(self.session)
