"""Persistent load-time statistics kept in a QSettings registry."""
from __future__ import annotations

import datetime
import logging
from typing import Any, Iterable, List, Optional

import pandas as pd
from PyQt6 import QtCore

from data_model import LoadSession, PathTiming, PersistedStat
from errors import RegistryError
from loader_config import DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)

LOAD_TIME_KEY = "LoadTime"
LOAD_COUNT_KEY = "LoadCount"
LAST_RUN_KEY = "LastRun"


class SettingsRegistry:
    """Durable ``(section, key) -> value`` store.

    Backed by an INI file when ``path`` is given, otherwise by the platform's
    native settings location for ``organization``/``application``.
    """

    def __init__(self, path: Optional[str] = None, organization: str = DEFAULT_NAMESPACE, application: str = DEFAULT_NAMESPACE) -> None:
        if path:
            self.settings = QtCore.QSettings(path, QtCore.QSettings.Format.IniFormat)
        else:
            self.settings = QtCore.QSettings(organization, application)

    @staticmethod
    def _key(section: str, key: str) -> str:
        return section.replace("\\", "/") + "/" + key

    def contains(self, section: str, key: str) -> bool:
        return bool(self.settings.contains(self._key(section, key)))

    def read(self, section: str, key: str, default: Any = None) -> Any:
        full = self._key(section, key)
        if not self.settings.contains(full):
            return default
        if default is None:
            return self.settings.value(full)
        try:
            return self.settings.value(full, default, type=type(default))
        except TypeError as exc:
            raise RegistryError(f"cannot read {full}: {exc}") from exc

    def write(self, section: str, key: str, value: Any) -> None:
        self.settings.setValue(self._key(section, key), value)

    def sync(self) -> None:
        self.settings.sync()
        status = self.settings.status()
        if status != QtCore.QSettings.Status.NoError:
            raise RegistryError(f"settings registry {self.settings.fileName()} reported {status.name}")


class StatisticsStore:
    def __init__(self, registry: SettingsRegistry, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.registry = registry
        self.namespace = namespace

    def section(self, path: str) -> str:
        return f"{self.namespace}\\Profiler\\{path}"

    def read(self, path: str) -> PersistedStat:
        section = self.section(path)
        try:
            return PersistedStat(
                path=path,
                cumulative_time=float(self.registry.read(section, LOAD_TIME_KEY, 0.0)),
                cumulative_count=int(self.registry.read(section, LOAD_COUNT_KEY, 0)),
                last_run=self.registry.read(section, LAST_RUN_KEY),
            )
        except (TypeError, ValueError) as exc:
            raise RegistryError(f"corrupt statistics for {path}: {exc}") from exc

    def _history(self, path: str) -> Optional[PersistedStat]:
        try:
            return self.read(path)
        except RegistryError as exc:
            logger.warning("Ignoring load history for %s: %s", path, exc)
            return None

    def record_one(self, timing: PathTiming, now: Optional[datetime.datetime] = None) -> PersistedStat:
        section = self.section(timing.path)
        old = self.read(timing.path)
        stamp = (now or datetime.datetime.now()).isoformat(timespec="seconds")
        new = PersistedStat(
            path=timing.path,
            cumulative_time=old.cumulative_time + timing.duration,
            cumulative_count=old.cumulative_count + 1,
            last_run=stamp,
        )
        self.registry.write(section, LOAD_TIME_KEY, new.cumulative_time)
        self.registry.write(section, LOAD_COUNT_KEY, new.cumulative_count)
        self.registry.write(section, LAST_RUN_KEY, stamp)
        self.registry.sync()
        return new

    def record(self, path_timings: Iterable[PathTiming]) -> List[PersistedStat]:
        """Accumulate each folder's timing into the registry.

        Folders without any script are not persisted. A registry failure
        for one folder is logged and the remaining folders are still
        recorded.
        """
        written: List[PersistedStat] = []
        now = datetime.datetime.now()
        for timing in path_timings:
            if timing.file_count == 0:
                logger.debug("No scripts in %s; not recording", timing.path)
                continue
            try:
                written.append(self.record_one(timing, now))
            except RegistryError as exc:
                logger.warning("Could not record load time for %s: %s", timing.path, exc)
        return written

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def format_report(self, session: LoadSession) -> str:
        lines = ["", "Proxy Loader - Loading Statistics", ""]
        for timing in session.path_timings:
            lines.append(f"Path: {timing.path}")
            lines.append(f"        Load Time: {timing.duration:.3f}s")
            section = self.section(timing.path)
            if self.registry.contains(section, LOAD_COUNT_KEY):
                stat = self._history(timing.path)
                if stat is not None and stat.average is not None:
                    lines.append(f"Average Load Time: {stat.average:.3f}s ({stat.cumulative_count} times)")
            lines.append("")
        lines.append("-----")
        lines.append(f"SubTotal: {session.subtotal:.3f}s")
        lines.append("-----")
        lines.append(f"Total: {session.total_time:.3f}s")
        lines.append("=====")
        for name, duration in session.preload_timings.items():
            lines.append(f"{name}: {duration:.3f}s")
            lines.append("=====")
        return "\n".join(lines)

    def to_frame(self, session: LoadSession) -> pd.DataFrame:
        rows = []
        for timing in session.path_timings:
            stat = self._history(timing.path)
            rows.append(
                {
                    "path": timing.path,
                    "load_time": timing.duration,
                    "files": timing.file_count,
                    "average": stat.average if stat else None,
                    "load_count": stat.cumulative_count if stat else None,
                    "last_run": stat.last_run if stat else None,
                }
            )
        columns = ["path", "load_time", "files", "average", "load_count", "last_run"]
        return pd.DataFrame(rows, columns=columns)
