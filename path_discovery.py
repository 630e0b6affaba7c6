"""Plugin folder discovery and the search path plugins resolve imports from."""
from __future__ import annotations

import contextlib
import logging
import os
import sys
from typing import Iterable, Iterator, List, Optional

from errors import LocationNotFoundError

logger = logging.getLogger(__name__)


class SearchPath:
    """Ordered, de-duplicated directories consulted when plugins import by bare name.

    The loader passes this object around instead of mutating ``sys.path``
    directly; directories are only exposed to the import system inside
    :meth:`activated` or after an explicit :meth:`install`.
    """

    def __init__(self, paths: Optional[Iterable[str]] = None) -> None:
        self._paths: List[str] = []
        for p in paths or []:
            self.add(p)

    def add(self, path: str) -> bool:
        path = os.path.abspath(path)
        if path in self._paths:
            return False
        self._paths.append(path)
        return True

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and os.path.abspath(path) in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def resolve(self, relative_path: str) -> Optional[str]:
        for directory in self._paths:
            candidate = os.path.join(directory, relative_path)
            if os.path.isfile(candidate):
                return candidate
        return None

    @contextlib.contextmanager
    def activated(self) -> Iterator["SearchPath"]:
        added = [p for p in self._paths if p not in sys.path]
        sys.path.extend(added)
        try:
            yield self
        finally:
            for p in added:
                try:
                    sys.path.remove(p)
                except ValueError:
                    pass

    def install(self) -> None:
        for p in self._paths:
            if p not in sys.path:
                sys.path.append(p)


def _scan_location(location: str) -> List[str]:
    if not os.path.isdir(location):
        raise LocationNotFoundError(location)
    folders: List[str] = []
    for name in sorted(os.listdir(location)):
        if name in (".", ".."):
            continue
        path = os.path.abspath(os.path.join(location, name))
        if not os.path.isdir(path):
            continue
        folders.append(path)
    return folders


def discover(locations: Iterable[str], search_path: Optional[SearchPath] = None) -> List[str]:
    """Return the plugin folders under ``locations`` not yet on ``search_path``.

    Every folder returned has been registered on ``search_path``. A missing
    location is logged and skipped.
    """
    if search_path is None:
        search_path = SearchPath()
    found: List[str] = []
    for location in locations:
        try:
            candidates = _scan_location(location)
        except LocationNotFoundError as exc:
            logger.warning("Skipping location: %s", exc)
            continue
        for path in candidates:
            if path in search_path:
                continue
            search_path.add(path)
            found.append(path)
    logger.debug("Discovered %d plugin folders", len(found))
    return found
