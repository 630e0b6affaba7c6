"""Loads a single plugin script (source or compiled) as a module."""
from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import os
import re
import sys
from types import ModuleType
from typing import Dict, Optional

from errors import LoadClassError
from path_discovery import SearchPath

logger = logging.getLogger(__name__)

# Failures raised while a script is parsed or initialised.
LOAD_ERRORS = (SyntaxError, ImportError, NotImplementedError)

# Corrupt or truncated byte-code surfaces as these while reading the code object.
CODE_ERRORS = LOAD_ERRORS + (EOFError, ValueError)

_NON_IDENT = re.compile(r"\W")


def _identifier(text: str) -> str:
    ident = _NON_IDENT.sub("_", text)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    return ident


class ScriptLoader:
    """Executes plugin files once each, like a ``require``."""

    def __init__(self, search_path: Optional[SearchPath] = None) -> None:
        self.search_path = search_path if search_path is not None else SearchPath()
        self.loaded: Dict[str, ModuleType] = {}

    def module_name(self, path: str) -> str:
        stem = _identifier(os.path.splitext(os.path.basename(path))[0])
        existing = sys.modules.get(stem)
        if existing is not None and self._same_file(existing, path):
            return stem
        if existing is None and not self._shadows_module(stem):
            return stem
        folder = _identifier(os.path.basename(os.path.dirname(path)))
        return f"_plugin_{folder}_{stem}"

    def _shadows_module(self, name: str) -> bool:
        """True when ``name`` is importable from somewhere other than the plugin folders."""
        if name in getattr(sys, "stdlib_module_names", ()) or name in sys.builtin_module_names:
            return True
        try:
            found = importlib.util.find_spec(name)
        except (ImportError, ValueError):
            return False
        if found is None:
            return False
        origin = found.origin
        if not origin or not os.path.isabs(origin):
            return True
        return os.path.dirname(os.path.abspath(origin)) not in self.search_path

    @staticmethod
    def _same_file(module: ModuleType, path: str) -> bool:
        origin = getattr(module, "__file__", None)
        if not origin:
            return False
        try:
            return os.path.samefile(origin, path)
        except OSError:
            return False

    def _spec_for(self, name: str, path: str):
        if path.lower().endswith(".pyc"):
            loader = importlib.machinery.SourcelessFileLoader(name, path)
        else:
            loader = importlib.machinery.SourceFileLoader(name, path)
        return importlib.util.spec_from_file_location(name, path, loader=loader)

    def load(self, path: str) -> ModuleType:
        """Load ``path`` and return its module.

        Raises LoadClassError for syntax, import and not-implemented errors
        and for unreadable byte-code; anything else raised by the module
        body propagates unchanged.
        """
        path = os.path.abspath(path)
        if path in self.loaded:
            return self.loaded[path]
        name = self.module_name(path)
        existing = sys.modules.get(name)
        if existing is not None and self._same_file(existing, path):
            self.loaded[path] = existing
            return existing
        spec = self._spec_for(name, path)
        if spec is None or spec.loader is None:
            raise LoadClassError(path, message=f"cannot create a loader for {path}")
        try:
            code = spec.loader.get_code(name)
        except CODE_ERRORS as exc:
            raise LoadClassError(path, exc) from exc
        if code is None:
            raise LoadClassError(path, message=f"no code object in {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            with self.search_path.activated():
                exec(code, module.__dict__)
        except LOAD_ERRORS as exc:
            sys.modules.pop(name, None)
            raise LoadClassError(path, exc) from exc
        except BaseException:
            sys.modules.pop(name, None)
            raise
        self.loaded[path] = module
        logger.debug("Loaded %s as %s", path, name)
        return module
