import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def isolate_imports(tmp_path_factory):
    """Drop plugin modules and search directories a test leaves behind."""
    base = str(tmp_path_factory.getbasetemp())
    path = list(sys.path)
    yield
    for name, module in list(sys.modules.items()):
        origin = getattr(module, "__file__", None) or ""
        if origin.startswith(base):
            del sys.modules[name]
    sys.path[:] = path


@pytest.fixture
def write_script():
    def _write(folder: Path, name: str, body: str = "") -> Path:
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_text(body, encoding="utf-8")
        return path

    return _write
