import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

SAMPLE_TEXTS = [
    "a",
    "ab",
    "abracadabra",
    "The quick brown fox jumps over the lazy dog.\n" * 3,
    "line one\r\nline two\r\n",
    "key:value\nspace:3\n::\n",
    "tabs\tand\x0bvertical\x0cfeeds separator",
    "ünïcödé ✓ 日本語 🙂🙂🙂",
]


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture(params=SAMPLE_TEXTS)
def sample_text(request):
    """Texts covering line breaks, colons and non-ASCII symbols."""
    return request.param


@pytest.fixture()
def text_file(tmp_path: Path):
    """Write a small mixed-content text file and return its path.

    Uses ``newline=""`` so the ``\\r\\n`` in the content is kept as is.
    """
    path = tmp_path / "notes.txt"
    content = "line one\r\nline: two\n\tünïcode ✓\n\n"
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path, content
