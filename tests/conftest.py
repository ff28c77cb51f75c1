import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def no_progress(monkeypatch, m):
    """Suppress progress rendering in main module during tests."""
    calls = []

    def _stub(line: str):
        calls.append(line)

    monkeypatch.setattr(m, "_print_progress", _stub)
    return calls


@pytest.fixture()
def progress_recorder():
    """Provide a reusable progress callback and its call log."""
    calls = []

    def cb(done, total):
        calls.append((done, total))

    return cb, calls


@pytest.fixture()
def sample_file(tmp_path: Path):
    """Write a small text file with a skewed byte distribution."""
    path = tmp_path / "sample.txt"
    path.write_bytes(b"a" * 300 + b"bbbbcc\n" * 20 + bytes(range(32)))
    return path


def frequency_table(mapping):
    """Build a 256-entry table from a ``{symbol: count}`` mapping."""
    freqs = [0] * 256
    for symbol, count in mapping.items():
        freqs[symbol] = count
    return freqs


@pytest.fixture()
def freq_table_fn():
    """Fixture that provides the frequency_table helper."""
    return frequency_table
