from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from descent.utils import DEBUG_PY_TRACE_ENV  # noqa: E402
from tests.support.harness import build_bool_word_plan  # noqa: E402


@pytest.fixture(autouse=True)
def _no_py_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep diagnostics deterministic regardless of the caller's environment."""
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


@pytest.fixture
def err_stream() -> io.StringIO:
    """Error channel handed to the top-level parser."""
    return io.StringIO()


def pytest_report_header(config: pytest.Config) -> list[str]:
    """Surface sampling notes so truncated sweeps are visible in the run."""
    return build_bool_word_plan().notes
