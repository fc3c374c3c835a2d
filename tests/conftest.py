"""Pytest bootstrap: local imports and per-test package state.

The ``pytest`` console script can run with a sys.path that excludes the
repository root, so the root is inserted first. The shared outline behind
the module-level facade and the package file handler are reset after every
test.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def reset_shared_outline():
    import lazyoutline
    from lazyoutline.log import configure_logging

    yield
    lazyoutline._OUTLINE = None
    configure_logging("WARNING", log_file=False)
