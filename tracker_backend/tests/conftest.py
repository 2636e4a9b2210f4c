import sys
from pathlib import Path

import pytest

# Ensure tracker_backend is importable for tests
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tracker_backend.tests._fakes import FakeClock, make_settings  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def settings():
    return make_settings()
