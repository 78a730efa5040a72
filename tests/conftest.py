"""
pytest configuration for ishremote tests.

Adds src directory to Python path for imports and isolates tests from the
developer's ISH_* environment.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

ISH_ENV_VARS = (
    "ISH_WS_BASE_URL",
    "ISH_API_TOKEN",
    "ISH_SESSION_NAME",
    "ISH_FOLDER_PATH_SEPARATOR",
    "ISH_TIMEOUT_SECONDS",
    "ISH_MAX_CONCURRENT_REQUESTS",
    "ISH_RESOLVE_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def clean_ish_environment(monkeypatch):
    """Remove ISH_* variables so tests only see what they set themselves."""
    for name in ISH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
