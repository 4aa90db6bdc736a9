"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, and gives
every test freshly loaded settings.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.config.settings import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment changes made by a test take effect."""
    reset_settings()
    yield
    reset_settings()
