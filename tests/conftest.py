"""
Pytest configuration and fixtures for chatmod tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Keep session log files out of the working tree
os.environ.setdefault("CHATMOD_LOG_DIR", tempfile.mkdtemp(prefix="chatmod-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from chatmod.datatypes.channel_config import RESERVED_COMMANDS  # noqa: E402
from chatmod.state.channel_state import ChannelStateStore  # noqa: E402


@pytest.fixture
def store() -> ChannelStateStore:
    """A fresh store with the default reserved commands and no persistence."""
    return ChannelStateStore(RESERVED_COMMANDS)


@pytest.fixture
def send() -> AsyncMock:
    """Stand-in for the ``send(channel, text)`` transport capability."""
    return AsyncMock()
