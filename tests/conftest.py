"""Pytest configuration and fixtures for devloop tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from helpers import FakeDaemon

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def fake_daemon():
    """A FakeDaemon with default behavior"""
    return FakeDaemon()


@pytest.fixture
def tags():
    """Base tag for the default test artifact"""
    return {"gcr.io/test/image": "gcr.io/test/image:tag"}
