"""Pytest configuration and fixtures shared across all test modules.

Environment variables must be in place before anything imports
``heirlooms.core.config``, since settings are built at import time.
"""

import os

os.environ["APP_ENV"] = "testing"

os.environ.setdefault("TRANSCRIPTION_PROVIDER", "openai")
os.environ.setdefault("TRANSCRIPTION_MODEL", "whisper-1")
os.environ.setdefault("TRANSCRIPTION_API_KEY", "test-key-123")
os.environ.setdefault("MEDIA_CLOUDINARY_CLOUD_NAME", "heirlooms-test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from heirlooms.core import rate_limit  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Give every test a fresh process-wide limiter."""
    rate_limit.get_rate_limiter().reset()
    yield
    rate_limit.get_rate_limiter().reset()
