"""
Pytest configuration and fixtures for the locale negotiator tests
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from uri_locale.interceptor import InterceptorOptions, build_config  # noqa: E402
from utils.mocks import RecordingResolver  # noqa: E402


@pytest.fixture
def resolver():
    return RecordingResolver()


@pytest.fixture
def en_fr_config():
    return build_config("en", InterceptorOptions(supported_locales=["en", "fr"]))
