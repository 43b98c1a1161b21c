"""Shared pytest fixtures for Rosetta tests."""

from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from rosetta.core.cache import reset_caches
from rosetta.core.classify import set_type_probe
from rosetta.core.config import reload_config

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


@pytest.fixture(autouse=True)
def clean_caches():
    """Start and finish every test with empty caches and the default probe."""
    reload_config()
    set_type_probe(None)
    reset_caches()
    yield
    set_type_probe(None)
    reset_caches()
    reload_config()


@pytest.fixture
def java_sample_path() -> Path:
    """Path to Java sample fixtures."""
    return Path(__file__).parent / "fixtures" / "java_sample"
