"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Multi-component tests (handler + repository + source)
    pytest -m contract      # Fedora REST request/response contract tests

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import json
import os
import sys

import pytest

# IMPORTANT: Patch tenacity's sleep function BEFORE any other imports
# This must happen before tenacity.Retrying class is defined (which captures defaults)
import tenacity.nap
tenacity.nap.sleep = lambda seconds: None

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    # Ensure src directory stays ahead of tests for module resolution
    sys.path.insert(1, tests_dir)

from fixtures import (
    DC_XML,
    RELS_EXT_XML,
    RELS_INT_XML,
    SAMPLE_CONFIG,
    MINIMAL_CONFIG,
)

from core.id_mapper import SimpleIdMapper
from core.recording_repository import RecordingRepository
from core.version_handler import ObjectVersionHandler


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests exercising several components together")
    config.addinivalue_line("markers", "contract: Contract tests validating Fedora REST requests")


# =============================================================================
# Datastream Content Fixtures
# =============================================================================

@pytest.fixture
def dc_xml():
    """oai_dc record with a title, two subjects and an identifier."""
    return DC_XML


@pytest.fixture
def rels_ext_xml():
    """RELS-EXT with two URI relationships and one literal."""
    return RELS_EXT_XML


@pytest.fixture
def rels_int_xml():
    """RELS-INT with one statement about DS1 and one about DS2."""
    return RELS_INT_XML


# =============================================================================
# Migration Fixtures
# =============================================================================

@pytest.fixture
def repository():
    """Empty in-memory target repository."""
    return RecordingRepository()


@pytest.fixture
def handler(repository):
    """Version handler writing to the in-memory repository under /migrated."""
    return ObjectVersionHandler(repository, SimpleIdMapper("/migrated"))


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def sample_config():
    """Complete configuration dictionary."""
    return json.loads(json.dumps(SAMPLE_CONFIG))


@pytest.fixture
def minimal_config():
    """Configuration with only the required settings."""
    return json.loads(json.dumps(MINIMAL_CONFIG))


@pytest.fixture
def config_file(tmp_path, sample_config):
    """Write the sample configuration to a temporary file and return its path."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(sample_config), encoding='utf-8')
    return str(path)
