"""
Centralized test fixtures for the migrator test suite.

This package provides reusable fixtures for testing, including:
- DC, RELS-EXT and RELS-INT datastream content
- Builders for object and datastream versions
- Configuration fixtures

Usage:
    from fixtures import DC_XML, make_datastream_version, SAMPLE_CONFIG

Or use the pytest fixtures in conftest.py which import from here.
"""

from .legacy_fixtures import (
    SAMPLE_PID,
    # Datastream content
    DC_XML,
    MALFORMED_DC_XML,
    RELS_EXT_XML,
    RELS_EXT_FOREIGN_SUBJECT_XML,
    RELS_EXT_BNODE_OBJECT_XML,
    RELS_INT_XML,
    # Builders
    make_datastream_version,
    make_object_version,
    single_version,
)

from .config_fixtures import (
    SAMPLE_CONFIG,
    MINIMAL_CONFIG,
    INVALID_CONFIGS,
)

__all__ = [
    "SAMPLE_PID",
    "DC_XML",
    "MALFORMED_DC_XML",
    "RELS_EXT_XML",
    "RELS_EXT_FOREIGN_SUBJECT_XML",
    "RELS_EXT_BNODE_OBJECT_XML",
    "RELS_INT_XML",
    "make_datastream_version",
    "make_object_version",
    "single_version",
    "SAMPLE_CONFIG",
    "MINIMAL_CONFIG",
    "INVALID_CONFIGS",
]
