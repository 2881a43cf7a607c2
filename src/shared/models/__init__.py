"""
Shared data models for the migration engine.

This module contains the data classes used to describe legacy objects,
their versions and their datastreams.

Usage:
    from shared.models import ObjectVersion, DatastreamVersion, ControlGroup
"""

from .legacy import (
    ControlGroup,
    DatastreamKind,
    ObjectInfo,
    ObjectProperty,
    DatastreamInfo,
    DatastreamVersion,
    ObjectVersion,
)

__all__ = [
    # Enumerations
    "ControlGroup",
    "DatastreamKind",
    # Legacy object model
    "ObjectInfo",
    "ObjectProperty",
    "DatastreamInfo",
    "DatastreamVersion",
    "ObjectVersion",
]
