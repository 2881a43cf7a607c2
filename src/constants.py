"""
Centralized configuration constants for the Fedora 3 to Fedora 4 migrator.

This module provides a single source of truth for the vocabulary URIs,
datastream identifiers, default values and exit codes used throughout
the application.
"""

from enum import IntEnum
from typing import Final

# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Validation/syntax error
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3
    API_ERROR = 4
    CANCELLED = 7
    MIGRATION_ERROR = 8


# ============================================================================
# Legacy (Fedora 3) Vocabulary
# ============================================================================

class LegacyPredicates:
    """Fedora 3 object property and relationship predicates."""

    CREATED_DATE: Final[str] = "info:fedora/fedora-system:def/model#createdDate"
    """Object creation date property."""

    STATE: Final[str] = "info:fedora/fedora-system:def/model#state"
    """Object state property (Active/Inactive/Deleted)."""

    LABEL: Final[str] = "info:fedora/fedora-system:def/model#label"
    """Object label property."""

    LAST_MODIFIED_DATE: Final[str] = "info:fedora/fedora-system:def/view#lastModifiedDate"
    """Last modification date; migrated as an audit event, never a property."""

    OBJECT_URI_PREFIX: Final[str] = "info:fedora/"
    """Prefix of the canonical URI of a legacy object."""


class DatastreamIds:
    """Datastream identifiers with dedicated migration handling."""

    DC: Final[str] = "DC"
    """Dublin Core record, shredded into object properties."""

    RELS_EXT: Final[str] = "RELS-EXT"
    """Outbound relationships of the object."""

    RELS_INT: Final[str] = "RELS-INT"
    """Relationships whose subjects are the object's own datastreams."""


class DublinCore:
    """Namespaces recognized inside an oai_dc record."""

    ELEMENTS_NS: Final[str] = "http://purl.org/dc/elements/1.1/"
    TERMS_NS: Final[str] = "http://purl.org/dc/terms/"


# ============================================================================
# Target (Fedora 4) Vocabulary
# ============================================================================

class TargetPredicates:
    """Predicates written to Fedora 4 resources."""

    PREMIS_DATE_CREATED_BY_APPLICATION: Final[str] = "http://www.loc.gov/premis/rdf/v1#hasDateCreatedByApplication"
    PREMIS_FORMAT_DESIGNATION: Final[str] = "http://www.loc.gov/premis/rdf/v1#formatDesignation"
    PREMIS_HAS_EVENT: Final[str] = "http://www.loc.gov/premis/rdf/v1#hasEvent"
    PREMIS_HAS_EVENT_TYPE: Final[str] = "http://www.loc.gov/premis/rdf/v1#hasEventType"
    PREMIS_HAS_EVENT_DATE_TIME: Final[str] = "http://www.loc.gov/premis/rdf/v1#hasEventDateTime"
    ACCESS_OBJ_STATE: Final[str] = "http://fedora.info/definitions/1/0/access/objState"
    DCTERMS_IDENTIFIER: Final[str] = "http://purl.org/dc/terms/identifier"
    DCTERMS_TITLE: Final[str] = "http://purl.org/dc/terms/title"


class AuditEventTypes:
    """Event type URIs used for provenance events."""

    MIGRATION: Final[str] = "http://id.loc.gov/vocabulary/preservation/eventType/mig"
    """The resource was migrated (timestamped with the migration run)."""

    CONTENT_MODIFICATION: Final[str] = "http://fedora.info/definitions/v4/audit#contentModification"
    """Datastream content was last modified."""

    METADATA_MODIFICATION: Final[str] = "http://fedora.info/definitions/v4/audit#metadataModification"
    """Object metadata was last modified."""


class SparqlPrefixes:
    """Prefixes declared on every generated SPARQL update."""

    PREFIXES: Final[tuple] = (
        ("dcterms", "http://purl.org/dc/terms/"),
        ("fedoraaccess", "http://fedora.info/definitions/1/0/access/"),
        ("fedora3model", "info:fedora/fedora-system:def/model#"),
    )


# ============================================================================
# Migration Defaults
# ============================================================================

class MigrationDefaults:
    """Defaults for the migration run."""

    SNAPSHOT_LABEL_PREFIX: Final[str] = "imported-version-"
    """Prefix of the snapshot taken after each migrated version."""

    NO_LIMIT: Final[int] = -1
    """Item limit meaning 'migrate every object'."""

    PLACEHOLDER_PREFIX: Final[str] = "o"
    """Prefix of the SPARQL variables used in delete patterns."""

    MANIFEST_GLOB: Final[str] = "*.json"
    """Files picked up by the manifest object source."""


# ============================================================================
# API Configuration
# ============================================================================

class APIConfig:
    """Fedora REST API configuration constants."""

    DEFAULT_BASE_URL: Final[str] = "http://localhost:8080/rest"
    """Default Fedora 4 REST endpoint."""

    DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
    """Default HTTP request timeout."""

    CONTENT_TIMEOUT_SECONDS: Final[int] = 300
    """Timeout for binary uploads and external content fetches."""

    MAX_RETRY_ATTEMPTS: Final[int] = 5
    """Attempts for requests the server rejected as transient (429/503)."""

    SPARQL_UPDATE_CONTENT_TYPE: Final[str] = "application/sparql-update"

    METADATA_SUFFIX: Final[str] = "/fcr:metadata"
    """Path suffix addressing the RDF description of a binary."""

    VERSIONS_SUFFIX: Final[str] = "/fcr:versions"
    """Path suffix addressing the version list of a resource."""


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log format string."""

    DEFAULT_LOG_FILENAME: Final[str] = "migration.log"
    """File name used when falling back to another log directory."""
