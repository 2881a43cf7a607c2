"""
Simple-metadata shredder: applies a DC record directly to the object.
"""

import logging
from typing import Optional

from core.delta import TripleDelta
from shared.models import DatastreamVersion
from .dc_parser import DCParser

logger = logging.getLogger(__name__)


class SimpleMetadataShredder:
    """
    Shreds the DC datastream into object properties.

    Each represented element clears the object's current values for that
    element and inserts every value of the record as a literal.
    """

    def __init__(self, parser: Optional[DCParser] = None):
        self.parser = parser or DCParser()

    def shred(self, version: DatastreamVersion, delta: TripleDelta) -> int:
        """
        Add the DC record of version to delta.

        Returns:
            Number of element URIs migrated.
        """
        source = f"DC datastream {version.version_id} of {version.datastream_info.object_info.pid}"
        record = self.parser.parse(version.get_content(), source)

        for uri in record.represented_element_uris():
            delta.remove_values(uri)
            for value in record.values_for_uri(uri):
                logger.debug(f"Adding {uri} value {value}")
                delta.insert_literal(uri, value)
        return len(record)
