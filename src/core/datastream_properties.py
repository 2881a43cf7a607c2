"""
Datastream property delta.

Builds the property update for a changed content datastream. Facts known
only at creation (migration event, creation date) are written on the
datastream's first version; everything else is taken from its last version.
"""

import logging

from constants import AuditEventTypes, TargetPredicates
from shared.models import DatastreamVersion
from .delta import TripleDelta, current_xsd_datetime

logger = logging.getLogger(__name__)


class DatastreamPropertyUpdater:
    """
    Default policy for datastream properties.

    First version in object:
        migration event (now), created date -> premis:hasDateCreatedByApplication
    Last version in object:
        datastream id -> dcterms:identifier
        created date  -> content modification event
        label         -> dcterms:title
        state         -> access#objState
        format URI    -> premis:formatDesignation
    """

    def build_delta(self, version: DatastreamVersion) -> TripleDelta:
        delta = TripleDelta()
        created = version.created

        if version.is_first_version_in_object:
            now = current_xsd_datetime()
            if now is not None:
                delta.add_date_event(AuditEventTypes.MIGRATION, now)
            if created is not None:
                delta.update_date_triple(TargetPredicates.PREMIS_DATE_CREATED_BY_APPLICATION, created)

        if version.is_last_version_in_object:
            dsid = version.datastream_id
            if dsid is not None:
                delta.update_literal_triple(TargetPredicates.DCTERMS_IDENTIFIER, dsid)

            # The creation date of the last version is when content last changed.
            if created is not None:
                delta.add_date_event(AuditEventTypes.CONTENT_MODIFICATION, created)

            if version.label is not None:
                delta.update_literal_triple(TargetPredicates.DCTERMS_TITLE, version.label)

            state = version.datastream_info.state
            if state is not None:
                delta.update_literal_triple(TargetPredicates.ACCESS_OBJ_STATE, state)

            if version.format_uri is not None:
                delta.update_literal_triple(TargetPredicates.PREMIS_FORMAT_DESIGNATION, version.format_uri)

        logger.debug(f"Datastream {_qualified_id(version)} ({version.version_id}) property delta: {delta!r}")
        return delta


def _qualified_id(version: DatastreamVersion) -> str:
    return f"{version.datastream_info.object_info.pid}/{version.datastream_id}"
