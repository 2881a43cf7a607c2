"""
Version Delta Processor.

Replays one legacy object's version history against the target repository.
For every version, in order:

1. the target object is created on first encounter;
2. every changed datastream is classified once (DatastreamKind) and routed:
   DC and RELS-EXT are shredded into the object-level delta, RELS-INT into
   per-datastream deltas, redirect datastreams become redirect resources and
   everything else is uploaded as content with its own property delta;
3. the object-level delta receives the migration event (first version) and
   the mapped object properties (last version) and is applied;
4. the object is snapshotted as ``imported-version-<index>``. Snapshots are
   never revisited.

Within a version, content and redirect datastreams are processed before DC
and RELS-EXT, and RELS-INT last, so that inbound relationships can address
datastreams introduced by the same version. A RELS-INT statement about a
datastream that has not been migrated yet is skipped.

Any structural, transport or content I/O error aborts the object and is
raised as ObjectMigrationError. There is no partial-object retry.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from constants import DatastreamIds, MigrationDefaults, AuditEventTypes
from formats.dc import SimpleMetadataShredder
from formats.rels import InboundRelationshipShredder, OutboundRelationshipShredder
from plugins.protocols import (
    DatastreamPropertyUpdaterProtocol,
    IdMapperProtocol,
    PropertyMapperProtocol,
    TargetDatastreamProtocol,
    TargetRepositoryProtocol,
    TargetResourceProtocol,
)
from shared.models import ControlGroup, DatastreamKind, DatastreamVersion, ObjectVersion
from .datastream_properties import DatastreamPropertyUpdater
from .delta import TripleDelta, current_xsd_datetime, should_apply_delta
from .errors import MigrationError, ObjectMigrationError, StructuralError
from .property_mapping import PropertyMapper

logger = logging.getLogger(__name__)

PROCESSING_ORDER: Dict[DatastreamKind, int] = {
    DatastreamKind.MANAGED_CONTENT: 0,
    DatastreamKind.REDIRECT: 0,
    DatastreamKind.SIMPLE_METADATA: 1,
    DatastreamKind.OUTBOUND_RELATIONSHIPS: 1,
    DatastreamKind.INBOUND_RELATIONSHIPS: 2,
}


def classify_datastream(
    version: DatastreamVersion,
    import_external: bool = False,
    import_redirect: bool = False,
) -> DatastreamKind:
    """
    Decide how a changed datastream version is migrated.

    Args:
        version: The datastream version.
        import_external: Fetch and store E datastreams instead of redirecting.
        import_redirect: Fetch and store R datastreams instead of redirecting.
    """
    dsid = version.datastream_id
    if dsid == DatastreamIds.DC:
        return DatastreamKind.SIMPLE_METADATA
    if dsid == DatastreamIds.RELS_EXT:
        return DatastreamKind.OUTBOUND_RELATIONSHIPS
    if dsid == DatastreamIds.RELS_INT:
        return DatastreamKind.INBOUND_RELATIONSHIPS

    control_group = version.control_group
    if (control_group is ControlGroup.EXTERNAL and not import_external) or \
            (control_group is ControlGroup.REDIRECT and not import_redirect):
        return DatastreamKind.REDIRECT
    return DatastreamKind.MANAGED_CONTENT


def snapshot_label(version: ObjectVersion) -> str:
    return f"{MigrationDefaults.SNAPSHOT_LABEL_PREFIX}{version.version_index}"


@dataclass
class ObjectMigrationSession:
    """
    State of one object's migration; lives for one process_object_versions call.

    Attributes:
        pid: The legacy object being migrated.
        target_object: The target container, once created.
        datastreams: Target datastreams created so far, by datastream id.
        versions_processed: Number of versions fully applied and snapshotted.
    """
    pid: str
    target_object: Optional[TargetResourceProtocol] = None
    datastreams: Dict[str, TargetDatastreamProtocol] = field(default_factory=dict)
    versions_processed: int = 0


class ObjectVersionHandler:
    """
    Migrates legacy objects version by version.

    Mapping policy is injected: pass another PropertyMapperProtocol or
    DatastreamPropertyUpdaterProtocol implementation to change which triples
    are produced without touching the orchestration.
    """

    def __init__(
        self,
        repository: TargetRepositoryProtocol,
        id_mapper: IdMapperProtocol,
        property_mapper: Optional[PropertyMapperProtocol] = None,
        datastream_property_updater: Optional[DatastreamPropertyUpdaterProtocol] = None,
        import_external: bool = False,
        import_redirect: bool = False,
    ):
        """
        Initialize the handler.

        Args:
            repository: Target repository client.
            id_mapper: Maps legacy identifiers to target paths.
            property_mapper: Legacy-to-target property policy.
            datastream_property_updater: Datastream property policy.
            import_external: Fetch and store E datastreams (default: redirect).
            import_redirect: Fetch and store R datastreams (default: redirect).
        """
        if repository is None:
            raise ValueError("repository cannot be None")
        if id_mapper is None:
            raise ValueError("id_mapper cannot be None")

        self.repository = repository
        self.id_mapper = id_mapper
        self.property_mapper = property_mapper or PropertyMapper()
        self.datastream_property_updater = datastream_property_updater or DatastreamPropertyUpdater()
        self.import_external = import_external
        self.import_redirect = import_redirect

        self.simple_metadata_shredder = SimpleMetadataShredder()
        self.outbound_shredder = OutboundRelationshipShredder(self.property_mapper)
        self.inbound_shredder = InboundRelationshipShredder(self.property_mapper)

        self._dispatch: Dict[DatastreamKind, Callable[[ObjectMigrationSession, DatastreamVersion, TripleDelta], None]] = {
            DatastreamKind.SIMPLE_METADATA: self._migrate_simple_metadata,
            DatastreamKind.OUTBOUND_RELATIONSHIPS: self._migrate_outbound_relationships,
            DatastreamKind.INBOUND_RELATIONSHIPS: self._migrate_inbound_relationships,
            DatastreamKind.REDIRECT: self._migrate_redirect,
            DatastreamKind.MANAGED_CONTENT: self._migrate_content,
        }
        missing = set(DatastreamKind) - set(self._dispatch)
        if missing:
            raise TypeError(f"No handling for datastream kinds: {sorted(k.value for k in missing)}")

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def process_object_versions(self, versions: Iterable[ObjectVersion]) -> Optional[ObjectMigrationSession]:
        """
        Migrate every version of one object.

        Args:
            versions: The object's versions, oldest first.

        Returns:
            The finished session, or None if there were no versions.

        Raises:
            ObjectMigrationError: If any step failed; the object is left as
                far as it got.
        """
        session: Optional[ObjectMigrationSession] = None
        version_index: Optional[int] = None
        try:
            for version in versions:
                if session is None:
                    session = ObjectMigrationSession(pid=version.pid)
                version_index = version.version_index
                self._process_version(session, version)
                session.versions_processed += 1
        except ObjectMigrationError:
            raise
        except (MigrationError, OSError) as e:
            pid = session.pid if session is not None else "<unknown>"
            logger.debug(f"Aborting {pid}: {e}")
            raise ObjectMigrationError(pid, str(e), version_index) from e

        if session is not None:
            logger.debug(f"Migrated {session.versions_processed} versions of {session.pid}")
        return session

    def _process_version(self, session: ObjectMigrationSession, version: ObjectVersion) -> None:
        logger.debug(f"Considering object {version.pid} version at {version.version_date}.")

        if session.target_object is None:
            session.target_object = self.create_object(version)

        delta = TripleDelta()
        for ds_version, kind in self._ordered_changes(version):
            logger.debug(f"Considering changed datastream version {ds_version.version_id} ({kind.value})")
            self._dispatch[kind](session, ds_version, delta)

        self.update_object_properties(version, session.target_object, delta)
        session.target_object.create_version_snapshot(snapshot_label(version))

    def _ordered_changes(self, version: ObjectVersion) -> List[Tuple[DatastreamVersion, DatastreamKind]]:
        classified = [
            (ds_version, classify_datastream(ds_version, self.import_external, self.import_redirect))
            for ds_version in version.changed_datastreams
        ]
        return sorted(classified, key=lambda item: PROCESSING_ORDER[item[1]])

    # ------------------------------------------------------------------
    # Object level
    # ------------------------------------------------------------------

    def create_object(self, version: ObjectVersion) -> TargetResourceProtocol:
        path = self.id_mapper.map_object_path(version.object_info)
        logger.debug(f"Creating object {version.pid} at {path}")
        return self.repository.create_object(path)

    def update_object_properties(
        self,
        version: ObjectVersion,
        target: TargetResourceProtocol,
        delta: TripleDelta,
    ) -> bool:
        """
        Complete the object-level delta of a version and apply it.

        The delta may already hold triples from DC and RELS-EXT.

        Returns:
            Whether the delta was sent to the repository.
        """
        if version.is_first_version:
            now = current_xsd_datetime()
            if now is not None:
                delta.add_date_event(AuditEventTypes.MIGRATION, now)

        if version.is_last_version:
            for prop in version.object_properties:
                self.property_mapper.map_property(prop.name, prop.value, delta, True)

        return self.apply_delta(target, delta)

    def apply_delta(self, resource: TargetResourceProtocol, delta: TripleDelta) -> bool:
        """Send delta to resource if should_apply_delta allows it."""
        if not should_apply_delta(delta):
            logger.debug(f"Not updating {resource.path}: {delta!r} needs both removals and insertions")
            return False
        logger.debug(f"Updating {resource.path}: {delta!r}")
        resource.update_properties(delta)
        return True

    # ------------------------------------------------------------------
    # Datastream routes
    # ------------------------------------------------------------------

    def _migrate_simple_metadata(self, session, ds_version, delta) -> None:
        self.simple_metadata_shredder.shred(ds_version, delta)

    def _migrate_outbound_relationships(self, session, ds_version, delta) -> None:
        self.outbound_shredder.shred(ds_version, delta)

    def _migrate_inbound_relationships(self, session, ds_version, delta) -> None:
        for update in self.inbound_shredder.shred(ds_version, session.datastreams):
            self.apply_delta(update.resource, update.delta)

    def _migrate_redirect(self, session, ds_version, delta) -> None:
        url = ds_version.external_or_redirect_url
        if not url:
            raise StructuralError(
                f"Datastream {ds_version.version_id} of {session.pid} "
                f"({ds_version.control_group.value}) has no external URL"
            )
        path = self.id_mapper.map_datastream_path(ds_version.datastream_info)
        logger.debug(f"Redirecting {path} to {url}")
        self.repository.create_or_update_redirect_datastream(path, url)

    def _migrate_content(self, session, ds_version, delta) -> None:
        dsid = ds_version.datastream_id
        content = ds_version.get_content()

        datastream = session.datastreams.get(dsid)
        if datastream is None:
            path = self.id_mapper.map_datastream_path(ds_version.datastream_info)
            logger.debug(f"Creating datastream {path} ({len(content)} bytes)")
            datastream = self.repository.create_datastream(path, content, ds_version.mime_type)
            session.datastreams[dsid] = datastream
        else:
            logger.debug(f"Updating content of {datastream.path} ({len(content)} bytes)")
            datastream.update_content(content, ds_version.mime_type)

        self.apply_delta(datastream, self.datastream_property_updater.build_delta(ds_version))
