"""
Object source reading exported object histories from JSON manifests.

Each ``*.json`` file in the source directory describes one legacy object::

    {
      "pid": "demo:1",
      "properties": {
        "info:fedora/fedora-system:def/model#label": "Sample object"
      },
      "versions": [
        {
          "date": "2015-01-01T00:00:00.000Z",
          "datastreams": [
            {"id": "DC", "control_group": "X", "content_file": "demo_1/DC.0.xml"},
            {"id": "DS1", "control_group": "M", "version_id": "DS1.0",
             "mime_type": "text/plain", "created": "2015-01-01T00:00:00.000Z",
             "label": "Text", "content": "abc"}
          ]
        }
      ]
    }

Versions are listed oldest first; each lists only the datastream versions
that changed at that point. Content is loaded lazily, when the handler asks
for it.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import requests

from constants import APIConfig, MigrationDefaults
from core.errors import ManifestError, TransportError
from plugins.protocols import ObjectVersionHandlerProtocol
from shared.models import (
    ControlGroup,
    DatastreamInfo,
    DatastreamVersion,
    ObjectInfo,
    ObjectProperty,
    ObjectVersion,
)

logger = logging.getLogger(__name__)


def fetch_url(url: str, session: Optional[requests.Session] = None) -> bytes:
    """
    Fetch external datastream content.

    Raises:
        TransportError: If the request fails or returns an error status.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=APIConfig.CONTENT_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Could not fetch content from {url}: {e}") from e
    return response.content


class ManifestObjectProcessor:
    """One manifest: an object and its version history."""

    def __init__(self, manifest: Dict[str, Any], manifest_path: Path, session: Optional[requests.Session] = None):
        self.manifest_path = manifest_path
        self.session = session
        pid = manifest.get('pid')
        if not pid or not isinstance(pid, str):
            raise ManifestError(f"{manifest_path}: 'pid' is required")
        versions = manifest.get('versions', [])
        if not isinstance(versions, list):
            raise ManifestError(f"{manifest_path}: 'versions' must be a list")
        properties = manifest.get('properties', {})
        if not isinstance(properties, dict):
            raise ManifestError(f"{manifest_path}: 'properties' must be an object")

        self._object_info = ObjectInfo(pid)
        self._versions = versions
        self._properties = [ObjectProperty(name, str(value)) for name, value in properties.items()]

    @property
    def object_info(self) -> ObjectInfo:
        return self._object_info

    def __repr__(self) -> str:
        return f"ManifestObjectProcessor({self._object_info.pid!r}, {str(self.manifest_path)!r})"

    def process_object(self, handler: ObjectVersionHandlerProtocol) -> Any:
        return handler.process_object_versions(self.build_versions())

    def build_versions(self) -> List[ObjectVersion]:
        """
        Build the object's version sequence.

        Raises:
            ManifestError: If a version or datastream entry is malformed.
        """
        first_seen: Dict[str, int] = {}
        last_seen: Dict[str, int] = {}
        for position, entry in enumerate(self._versions):
            for ds_entry in self._datastream_entries(entry, position):
                dsid = self._required(ds_entry, 'id', position)
                first_seen.setdefault(dsid, position)
                last_seen[dsid] = position

        total = len(self._versions)
        versions = []
        for position, entry in enumerate(self._versions):
            changed = [
                self._datastream_version(ds_entry, position, first_seen, last_seen)
                for ds_entry in self._datastream_entries(entry, position)
            ]
            versions.append(ObjectVersion(
                object_info=self._object_info,
                version_date=self._required(entry, 'date', position),
                version_index=position + 1,
                is_first_version=position == 0,
                is_last_version=position == total - 1,
                object_properties=list(self._properties),
                changed_datastreams=changed,
            ))
        return versions

    def _datastream_entries(self, entry: Any, position: int) -> List[Dict[str, Any]]:
        if not isinstance(entry, dict):
            raise ManifestError(f"{self.manifest_path}: version {position + 1} must be an object")
        datastreams = entry.get('datastreams', [])
        if not isinstance(datastreams, list) or not all(isinstance(d, dict) for d in datastreams):
            raise ManifestError(f"{self.manifest_path}: version {position + 1} 'datastreams' must be a list of objects")
        return datastreams

    def _required(self, entry: Dict[str, Any], key: str, position: int) -> str:
        value = entry.get(key)
        if not value or not isinstance(value, str):
            raise ManifestError(f"{self.manifest_path}: version {position + 1} entry is missing '{key}'")
        return value

    def _optional(self, entry: Dict[str, Any], key: str) -> Optional[str]:
        value = entry.get(key)
        if value is not None and not isinstance(value, str):
            raise ManifestError(f"{self.manifest_path}: datastream {entry['id']} '{key}' must be a string")
        return value

    def _datastream_version(
        self,
        entry: Dict[str, Any],
        position: int,
        first_seen: Dict[str, int],
        last_seen: Dict[str, int],
    ) -> DatastreamVersion:
        dsid = entry['id']
        try:
            control_group = ControlGroup.from_code(entry.get('control_group', 'M'))
        except ValueError as e:
            raise ManifestError(f"{self.manifest_path}: datastream {dsid}: {e}")

        url = self._optional(entry, 'url')
        info = DatastreamInfo(self._object_info, dsid, control_group, self._optional(entry, 'state'))
        return DatastreamVersion(
            datastream_info=info,
            version_id=self._optional(entry, 'version_id') or f"{dsid}.{position}",
            mime_type=self._optional(entry, 'mime_type'),
            created=self._optional(entry, 'created'),
            label=self._optional(entry, 'label'),
            format_uri=self._optional(entry, 'format_uri'),
            external_or_redirect_url=url,
            is_first_version_in_object=first_seen[dsid] == position,
            is_last_version_in_object=last_seen[dsid] == position,
            content_loader=self._content_loader(entry, control_group, url),
        )

    def _content_loader(
        self,
        entry: Dict[str, Any],
        control_group: ControlGroup,
        url: Optional[str],
    ) -> Optional[Callable[[], bytes]]:
        if 'content' in entry:
            content = entry['content']
            if not isinstance(content, str):
                raise ManifestError(f"{self.manifest_path}: datastream {entry['id']} 'content' must be a string")
            return lambda: content.encode('utf-8')

        if 'content_file' in entry:
            content_file = entry['content_file']
            if not isinstance(content_file, str):
                raise ManifestError(f"{self.manifest_path}: datastream {entry['id']} 'content_file' must be a string")
            content_path = self.manifest_path.parent / content_file

            def read_file() -> bytes:
                try:
                    return content_path.read_bytes()
                except OSError as e:
                    raise ManifestError(f"Cannot read content file {content_path}: {e}") from e
            return read_file

        if url and control_group in (ControlGroup.EXTERNAL, ControlGroup.REDIRECT):
            return lambda: fetch_url(url, self.session)

        return None


class ManifestObjectSource:
    """
    Yields one ManifestObjectProcessor per manifest in a directory, in file
    name order. Manifests are read as they are reached.
    """

    def __init__(self, directory: str, session: Optional[requests.Session] = None):
        self.directory = Path(directory)
        self.session = session
        if not self.directory.is_dir():
            raise ManifestError(f"Source directory not found: {directory}")

    def manifest_paths(self) -> List[Path]:
        return sorted(self.directory.glob(MigrationDefaults.MANIFEST_GLOB))

    def __iter__(self) -> Iterator[ManifestObjectProcessor]:
        for path in self.manifest_paths():
            yield self.load(path)

    def load(self, path: Path) -> ManifestObjectProcessor:
        """Parse one manifest file."""
        logger.debug(f"Reading manifest {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                manifest = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in manifest {path} at line {e.lineno}: {e.msg}")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(f"Cannot read manifest {path}: {e}")

        if not isinstance(manifest, dict):
            raise ManifestError(f"Manifest {path} must contain a JSON object")
        return ManifestObjectProcessor(manifest, path, self.session)
