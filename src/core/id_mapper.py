"""
Path mapping from legacy identifiers to target repository paths.
"""

from shared.models import DatastreamInfo, ObjectInfo


class SimpleIdMapper:
    """
    Maps ``demo:1`` to ``<root_path>/demo:1`` and its datastream ``DS1`` to
    ``<root_path>/demo:1/DS1``.
    """

    def __init__(self, root_path: str = ""):
        root = (root_path or "").strip().rstrip("/")
        if root and not root.startswith("/"):
            root = "/" + root
        self.root_path = root

    def map_object_path(self, object_info: ObjectInfo) -> str:
        return f"{self.root_path}/{object_info.pid}"

    def map_datastream_path(self, datastream_info: DatastreamInfo) -> str:
        return f"{self.map_object_path(datastream_info.object_info)}/{datastream_info.datastream_id}"
