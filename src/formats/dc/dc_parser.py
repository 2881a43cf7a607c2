"""
Dublin Core Parser Module

Reads an oai_dc record into an ordered mapping of element URI to values::

    <oai_dc:dc xmlns:oai_dc="http://www.openarchives.org/OAI/2.0/oai_dc/"
               xmlns:dc="http://purl.org/dc/elements/1.1/">
      <dc:title>Sample</dc:title>
      <dc:subject>one</dc:subject>
      <dc:subject>two</dc:subject>
    </oai_dc:dc>

becomes ``{"http://purl.org/dc/elements/1.1/title": ["Sample"],
"http://purl.org/dc/elements/1.1/subject": ["one", "two"]}``.
"""

import logging
from typing import Dict, List, Optional

from lxml import etree

from constants import DublinCore
from core.errors import StructuralError

logger = logging.getLogger(__name__)


class DCRecord:
    """Values of a Dublin Core record, grouped by element URI in document order."""

    def __init__(self, values: Optional[Dict[str, List[str]]] = None):
        self._values: Dict[str, List[str]] = dict(values or {})

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"DCRecord({self._values!r})"

    def add(self, element_uri: str, value: str) -> None:
        self._values.setdefault(element_uri, []).append(value)

    def represented_element_uris(self) -> List[str]:
        return list(self._values)

    def values_for_uri(self, element_uri: str) -> List[str]:
        return list(self._values.get(element_uri, []))


class DCParser:
    """Parses oai_dc XML with lxml."""

    NAMESPACES = (DublinCore.ELEMENTS_NS, DublinCore.TERMS_NS)

    def parse(self, content: bytes, source: Optional[str] = None) -> DCRecord:
        """
        Parse DC content.

        Elements outside the DC elements/terms namespaces are ignored.

        Raises:
            StructuralError: If the content is not well-formed XML.
        """
        label = source or "DC datastream"
        if not content or not content.strip():
            raise StructuralError(f"Error parsing {label}: empty content")

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(content, parser=parser)
        except etree.XMLSyntaxError as e:
            raise StructuralError(f"Error parsing {label}: {e}") from e

        record = DCRecord()
        for element in root.iter(etree.Element):
            if element is root:
                continue
            qname = etree.QName(element)
            if qname.namespace not in self.NAMESPACES:
                continue
            record.add(f"{qname.namespace}{qname.localname}", element.text or "")

        logger.debug(f"Parsed {len(record)} DC elements from {label}")
        return record
