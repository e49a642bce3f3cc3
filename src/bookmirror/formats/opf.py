# ABOUTME: metadata.opf sidecar parsing using lxml.
# ABOUTME: Validates the package/metadata shape and extracts a normalized BookMetadata.

import logging
import math
from pathlib import Path

from lxml import etree

from bookmirror.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"

SERIES_META = "calibre:series"
SERIES_INDEX_META = "calibre:series_index"

# Identifier schemes in order of preference; anything else falls back to the first.
_PREFERRED_SCHEMES = ("uuid", "calibre")


class MetadataFormatError(Exception):
    """Raised when a sidecar document is not a usable OPF package."""


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _scheme_of(element: etree._Element) -> str | None:
    """Return the identifier scheme, usually carried as opf:scheme."""
    for name, value in element.attrib.items():
        if etree.QName(name).localname == "scheme":
            return value.strip().lower()
    return None


def _dc_text(metadata: etree._Element, name: str) -> str | None:
    """Text of the first Dublin Core element with the given name, or None."""
    element = metadata.find(f"{{{DC_NAMESPACE}}}{name}")
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def _select_identifier(identifiers: list[tuple[str, str | None]]) -> str | None:
    for preferred in _PREFERRED_SCHEMES:
        for value, scheme in identifiers:
            if scheme == preferred:
                return value
    return identifiers[0][0] if identifiers else None


def _parse_series_index(content: str) -> float:
    """Parse a calibre:series_index value, yielding NaN when it is not a number."""
    # Whole-value parse: "2abc" is NaN rather than its leading number 2
    try:
        return float(content)
    except ValueError:
        logger.warning("Series index %r is not a number", content)
        return math.nan


def _find_metadata(root: etree._Element) -> etree._Element:
    """Return the package's metadata element, validating the document shape."""
    if not isinstance(root.tag, str) or _local_name(root) != "package":
        raise MetadataFormatError(
            f"Invalid OPF format: root element is <{root.tag}>, expected <package>"
        )
    for child in root:
        if isinstance(child.tag, str) and _local_name(child) == "metadata":
            return child
    raise MetadataFormatError("Invalid OPF format: <package> has no <metadata> element")


def parse_opf(content: str | bytes) -> BookMetadata:
    """Parse the text of a metadata.opf document into BookMetadata.

    The document must have a <package> root with a <metadata> child. Inside
    it, dc:identifier, dc:title, dc:creator and the calibre series <meta>
    entries are read; everything else is ignored.

    Args:
        content: The raw document, as text or bytes.

    Returns:
        BookMetadata with absent fields left as None.

    Raises:
        MetadataFormatError: If the markup is malformed or the shape is wrong.
    """
    if isinstance(content, str):
        # lxml rejects str input that carries an encoding declaration
        content = content.encode("utf-8")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(content, parser)
    except etree.XMLSyntaxError as exc:
        raise MetadataFormatError(f"Invalid OPF format: {exc}") from exc

    metadata = _find_metadata(root)

    identifiers: list[tuple[str, str | None]] = []
    for element in metadata.iterfind(f"{{{DC_NAMESPACE}}}identifier"):
        value = (element.text or "").strip()
        if value:
            identifiers.append((value, _scheme_of(element)))

    series: str | None = None
    series_index: float | None = None
    for element in metadata:
        if not isinstance(element.tag, str) or _local_name(element) != "meta":
            continue
        name = element.get("name")
        meta_content = element.get("content")
        if name is None or meta_content is None:
            continue
        if name == SERIES_META and series is None:
            series = meta_content
        elif name == SERIES_INDEX_META and series_index is None:
            series_index = _parse_series_index(meta_content)

    return BookMetadata(
        id=_select_identifier(identifiers),
        title=_dc_text(metadata, "title"),
        creator=_dc_text(metadata, "creator"),
        series=series,
        series_index=series_index,
    )


def read_opf(path: Path) -> BookMetadata:
    """Read and parse a metadata.opf file.

    Raises:
        MetadataFormatError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise MetadataFormatError(f"Failed to read {path}: {exc}") from exc
    return parse_opf(content)
