"""TCX document reader.

Turns the bytes of a TrainingCenterDatabase file into a TcxDocument.

Element lookup is namespace-unaware: children are matched on their local
name only, so the TPX extension is found whether or not its prefix is
declared. A document whose only XML errors are undeclared namespace prefixes
is re-parsed in recovery mode; any other syntax error is fatal. Prefixes are
re-applied by the writer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from lxml import etree
from pydantic import ValidationError

from tcx_hr_merge.errors import FileReadError, ParseError
from tcx_hr_merge.models import (
    Activity,
    Lap,
    NamespaceDeclarations,
    Position,
    TcxDocument,
    Trackpoint,
    TrackpointExtension,
)
from tcx_hr_merge.tcx.timestamps import parse_instant

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "TrainingCenterDatabase"


class _DocumentParser:
    """Builds models from a parsed element tree, tracking the source name for errors."""

    def __init__(self, source: str):
        self.source = source

    def fail(self, message: str) -> ParseError:
        return ParseError(
            f"{self.source}: {message}",
            suggestion="Check that the file is a TCX activity export.",
        )

    def document(self, root: etree._Element) -> TcxDocument:
        if _local_name(root) != ROOT_ELEMENT:
            raise self.fail(
                f"expected root element <{ROOT_ELEMENT}>, found <{_local_name(root)}>"
            )

        activities = _child(root, "Activities")
        activity = _child(activities, "Activity") if activities is not None else None
        if activity is None:
            raise self.fail("no Activities/Activity element")

        laps = tuple(self.lap(element) for element in _children(activity, "Lap"))
        if not laps:
            raise self.fail("activity has no Lap elements")

        return TcxDocument(
            namespaces=_namespaces(root),
            activity=Activity(
                sport=activity.get("Sport"),
                id=_text(activity, "Id"),
                laps=laps,
            ),
        )

    def lap(self, element: etree._Element) -> Lap:
        start_time = element.get("StartTime")
        if not start_time:
            raise self.fail("Lap without a StartTime attribute")

        track = _child(element, "Track")
        trackpoints = (
            tuple(self.trackpoint(tp) for tp in _children(track, "Trackpoint"))
            if track is not None
            else ()
        )

        return Lap(
            start_time=self.instant(start_time),
            total_time_seconds=_text(element, "TotalTimeSeconds"),
            distance_meters=_text(element, "DistanceMeters"),
            maximum_speed=_text(element, "MaximumSpeed"),
            calories=_text(element, "Calories"),
            average_heart_rate_bpm=self.bpm(element, "AverageHeartRateBpm"),
            maximum_heart_rate_bpm=self.bpm(element, "MaximumHeartRateBpm"),
            intensity=_text(element, "Intensity"),
            trigger_method=_text(element, "TriggerMethod"),
            trackpoints=trackpoints,
        )

    def trackpoint(self, element: etree._Element) -> Trackpoint:
        time = _text(element, "Time")
        if not time:
            raise self.fail("Trackpoint without a Time element")

        position = None
        position_element = _child(element, "Position")
        if position_element is not None:
            position = Position(
                latitude_degrees=_text(position_element, "LatitudeDegrees"),
                longitude_degrees=_text(position_element, "LongitudeDegrees"),
            )

        extension = None
        extensions = _child(element, "Extensions")
        tpx = _child(extensions, "TPX") if extensions is not None else None
        if tpx is not None:
            extension = TrackpointExtension(
                speed=_text(tpx, "Speed"),
                run_cadence=_text(tpx, "RunCadence"),
            )

        return Trackpoint(
            time=self.instant(time),
            position=position,
            altitude_meters=_text(element, "AltitudeMeters"),
            distance_meters=_text(element, "DistanceMeters"),
            heart_rate_bpm=self.bpm(element, "HeartRateBpm"),
            extension=extension,
        )

    def bpm(self, element: etree._Element, name: str) -> int | None:
        container = _child(element, name)
        if container is None:
            return None
        value = _text(container, "Value")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise self.fail(f"{name} value is not an integer: {value!r}") from None

    def instant(self, value: str) -> datetime:
        try:
            return parse_instant(value)
        except (ValueError, OverflowError):
            raise self.fail(f"invalid timestamp: {value!r}") from None


def parse_document(content: bytes, source: str = "<bytes>") -> TcxDocument:
    """Parse TCX bytes into a TcxDocument.

    Args:
        content: Raw file content.
        source: Name used in error messages (usually the file path).

    Returns:
        Parsed document.

    Raises:
        ParseError: If the content is not well-formed XML or lacks the
            elements needed to merge.
    """
    try:
        root = _parse_xml(content)
    except etree.XMLSyntaxError as e:
        raise ParseError(
            f"{source}: malformed XML: {e}",
            suggestion="Check that the file is a complete TCX export.",
        ) from e

    try:
        document = _DocumentParser(source).document(root)
    except ValidationError as e:
        raise ParseError(f"{source}: invalid activity data: {e}") from e

    logger.debug(
        f"Parsed {source}: {len(document.activity.laps)} laps, "
        f"{document.trackpoint_count} trackpoints"
    )
    return document


def read_document(path: str | Path) -> TcxDocument:
    """Read and parse a TCX file.

    Raises:
        FileReadError: If the file is missing or unreadable.
        ParseError: If the file content is not a usable activity document.
    """
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise FileReadError(
            f"error reading file {path}: {e.strerror or e}",
            suggestion="Check that the input path exists and is readable.",
        ) from e

    return parse_document(content, source=str(path))


def _parse_xml(content: bytes) -> etree._Element:
    try:
        return etree.fromstring(content, _xml_parser())
    except etree.XMLSyntaxError as e:
        # Undeclared prefixes (ns3:TPX without xmlns:ns3) are tolerated
        if not e.error_log or any(
            error.domain != etree.ErrorDomains.NAMESPACE for error in e.error_log
        ):
            raise
        logger.debug(f"Re-parsing with undeclared namespace prefixes: {e}")
        return etree.fromstring(content, _xml_parser(recover=True))


def _xml_parser(recover: bool = False) -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_blank_text=True,
        recover=recover,
    )


def _namespaces(root: etree._Element) -> NamespaceDeclarations:
    nsmap = root.nsmap
    schema_location = next(
        (
            value
            for key, value in root.attrib.items()
            if _strip_name(key) == "schemaLocation"
        ),
        None,
    )
    return NamespaceDeclarations(
        schema_location=schema_location,
        default=nsmap.get(None),
        ns2=nsmap.get("ns2"),
        ns3=nsmap.get("ns3"),
        ns4=nsmap.get("ns4"),
        ns5=nsmap.get("ns5"),
        xsi=nsmap.get("xsi"),
    )


def _local_name(element: etree._Element) -> str:
    return _strip_name(element.tag)


def _strip_name(name: str) -> str:
    # "{uri}TPX", "ns3:TPX" (undeclared prefix) and "TPX" all give "TPX"
    return name.rpartition("}")[2].rpartition(":")[2]


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in element:
        # Skip comments and processing instructions
        if isinstance(child.tag, str) and _local_name(child) == name:
            yield child


def _child(element: etree._Element, name: str) -> etree._Element | None:
    return next(_children(element, name), None)


def _text(element: etree._Element, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()
