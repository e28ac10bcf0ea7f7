"""TCX document writer.

Serializes a TcxDocument back to TrainingCenterDatabase XML. The root
re-declares the input's namespace set, and the TPX extension is always
written under the `ns3` prefix regardless of how it was read.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from lxml import etree

from tcx_hr_merge.errors import SerializationError
from tcx_hr_merge.models import (
    GARMIN_ACTIVITY_EXTENSION_NS,
    GARMIN_TCX_NS,
    XSI_NS,
    Lap,
    NamespaceDeclarations,
    TcxDocument,
    Trackpoint,
)
from tcx_hr_merge.tcx.timestamps import format_instant

logger = logging.getLogger(__name__)

EXTENSION_PREFIX = "ns3"


class _TreeBuilder:
    """Builds the element tree with the document's namespace URIs."""

    def __init__(self, namespaces: NamespaceDeclarations):
        self.namespaces = namespaces
        self.default_ns = namespaces.default or GARMIN_TCX_NS
        self.extension_ns = namespaces.ns3 or GARMIN_ACTIVITY_EXTENSION_NS
        self.xsi_ns = namespaces.xsi or XSI_NS

    def nsmap(self) -> dict[str | None, str]:
        declared = {
            "ns5": self.namespaces.ns5,
            "ns4": self.namespaces.ns4,
            EXTENSION_PREFIX: self.extension_ns,
            "ns2": self.namespaces.ns2,
            None: self.default_ns,
            "xsi": self.namespaces.xsi,
        }
        if self.namespaces.schema_location is not None:
            declared["xsi"] = self.xsi_ns
        return {prefix: uri for prefix, uri in declared.items() if uri}

    def tag(self, name: str) -> str:
        return f"{{{self.default_ns}}}{name}"

    def sub(
        self, parent: etree._Element, name: str, text: str | None = None
    ) -> etree._Element:
        element = etree.SubElement(parent, self.tag(name))
        if text is not None:
            element.text = text
        return element

    def optional(self, parent: etree._Element, name: str, text: str | None) -> None:
        if text is not None:
            self.sub(parent, name, text)

    def bpm(self, parent: etree._Element, name: str, value: int | None) -> None:
        if value is not None:
            self.sub(self.sub(parent, name), "Value", str(value))

    def root(self, document: TcxDocument) -> etree._Element:
        root = etree.Element(self.tag("TrainingCenterDatabase"), nsmap=self.nsmap())
        if self.namespaces.schema_location is not None:
            root.set(f"{{{self.xsi_ns}}}schemaLocation", self.namespaces.schema_location)

        activity = document.activity
        activity_element = self.sub(self.sub(root, "Activities"), "Activity")
        if activity.sport is not None:
            activity_element.set("Sport", activity.sport)
        self.optional(activity_element, "Id", activity.id)

        for lap in activity.laps:
            self.lap(activity_element, lap)
        return root

    def lap(self, parent: etree._Element, lap: Lap) -> None:
        element = self.sub(parent, "Lap")
        element.set("StartTime", format_instant(lap.start_time))
        self.optional(element, "TotalTimeSeconds", lap.total_time_seconds)
        self.optional(element, "DistanceMeters", lap.distance_meters)
        self.optional(element, "MaximumSpeed", lap.maximum_speed)
        self.optional(element, "Calories", lap.calories)
        self.bpm(element, "AverageHeartRateBpm", lap.average_heart_rate_bpm)
        self.bpm(element, "MaximumHeartRateBpm", lap.maximum_heart_rate_bpm)
        self.optional(element, "Intensity", lap.intensity)
        self.optional(element, "TriggerMethod", lap.trigger_method)

        track = self.sub(element, "Track")
        for trackpoint in lap.trackpoints:
            self.trackpoint(track, trackpoint)

    def trackpoint(self, parent: etree._Element, trackpoint: Trackpoint) -> None:
        element = self.sub(parent, "Trackpoint")
        self.sub(element, "Time", format_instant(trackpoint.time))

        position = trackpoint.position
        if position is not None:
            position_element = self.sub(element, "Position")
            self.optional(position_element, "LatitudeDegrees", position.latitude_degrees)
            self.optional(
                position_element, "LongitudeDegrees", position.longitude_degrees
            )

        self.optional(element, "AltitudeMeters", trackpoint.altitude_meters)
        self.optional(element, "DistanceMeters", trackpoint.distance_meters)
        self.bpm(element, "HeartRateBpm", trackpoint.heart_rate_bpm)

        extension = trackpoint.extension
        if extension is not None:
            tpx = etree.SubElement(
                self.sub(element, "Extensions"), f"{{{self.extension_ns}}}TPX"
            )
            for name, value in (
                ("RunCadence", extension.run_cadence),
                ("Speed", extension.speed),
            ):
                if value is not None:
                    etree.SubElement(tpx, f"{{{self.extension_ns}}}{name}").text = value


def serialize_document(document: TcxDocument, indent: str = "  ") -> bytes:
    """Serialize a document to indented TCX bytes.

    Args:
        document: Document to serialize.
        indent: Indentation unit for each nesting level.

    Returns:
        UTF-8 encoded XML without a declaration, ending in a newline.

    Raises:
        SerializationError: If the tree cannot be built or encoded.
    """
    try:
        root = _TreeBuilder(document.namespaces).root(document)
        etree.indent(root, space=indent)
        output = etree.tostring(root, encoding="UTF-8", xml_declaration=False)
    except (etree.LxmlError, ValueError, TypeError) as e:
        raise SerializationError(f"error serializing merged document: {e}") from e

    return output + b"\n"


def write_document(document: TcxDocument, stream: BinaryIO, indent: str = "  ") -> None:
    """Serialize a document and write it to a binary stream.

    Raises:
        SerializationError: If serialization or the write fails.
    """
    output = serialize_document(document, indent=indent)
    try:
        stream.write(output)
        stream.flush()
    except OSError as e:
        raise SerializationError(f"error writing merged document: {e}") from e

    logger.debug(f"Wrote {len(output)} bytes")
