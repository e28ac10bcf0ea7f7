"""Tests for the TCX writer."""

import io
from pathlib import Path

import pytest

from tcx_hr_merge.errors import SerializationError
from tcx_hr_merge.models import (
    GARMIN_ACTIVITY_EXTENSION_NS,
    GARMIN_TCX_NS,
    NamespaceDeclarations,
    TrackpointExtension,
)
from tcx_hr_merge.tcx.reader import parse_document, read_document
from tcx_hr_merge.tcx.writer import serialize_document, write_document
from tests.factories import make_document, make_trackpoint


@pytest.mark.unit
class TestSerializeMasterFixture:
    @pytest.fixture
    def document(self, master_tcx_path: Path):
        return read_document(master_tcx_path)

    @pytest.fixture
    def output(self, document) -> bytes:
        return serialize_document(document)

    def test_no_declaration_and_trailing_newline(self, output):
        assert output.startswith(b"<TrainingCenterDatabase ")
        assert output.endswith(b"</TrainingCenterDatabase>\n")

    def test_redeclares_namespaces(self, output, document):
        ns = document.namespaces
        assert f'xmlns="{ns.default}"'.encode() in output
        for prefix in ("ns2", "ns3", "ns4", "ns5", "xsi"):
            uri = getattr(ns, prefix)
            assert f'xmlns:{prefix}="{uri}"'.encode() in output
        assert f'xsi:schemaLocation="{ns.schema_location}"'.encode() in output

    def test_extension_written_with_ns3_prefix(self, output):
        assert b"<ns3:TPX>" in output
        assert b"<ns3:RunCadence>84</ns3:RunCadence>" in output
        assert b"<ns3:Speed>2.9</ns3:Speed>" in output
        assert output.index(b"<ns3:RunCadence>84") < output.index(b"<ns3:Speed>2.9")

    def test_two_space_indentation(self, output):
        assert b'\n  <Activities>\n    <Activity Sport="Running">\n' in output
        assert b'\n      <Lap StartTime="2024-05-01T08:00:00Z">\n' in output
        assert b"\n            <Time>2024-05-01T08:00:10Z</Time>\n" in output

    def test_values_written_verbatim(self, output):
        assert b"<Id>2024-05-01T08:00:00.000Z</Id>" in output
        assert b"<LatitudeDegrees>52.5200066</LatitudeDegrees>" in output
        assert b"<TotalTimeSeconds>20.0</TotalTimeSeconds>" in output

    def test_reparses_to_same_document(self, output, document):
        assert parse_document(output) == document


@pytest.mark.unit
class TestSerializeDocument:
    def test_extension_prefixed_when_read_unprefixed(self):
        content = (
            b'<TrainingCenterDatabase xmlns="' + GARMIN_TCX_NS.encode() + b'">'
            b"<Activities><Activity Sport='Running'><Id>x</Id>"
            b"<Lap StartTime='2024-05-01T08:00:00Z'><Track><Trackpoint>"
            b"<Time>2024-05-01T08:00:00Z</Time><Extensions><TPX><Speed>3.2</Speed>"
            b"</TPX></Extensions></Trackpoint></Track></Lap></Activity></Activities>"
            b"</TrainingCenterDatabase>"
        )

        output = serialize_document(parse_document(content))

        assert f'xmlns:ns3="{GARMIN_ACTIVITY_EXTENSION_NS}"'.encode() in output
        assert b"<ns3:TPX>" in output
        assert b"<ns3:Speed>3.2</ns3:Speed>" in output
        assert b"RunCadence" not in output

    def test_defaults_when_namespaces_missing(self):
        document = make_document((0, [make_trackpoint(0)]))

        output = serialize_document(document)

        assert f'xmlns="{GARMIN_TCX_NS}"'.encode() in output
        assert b"xsi:schemaLocation" not in output
        assert b"xmlns:ns2" not in output

    def test_lap_heart_rate_aggregates(self):
        document = make_document(
            (0, [make_trackpoint(0, bpm=0)]),
            average_heart_rate_bpm=115,
            maximum_heart_rate_bpm=120,
        )

        output = serialize_document(document)

        assert b"<AverageHeartRateBpm>\n          <Value>115</Value>" in output
        assert b"<MaximumHeartRateBpm>\n          <Value>120</Value>" in output
        assert b"<HeartRateBpm>\n              <Value>0</Value>" in output

    def test_absent_fields_are_omitted(self):
        document = make_document((0, [make_trackpoint(0)]))

        output = serialize_document(document)

        for name in (b"HeartRateBpm", b"Position", b"Extensions", b"Calories"):
            assert name not in output

    def test_lap_element_order(self):
        document = make_document(
            (0, [make_trackpoint(0, bpm=100)]),
            total_time_seconds="30.0",
            calories="3",
            average_heart_rate_bpm=100,
            intensity="Active",
            trigger_method="Manual",
        )

        output = serialize_document(document)

        positions = [
            output.index(name)
            for name in (
                b"<TotalTimeSeconds>",
                b"<Calories>",
                b"<AverageHeartRateBpm>",
                b"<Intensity>",
                b"<TriggerMethod>",
                b"<Track>",
            )
        ]
        assert positions == sorted(positions)

    def test_custom_indent(self):
        document = make_document((0, [make_trackpoint(0)]))

        output = serialize_document(document, indent="\t")

        assert b"\n\t<Activities>\n\t\t<Activity" in output

    def test_partial_extension(self):
        document = make_document(
            (0, [make_trackpoint(0, extension=TrackpointExtension(run_cadence="90"))])
        )

        output = serialize_document(document)

        assert b"<ns3:RunCadence>90</ns3:RunCadence>" in output
        assert b"Speed" not in output

    def test_custom_extension_namespace_keeps_ns3_prefix(self):
        document = make_document((0, [make_trackpoint(0, extension=TrackpointExtension(speed="1"))]))
        document = document.model_copy(
            update={"namespaces": NamespaceDeclarations(ns3="urn:example:tpx")}
        )

        output = serialize_document(document)

        assert b'xmlns:ns3="urn:example:tpx"' in output
        assert b"<ns3:Speed>1</ns3:Speed>" in output

    def test_invalid_characters_raise(self):
        document = make_document((0, [make_trackpoint(0, altitude_meters="3\x00")]))

        with pytest.raises(SerializationError, match="error serializing"):
            serialize_document(document)


@pytest.mark.unit
class TestWriteDocument:
    def test_writes_bytes(self):
        document = make_document((0, [make_trackpoint(0)]))
        stream = io.BytesIO()

        write_document(document, stream)

        assert stream.getvalue() == serialize_document(document)

    def test_write_failure_raises(self):
        class _BrokenStream(io.BytesIO):
            def write(self, data):
                raise BrokenPipeError("pipe closed")

        with pytest.raises(SerializationError, match="error writing"):
            write_document(make_document((0, [make_trackpoint(0)])), _BrokenStream())
