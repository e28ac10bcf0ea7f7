"""Pydantic models for the activity document.

The tree mirrors a TCX file: document -> activity -> laps -> trackpoints.
Models are frozen; derived values are built with `model_copy(update=...)`.

Measurement fields (altitude, distance, speed, ...) keep the source text so
they are written back verbatim. Heart rates are integers, and `None` means
"no sample", which is distinct from a literal 0.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

GARMIN_TCX_NS = "http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2"
GARMIN_ACTIVITY_EXTENSION_NS = "http://www.garmin.com/xmlschemas/ActivityExtension/v2"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class NamespaceDeclarations(_Frozen):
    """Namespace attributes declared on the document root."""

    schema_location: str | None = None
    default: str | None = None
    ns2: str | None = None
    ns3: str | None = None
    ns4: str | None = None
    ns5: str | None = None
    xsi: str | None = None


class Position(_Frozen):
    """Latitude/longitude pair."""

    latitude_degrees: str | None = None
    longitude_degrees: str | None = None


class TrackpointExtension(_Frozen):
    """Speed and running cadence from the activity extension (TPX)."""

    speed: str | None = None
    run_cadence: str | None = None


class Trackpoint(_Frozen):
    """One timestamped sample."""

    time: datetime
    position: Position | None = None
    altitude_meters: str | None = None
    distance_meters: str | None = None
    heart_rate_bpm: int | None = Field(default=None, ge=0)
    extension: TrackpointExtension | None = None


class Lap(_Frozen):
    """Contiguous time segment with its aggregates and samples."""

    start_time: datetime
    total_time_seconds: str | None = None
    distance_meters: str | None = None
    maximum_speed: str | None = None
    calories: str | None = None
    average_heart_rate_bpm: int | None = Field(default=None, ge=0)
    maximum_heart_rate_bpm: int | None = Field(default=None, ge=0)
    intensity: str | None = None
    trigger_method: str | None = None
    trackpoints: tuple[Trackpoint, ...] = ()


class Activity(_Frozen):
    """A single timed activity."""

    sport: str | None = None
    id: str | None = None
    laps: tuple[Lap, ...] = Field(min_length=1)

    @property
    def lap_start_times(self) -> list[datetime]:
        return [lap.start_time for lap in self.laps]


class TcxDocument(_Frozen):
    """A parsed activity document."""

    namespaces: NamespaceDeclarations = NamespaceDeclarations()
    activity: Activity

    @property
    def trackpoint_count(self) -> int:
        return sum(len(lap.trackpoints) for lap in self.activity.laps)
