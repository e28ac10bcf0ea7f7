"""Lap reconstruction on a merged trackpoint sequence.

Re-partitions merged trackpoints into the master's lap boundaries and
recomputes each lap's average and maximum heart rate.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from tcx_hr_merge.models import Lap, Trackpoint

# Boundary of the last lap: one second past the last merged point, so no
# point ever reaches it
FINAL_BOUNDARY_PADDING = timedelta(seconds=1)


@dataclass
class HeartRateAccumulator:
    """Rolling count, sum and max of the non-zero heart rates in one lap."""

    count: int = 0
    total: int = 0
    maximum: int = 0

    def add(self, bpm: int | None) -> None:
        if not bpm:
            return
        self.count += 1
        self.total += bpm
        self.maximum = max(self.maximum, bpm)

    @property
    def average(self) -> int | None:
        return self.total // self.count if self.count else None

    @property
    def peak(self) -> int | None:
        return self.maximum if self.count else None


def rebuild_laps(laps: Sequence[Lap], merged: Sequence[Trackpoint]) -> tuple[Lap, ...]:
    """Distribute merged trackpoints over the master laps.

    Lap i receives the points with start_time[i] <= time < start_time[i + 1];
    the last lap receives everything from its start onward. Points before the
    first lap's start stay in the first lap.

    Args:
        laps: Master laps, ascending by start time.
        merged: Merged trackpoints, ascending by time.

    Returns:
        New laps with the same count and start times. Heart-rate aggregates
        are recomputed (None when the lap has no non-zero heart rate); every
        other lap field is copied from the master.
    """
    if not laps:
        return ()

    last_index = len(laps) - 1
    final_boundary = (
        merged[-1].time + FINAL_BOUNDARY_PADDING if merged else laps[-1].start_time
    )

    def next_boundary(index: int) -> datetime:
        if index == last_index:
            return final_boundary
        return laps[index + 1].start_time

    rebuilt: list[Lap] = []
    index = 0
    boundary = next_boundary(index)
    trackpoints: list[Trackpoint] = []
    accumulator = HeartRateAccumulator()

    for trackpoint in merged:
        # One point may close several laps in a row; those laps stay empty
        while trackpoint.time >= boundary:
            rebuilt.append(_close_lap(laps[index], trackpoints, accumulator))
            trackpoints = []
            accumulator = HeartRateAccumulator()
            index += 1
            boundary = next_boundary(index)

        trackpoints.append(trackpoint)
        accumulator.add(trackpoint.heart_rate_bpm)

    rebuilt.append(_close_lap(laps[index], trackpoints, accumulator))
    # Laps after the last merged point get no trackpoints
    rebuilt.extend(
        _close_lap(lap, [], HeartRateAccumulator()) for lap in laps[index + 1 :]
    )
    return tuple(rebuilt)


def _close_lap(
    lap: Lap, trackpoints: list[Trackpoint], accumulator: HeartRateAccumulator
) -> Lap:
    return lap.model_copy(
        update={
            "trackpoints": tuple(trackpoints),
            "average_heart_rate_bpm": accumulator.average,
            "maximum_heart_rate_bpm": accumulator.peak,
        }
    )
