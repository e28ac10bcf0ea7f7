"""Two-way chronological merge of a master and a heart-rate trackpoint stream.

Both inputs must be ascending by time. The master stream supplies the full
samples; the heart-rate stream only contributes its time and heart rate:

- a heart-rate sample at the same instant as a master sample overwrites the
  master's heart rate,
- any other heart-rate sample becomes a synthetic trackpoint that carries the
  position of the most recently emitted point.

The master stream must start no later than the heart-rate stream, otherwise
the first synthetic point has no position to carry forward.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from tcx_hr_merge.errors import MergeError
from tcx_hr_merge.models import Trackpoint

logger = logging.getLogger(__name__)


@dataclass
class MergeStats:
    """Counts of how each merged trackpoint was produced."""

    master_only: int = 0
    matched: int = 0
    inserted: int = 0

    @property
    def total(self) -> int:
        return self.master_only + self.matched + self.inserted


def merge_trackpoints(
    master: Iterable[Trackpoint], heart_rate: Iterable[Trackpoint]
) -> list[Trackpoint]:
    """Merge two ascending trackpoint streams into one ascending list.

    Args:
        master: Trackpoints of the primary recording.
        heart_rate: Trackpoints of the heart-rate recording.

    Returns:
        Merged trackpoints. Length is len(master) + len(heart_rate) minus the
        number of exact time matches.

    Raises:
        MergeError: If the master stream is empty or starts after the
            heart-rate stream.
    """
    merged, _ = merge_trackpoints_with_stats(master, heart_rate)
    return merged


def merge_trackpoints_with_stats(
    master: Iterable[Trackpoint], heart_rate: Iterable[Trackpoint]
) -> tuple[list[Trackpoint], MergeStats]:
    """Same as `merge_trackpoints`, also returning the merge counts."""
    master_iter = iter(master)
    hr_iter = iter(heart_rate)
    m = next(master_iter, None)
    b = next(hr_iter, None)

    if m is None:
        raise MergeError(
            "master stream has no trackpoints",
            suggestion="The master file must contain at least one Trackpoint.",
        )
    if b is not None and b.time < m.time:
        raise MergeError(
            f"heart-rate stream starts at {b.time.isoformat()}, "
            f"before the master stream ({m.time.isoformat()})",
            suggestion="Check the argument order: the master file must start first.",
        )

    merged: list[Trackpoint] = []
    stats = MergeStats()

    while m is not None or b is not None:
        if b is None or (m is not None and m.time < b.time):
            merged.append(m)
            stats.master_only += 1
            m = next(master_iter, None)
        elif m is None or m.time > b.time:
            merged.append(
                Trackpoint(
                    time=b.time,
                    heart_rate_bpm=b.heart_rate_bpm,
                    position=merged[-1].position,
                )
            )
            stats.inserted += 1
            b = next(hr_iter, None)
        else:
            merged.append(m.model_copy(update={"heart_rate_bpm": b.heart_rate_bpm}))
            stats.matched += 1
            m = next(master_iter, None)
            b = next(hr_iter, None)

    logger.debug(
        f"Merged {stats.total} trackpoints: {stats.master_only} master-only, "
        f"{stats.matched} matched, {stats.inserted} inserted"
    )
    return merged, stats
