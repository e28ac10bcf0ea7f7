"""Trackpoint stream producer."""

from collections.abc import Iterator

from tcx_hr_merge.models import TcxDocument, Trackpoint


def iter_trackpoints(document: TcxDocument) -> Iterator[Trackpoint]:
    """Yield every trackpoint of every lap, in document order.

    The generator is single-use: create a fresh one for each pass.
    """
    for lap in document.activity.laps:
        yield from lap.trackpoints
