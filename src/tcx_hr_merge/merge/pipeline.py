"""Document-level merge: master document + heart-rate document -> merged document."""

from __future__ import annotations

import logging

from tcx_hr_merge.merge.engine import merge_trackpoints_with_stats
from tcx_hr_merge.merge.laps import rebuild_laps
from tcx_hr_merge.merge.stream import iter_trackpoints
from tcx_hr_merge.models import TcxDocument

logger = logging.getLogger(__name__)


def merge_documents(master: TcxDocument, heart_rate: TcxDocument) -> TcxDocument:
    """Enrich the master document with the heart-rate document's samples.

    The result keeps the master's namespaces, sport, id and lap boundaries;
    its laps hold the merged trackpoints with recomputed heart-rate
    aggregates. Neither input is modified.

    Raises:
        MergeError: If the streams violate the merge preconditions.
    """
    merged, stats = merge_trackpoints_with_stats(
        iter_trackpoints(master), iter_trackpoints(heart_rate)
    )
    laps = rebuild_laps(master.activity.laps, merged)

    logger.info(
        f"Merged {master.trackpoint_count} master and "
        f"{heart_rate.trackpoint_count} heart-rate trackpoints into "
        f"{len(merged)} across {len(laps)} laps "
        f"({stats.matched} matched, {stats.inserted} inserted)"
    )

    return master.model_copy(
        update={"activity": master.activity.model_copy(update={"laps": laps})}
    )
