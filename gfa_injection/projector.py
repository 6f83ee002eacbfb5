# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

""" Project linear-reference alignments onto graph paths.

    The reference name of each alignment has to match a path name of the
    graph. The aligned interval is turned into the list of path steps it
    overlaps and written as a GAF line:

        read1  150  0  150  +  >12<13>14  310  41  191  148  150  60

    Strand is folded into the step orientations, so column 5 is always "+".
    Query start is always 0 and query end the CIGAR read length: soft clips
    are not subtracted.
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional, TextIO

from .alignment import MAPQ_UNAVAILABLE, AlignmentRecord
from .path_index import PathStepIndex
from .range_query import query

logger = logging.getLogger("gfa_injection")

SKIP_NO_READ_NAME = "no read name"
SKIP_UNPLACED = "no reference"
SKIP_UNKNOWN_PATH = "reference not a graph path"
SKIP_NO_STEPS = "no overlapping steps"
SKIP_PAST_PATH_END = "alignment runs past path end"


@dataclass
class GafRecord:
    query_name: str
    query_length: int
    query_start: int
    query_end: int
    strand: str
    path: str
    path_length: int
    path_start: int
    path_end: int
    matches: int
    block_length: int
    mapping_quality: int

    def to_line(self) -> str:
        return "\t".join(
            map(
                str,
                (
                    self.query_name, self.query_length, self.query_start, self.query_end,
                    self.strand, self.path, self.path_length, self.path_start,
                    self.path_end, self.matches, self.block_length, self.mapping_quality,
                ),
            )
        )


@dataclass
class ProjectionStats:
    projected: int = 0
    skipped: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return self.projected + sum(self.skipped.values())


def skip_reason(record: AlignmentRecord, index: PathStepIndex) -> Optional[str]:
    """Why `record` cannot be projected, or None if it may be."""
    if not record.read_id:
        return SKIP_NO_READ_NAME
    if not record.reference_name or record.ref_start is None or record.ref_end is None:
        return SKIP_UNPLACED
    path_id = index.path_id(record.reference_name)
    if path_id is None:
        return SKIP_UNKNOWN_PATH
    if record.ref_end > index.total_length(path_id):
        return SKIP_PAST_PATH_END
    return None


def project_alignment(record: AlignmentRecord, index: PathStepIndex) -> Optional[GafRecord]:
    """Express one alignment as a traversal of its reference path.

    Args:
        record: Alignment with 1-based inclusive reference coordinates.
        index: Loaded path index.

    Returns:
        The GAF record, or None when the alignment cannot be placed on the graph.
    """
    if skip_reason(record, index) is not None:
        return None
    return _project(record, index)


def _project(record: AlignmentRecord, index: PathStepIndex) -> Optional[GafRecord]:
    # record already passed skip_reason
    start0 = record.ref_start - 1
    steps = query(index, record.reference_name, start0, record.ref_end)
    if steps is None:
        return None

    traversal = list(steps.iter_steps(index))
    if record.is_reverse:
        traversal.reverse()

    path_len = 0
    tokens = []
    for _step_ix, step in traversal:
        forward = step.reverse == record.is_reverse
        tokens.append(f"{'>' if forward else '<'}{index.segment_id(step)}")
        path_len += index.step_length(step)

    span = record.alignment_span
    into_first = start0 - steps.first_offset(index)
    if record.is_reverse:
        # measured from the end of the last forward step
        path_start = path_len - into_first - span
    else:
        path_start = into_first

    query_len = record.query_length
    mapq = record.mapping_quality
    return GafRecord(
        query_name=record.read_id,
        query_length=query_len,
        query_start=0,
        query_end=query_len,
        strand="+",
        path="".join(tokens),
        path_length=path_len,
        path_start=path_start,
        path_end=path_start + span,
        matches=record.matches,
        block_length=span,
        mapping_quality=MAPQ_UNAVAILABLE if mapq is None else mapq,
    )


def project_alignments(
    records: Iterable[AlignmentRecord], index: PathStepIndex, out: TextIO
) -> ProjectionStats:
    """Write one GAF line to `out` for every record that lands on a path.

    Errors raised while reading `records` or writing `out` are propagated.
    """
    stats = ProjectionStats()
    for record in records:
        reason = skip_reason(record, index)
        gaf = None if reason else _project(record, index)
        if gaf is None:
            reason = reason or SKIP_NO_STEPS
            stats.skipped[reason] += 1
            logger.debug("Skipping %s: %s", record.read_id, reason)
            continue
        out.write(gaf.to_line() + "\n")
        stats.projected += 1
    out.flush()

    logger.info("Projected %d of %d alignments", stats.projected, stats.total)
    for reason, count in stats.skipped.most_common():
        logger.info("Skipped %d alignments: %s", count, reason)
    return stats
