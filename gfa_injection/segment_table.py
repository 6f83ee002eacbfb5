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

"""Segment lengths of a GFA graph, addressed by offset from the smallest ID.

The rest of the index refers to segments by offset, so the segment IDs have to
form one contiguous block with exactly one S record per ID.
"""

from __future__ import annotations
import contextlib
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from .gfa_io import GFALoadError, GFARecord, parse_tags, parse_unsigned, read_records

logger = logging.getLogger("gfa_injection")


def _segment_length(rec: GFARecord) -> int:
    seq = rec.fields[1]
    if seq != "*":
        return len(seq)
    # sequence not stored, fall back to the LN tag
    ln = parse_tags(rec.fields[2:]).get("LN")
    if ln is None:
        return 0
    return parse_unsigned(ln, "LN tag", rec.line_no)


class SegmentTable:
    """Dense, immutable array of segment lengths indexed by `id - min_id`."""

    def __init__(self, lengths: List[int], min_id: int) -> None:
        self._lengths = tuple(lengths)
        self._min_id = min_id

    @classmethod
    def from_records(cls, records: Iterable[GFARecord]) -> "SegmentTable":
        """Build the table from S records; other record kinds are ignored.

        Raises:
            GFALoadError: for malformed IDs, duplicated IDs or a gap in the ID range.
        """
        by_id: Dict[int, int] = {}
        min_id, max_id = None, None
        for rec in records:
            if rec.tag != "S" or len(rec.fields) < 2:
                continue
            seg_id = parse_unsigned(rec.fields[0], "segment ID", rec.line_no)
            if seg_id in by_id:
                raise GFALoadError(f"duplicate segment ID {seg_id}", rec.line_no)
            by_id[seg_id] = _segment_length(rec)
            min_id = seg_id if min_id is None else min(min_id, seg_id)
            max_id = seg_id if max_id is None else max(max_id, seg_id)

        if not by_id:
            raise GFALoadError("graph has no segments")
        if max_id - min_id != len(by_id) - 1:
            raise GFALoadError(
                "GFA segments must be tightly packed: "
                f"min ID {min_id}, max ID {max_id}, node count {len(by_id)}"
            )

        lengths = [by_id[min_id + i] for i in range(len(by_id))]
        logger.info("Loaded %d segments (IDs %d-%d)", len(lengths), min_id, max_id)
        return cls(lengths, min_id)

    @classmethod
    def from_gfa(cls, gfa_path: Union[str, Path]) -> "SegmentTable":
        logger.debug("Reading segments from %s", gfa_path)
        with contextlib.closing(read_records(gfa_path, "S")) as records:
            return cls.from_records(records)

    def __len__(self) -> int:
        return len(self._lengths)

    def length(self, offset: int) -> int:
        return self._lengths[offset]

    def id_range(self) -> Tuple[int, int]:
        return self._min_id, self._min_id + len(self._lengths) - 1

    def segment_id(self, offset: int) -> int:
        return offset + self._min_id

    def offset(self, segment_id: int) -> int:
        """Offset of `segment_id` in the table.

        Raises:
            GFALoadError: when the ID lies outside the table's range.
        """
        offset = segment_id - self._min_id
        if not 0 <= offset < len(self._lengths):
            raise GFALoadError(f"unknown segment ID {segment_id}")
        return offset
