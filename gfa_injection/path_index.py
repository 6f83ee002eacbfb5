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

""" This module turns the P lines of a GFA file into a queryable index.

    Every path becomes an ordered tuple of oriented steps together with a
    PositionIndex holding the path coordinate at which each step begins. For
    a path 1+,2+,3- over segments of length 4, 3 and 5 the offsets are
    {0, 4, 7} and the path is 12 bases long.

    The index is built once and never modified afterwards.
"""

from __future__ import annotations
import contextlib
import logging
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .gfa_io import GFALoadError, GFARecord, parse_unsigned, read_records, split_step_list
from .position_index import MAX_OFFSET, PositionIndex
from .segment_table import SegmentTable

logger = logging.getLogger("gfa_injection")


class Step(NamedTuple):
    """One traversal of a segment, addressed by its offset in the SegmentTable."""

    segment_offset: int
    reverse: bool


def parse_step(token: str, segments: SegmentTable, line_no: Optional[int] = None) -> Step:
    """Parse a `<segment_id><+|->` token.

    Raises:
        GFALoadError: for malformed tokens or segments missing from the table.
    """
    if len(token) < 2:
        raise GFALoadError(f"malformed path step {token!r}", line_no)
    seg, orient = token[:-1], token[-1]
    if orient not in "+-":
        raise GFALoadError(f"invalid orientation in path step {token!r}", line_no)
    seg_id = parse_unsigned(seg, "segment ID in path step", line_no)
    try:
        offset = segments.offset(seg_id)
    except GFALoadError as err:
        raise GFALoadError(str(err), line_no) from err
    return Step(offset, orient == "-")


class PathStepIndex:
    """Steps and step offsets of every path in a graph."""

    def __init__(
        self,
        segment_table: SegmentTable,
        path_names: Dict[str, int],
        steps: List[Tuple[Step, ...]],
        offsets: List[PositionIndex],
        total_lengths: List[int],
    ) -> None:
        self.segment_table = segment_table
        self._path_names = path_names
        self._steps = steps
        self._offsets = offsets
        self._total_lengths = total_lengths

    @classmethod
    def from_records(
        cls, records: Iterable[GFARecord], segment_table: SegmentTable
    ) -> "PathStepIndex":
        """Build the index from P records; other record kinds are ignored.

        Args:
            records: GFA records, in file order.
            segment_table: Lengths of the segments the paths refer to.

        Returns:
            The path index. A repeated path name points at the last path
            carrying it.

        Raises:
            GFALoadError: when any step cannot be resolved. Nothing is
                returned for a partially readable graph.
        """
        path_names: Dict[str, int] = {}
        all_steps: List[Tuple[Step, ...]] = []
        all_offsets: List[PositionIndex] = []
        total_lengths: List[int] = []

        for rec in records:
            if rec.tag != "P" or len(rec.fields) < 2:
                continue
            name, step_list = rec.fields[0], rec.fields[1]

            pos = 0
            steps: List[Step] = []
            offsets: List[int] = []
            for token in split_step_list(step_list):
                step = parse_step(token, segment_table, rec.line_no)
                length = segment_table.length(step.segment_offset)
                if length == 0:
                    raise GFALoadError(
                        f"path {name} steps through zero-length segment "
                        f"{segment_table.segment_id(step.segment_offset)}",
                        rec.line_no,
                    )
                if pos > MAX_OFFSET:
                    raise GFALoadError(f"path {name} is too long to index", rec.line_no)
                steps.append(step)
                offsets.append(pos)
                pos += length

            if name in path_names:
                logger.warning("Path %s appears more than once, keeping the last one", name)
            path_names[name] = len(all_steps)
            all_steps.append(tuple(steps))
            all_offsets.append(PositionIndex(offsets))
            total_lengths.append(pos)
            logger.debug("Path %s: %d steps, %d bp", name, len(steps), pos)

        logger.info("Indexed %d paths", len(path_names))
        return cls(segment_table, path_names, all_steps, all_offsets, total_lengths)

    @classmethod
    def from_gfa(
        cls, gfa_path: Union[str, Path], segment_table: Optional[SegmentTable] = None
    ) -> "PathStepIndex":
        """Load the index with two passes over the GFA file."""
        if segment_table is None:
            segment_table = SegmentTable.from_gfa(gfa_path)
        logger.debug("Reading paths from %s", gfa_path)
        with contextlib.closing(read_records(gfa_path, "P")) as records:
            return cls.from_records(records, segment_table)

    def path_id(self, name: str) -> Optional[int]:
        return self._path_names.get(name)

    def path_names(self) -> List[str]:
        return list(self._path_names)

    def steps(self, path_id: int) -> Tuple[Step, ...]:
        return self._steps[path_id]

    def offsets(self, path_id: int) -> PositionIndex:
        return self._offsets[path_id]

    def total_length(self, path_id: int) -> int:
        return self._total_lengths[path_id]

    def step_length(self, step: Step) -> int:
        return self.segment_table.length(step.segment_offset)

    def segment_id(self, step: Step) -> int:
        return self.segment_table.segment_id(step.segment_offset)

    def __contains__(self, name: str) -> bool:
        return name in self._path_names

    def __len__(self) -> int:
        return len(self._path_names)
