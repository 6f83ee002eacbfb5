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

"""Alignment records read from BAM/SAM/CRAM files through pysam."""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

import pysam

from .cigar import CigarOps, from_pysam, match_count, read_length

logger = logging.getLogger("gfa_injection")

# SAM value for a missing mapping quality
MAPQ_UNAVAILABLE = 255


@dataclass
class AlignmentRecord:
    read_id: Optional[str]
    reference_name: Optional[str]
    ref_start: Optional[int]    # 1-based, inclusive
    ref_end: Optional[int]      # 1-based, inclusive
    alignment_span: int
    is_reverse: bool
    cigar: CigarOps = field(default_factory=list)
    mapping_quality: Optional[int] = None

    @property
    def query_length(self) -> int:
        return read_length(self.cigar)

    @property
    def matches(self) -> int:
        return match_count(self.cigar)

    @classmethod
    def from_segment(cls, read: pysam.AlignedSegment) -> "AlignmentRecord":
        """Copy the fields needed for projection out of a pysam record.

        Unmapped reads keep their name but carry no reference or coordinates.
        """
        cigar = from_pysam(read.cigartuples or [])
        mapq = read.mapping_quality
        if read.is_unmapped or read.reference_end is None:
            return cls(read.query_name, None, None, None, 0, read.is_reverse, cigar, None)
        return cls(
            read_id=read.query_name,
            reference_name=read.reference_name,
            ref_start=read.reference_start + 1,
            ref_end=read.reference_end,
            alignment_span=read.reference_length,
            is_reverse=read.is_reverse,
            cigar=cigar,
            mapping_quality=None if mapq == MAPQ_UNAVAILABLE else mapq,
        )


def _open_mode(path: str) -> str:
    lower = path.lower()
    if lower.endswith(".bam"):
        return "rb"
    if lower.endswith(".cram"):
        return "rc"
    return "r"


def read_alignments(path: Union[str, Path]) -> Iterator[AlignmentRecord]:
    """
    Yield every record of an alignment file in file order.

    Read or decode errors are not caught: a damaged stream aborts the run.
    """
    path = str(path)
    with pysam.AlignmentFile(path, _open_mode(path), check_sq=False) as bam:
        logger.debug("%s lists %d reference sequences", path, bam.nreferences)
        for read in bam.fetch(until_eof=True):
            yield AlignmentRecord.from_segment(read)
