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

"""Shared fixtures: small GFA graphs and a BAM file written to a temporary directory."""

from pathlib import Path

import pysam
import pytest

from gfa_injection.path_index import PathStepIndex

BAM_HEADER = {
    "HD": {"VN": "1.6", "SO": "unsorted"},
    "SQ": [{"SN": "chr1", "LN": 12}, {"SN": "chrX", "LN": 100}],
}

# name, flag, reference id, 0-based position, cigar, sequence, mapping quality
BAM_READS = [
    ("r1", 0, 0, 5, [(0, 4)], "CCGG", 60),
    ("r2", 16, 0, 5, [(4, 2), (0, 4)], "AACCGG", 255),
    ("r3", 4, -1, -1, None, "ACGT", 0),
    ("r4", 0, 1, 0, [(0, 4)], "ACGT", 30),
]

# Segments 1 (4 bp), 2 (3 bp) and 3 (5 bp); chr1 = 1+,2+,3- with offsets {0, 4, 7}
CHR1_GFA = (
    "H\tVN:Z:1.0\n"
    "S\t1\tACGT\n"
    "S\t2\tCCC\n"
    "S\t3\tGGGGG\n"
    "L\t1\t+\t2\t+\t0M\n"
    "L\t2\t+\t3\t-\t0M\n"
    "P\tchr1\t1+,2+,3-\t*\n"
)


@pytest.fixture
def write_gfa(tmp_path):
    def _write(text: str, name: str = "graph.gfa") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def chr1_gfa(write_gfa) -> Path:
    return write_gfa(CHR1_GFA)


@pytest.fixture
def chr1_index(chr1_gfa) -> PathStepIndex:
    return PathStepIndex.from_gfa(chr1_gfa)


def _segment(header, name, flag, ref_id, pos, cigar, seq, mapq):
    read = pysam.AlignedSegment(header)
    read.query_name = name
    read.query_sequence = seq
    read.flag = flag
    read.reference_id = ref_id
    read.reference_start = pos
    read.mapping_quality = mapq
    if cigar is not None:
        read.cigartuples = cigar
    read.next_reference_id = -1
    read.next_reference_start = -1
    return read


@pytest.fixture
def bam_path(tmp_path) -> Path:
    """BAM with r1 and r2 on chr1, r3 unmapped and r4 on chrX."""
    path = tmp_path / "reads.bam"
    with pysam.AlignmentFile(str(path), "wb", header=BAM_HEADER) as out:
        for read in BAM_READS:
            out.write(_segment(out.header, *read))
    return path
