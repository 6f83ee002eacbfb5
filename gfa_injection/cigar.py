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

# cigar.py
from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple

CigarOps = List[Tuple[int, str]]

# pysam operation codes, in BAM order
BAM_CIGAR_OPS = "MIDNSHP=XB"

_QUERY_OPS = "MIS=X"
_REF_OPS = "MDN=X"
_MATCH_OPS = "M=X"


def from_pysam(cigartuples: Iterable[Tuple[int, int]]) -> CigarOps:
    """Convert pysam's (op_code, length) pairs to (length, op) pairs."""
    return [(ln, BAM_CIGAR_OPS[code]) for code, ln in cigartuples]


def read_length(ops: Sequence[Tuple[int, str]]) -> int:
    """Bases of the read covered by the CIGAR, soft clips included."""
    return sum(ln for ln, op in ops if op in _QUERY_OPS)


def reference_length(ops: Sequence[Tuple[int, str]]) -> int:
    return sum(ln for ln, op in ops if op in _REF_OPS)


def match_count(ops: Sequence[Tuple[int, str]]) -> int:
    """Sum of M, = and X lengths."""
    return sum(ln for ln, op in ops if op in _MATCH_OPS)
