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

from gfa_injection.cigar import from_pysam, match_count, read_length, reference_length


def test_counts():
    # 5S10M2I3D4=1X
    ops = from_pysam([(4, 5), (0, 10), (1, 2), (2, 3), (7, 4), (8, 1)])
    assert ops == [(5, "S"), (10, "M"), (2, "I"), (3, "D"), (4, "="), (1, "X")]
    assert read_length(ops) == 22
    assert match_count(ops) == 15
    assert reference_length(ops) == 18


def test_hard_clips_and_skips_are_not_read_bases():
    # 3H10M100N10M3H
    ops = from_pysam([(5, 3), (0, 10), (3, 100), (0, 10), (5, 3)])
    assert read_length(ops) == 20
    assert reference_length(ops) == 120
    assert match_count(ops) == 20


def test_empty_cigar():
    assert from_pysam([]) == []
    assert read_length([]) == match_count([]) == 0
