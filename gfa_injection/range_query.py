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

"""Map a half-open path coordinate range to the steps overlapping it."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .path_index import PathStepIndex, Step


@dataclass(frozen=True)
class StepRange:
    """Steps [start_index, end_index) of one path."""

    path_id: int
    start_index: int
    end_index: int

    def __len__(self) -> int:
        return self.end_index - self.start_index

    def iter_steps(self, index: PathStepIndex) -> Iterator[Tuple[int, Step]]:
        """Yield (step_index, step) pairs in path order."""
        steps = index.steps(self.path_id)
        for ix in range(self.start_index, self.end_index):
            yield ix, steps[ix]

    def first_offset(self, index: PathStepIndex) -> int:
        """Path coordinate at which the first step of the range begins."""
        return index.offsets(self.path_id).select(self.start_index)


def query(index: PathStepIndex, path_name: str, start: int, end: int) -> Optional[StepRange]:
    """Find the steps of `path_name` whose extent intersects [start, end).

    A step starting exactly at `start` is included, one starting exactly at
    `end` is not.

    Args:
        index: The loaded path index.
        path_name: Name of the path to query.
        start: 0-based first coordinate.
        end: 0-based coordinate one past the last.

    Returns:
        The matching StepRange, or None when the path is unknown or nothing
        overlaps the range.
    """
    path_id = index.path_id(path_name)
    if path_id is None:
        return None
    start = max(start, 0)
    if end <= start or start >= index.total_length(path_id):
        return None

    offsets = index.offsets(path_id)
    start_rank = offsets.rank(start)
    # offsets strictly below `end`
    end_rank = offsets.rank(end - 1)

    first = max(start_rank - 1, 0)
    if end_rank <= first:
        return None
    return StepRange(path_id, first, end_rank)
