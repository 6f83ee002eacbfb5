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

"""Sorted set of step start offsets with sub-linear rank/select.

Whole-genome paths carry millions of steps and every alignment issues a query,
so the offsets live in a compressed roaring bitmap rather than a Python list.
"""

from __future__ import annotations
from typing import Iterable, Iterator, Optional

from pyroaring import BitMap

MAX_OFFSET = (1 << 32) - 1


class PositionIndex:
    """
    Immutable set of 32-bit path offsets.

    Example:
        >>> idx = PositionIndex([0, 4, 7])
        >>> idx.rank(5), idx.select(1), idx.range_cardinality(0, 7)
        (2, 4, 2)
    """

    __slots__ = ("_bitmap",)

    def __init__(self, offsets: Iterable[int] = ()) -> None:
        self._bitmap = BitMap(list(offsets))
        self._bitmap.run_optimize()

    def rank(self, x: int) -> int:
        """Number of stored offsets <= x."""
        if x < 0:
            return 0
        if x > MAX_OFFSET:
            return len(self._bitmap)
        return self._bitmap.rank(x)

    def select(self, r: int) -> Optional[int]:
        """The r-th smallest stored offset (0-based), or None when out of range."""
        if not 0 <= r < len(self._bitmap):
            return None
        return self._bitmap[r]

    def range_cardinality(self, lo: int, hi: int) -> int:
        """Number of stored offsets within [lo, hi)."""
        if hi <= lo:
            return 0
        return self.rank(hi - 1) - self.rank(lo - 1)

    def __len__(self) -> int:
        return len(self._bitmap)

    def __iter__(self) -> Iterator[int]:
        return iter(self._bitmap)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionIndex):
            return NotImplemented
        return self._bitmap == other._bitmap

    def __repr__(self) -> str:
        return f"PositionIndex(n={len(self)})"
