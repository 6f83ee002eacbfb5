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

"""Minimal line-oriented GFA reader.

Only the record tag and the tab-separated fields are interpreted here, the
segment and path layers decide what the fields mean.
"""

from __future__ import annotations
import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, TextIO, Tuple, Union


class GFALoadError(ValueError):
    """Raised when the graph cannot be loaded; the index is all-or-nothing."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class GFARecord:
    line_no: int
    tag: str
    fields: Tuple[str, ...]


def _open_maybe_gzip(path: Union[str, Path]) -> TextIO:
    path = str(path)
    if path.endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def parse_records(lines: Iterable[str], tags: Optional[str] = None) -> Iterator[GFARecord]:
    """Split GFA lines into records.

    Args:
        lines: Text lines, with or without their newline.
        tags: Record tags to keep (e.g. "S" or "SP"); all records when None.

    Yields:
        One GFARecord per non-empty line, numbered from 1.
    """
    for line_no, ln in enumerate(lines, 1):
        ln = ln.rstrip("\r\n")
        if not ln:
            continue
        tag = ln[0]
        if tags is not None and tag not in tags:
            continue
        p = ln.split("\t")
        yield GFARecord(line_no, p[0], tuple(f.strip() for f in p[1:]))


def read_records(path: Union[str, Path], tags: Optional[str] = None) -> Iterator[GFARecord]:
    """Stream records of the requested kinds from a (possibly gzipped) GFA file."""
    try:
        with _open_maybe_gzip(path) as fh:
            yield from parse_records(fh, tags)
    except UnicodeDecodeError as err:
        raise GFALoadError(f"{path} is not valid UTF-8: {err}") from err


def parse_tags(fields: Iterable[str]) -> Dict[str, str]:
    """Parse optional `XX:T:value` fields, keeping the value as text."""
    out: Dict[str, str] = {}
    for f in fields:
        p = f.split(":", 2)
        if len(p) == 3:
            out[p[0]] = p[2]
    return out


def parse_unsigned(token: str, what: str, line_no: Optional[int] = None) -> int:
    if not (token.isascii() and token.isdigit()):
        raise GFALoadError(f"invalid {what} {token!r}", line_no)
    return int(token)


def split_step_list(step_list: str) -> List[str]:
    return step_list.split(",") if step_list else []
