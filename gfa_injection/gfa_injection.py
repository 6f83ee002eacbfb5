#!/usr/bin/env python3

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

""" This script will re-express linear reference alignments as GAF records
    on the paths of a pangenome graph.

    The reference sequence names of the BAM file must be path names of the
    GFA file. Segment IDs of the graph must be integers forming a contiguous
    range.

Examples:
    gfa-injection --gfa graph.gfa --bam reads.bam > reads.gaf

    gfa-injection --gfa graph.gfa --path chr1 --start 5 --end 9

"""

from typing import List, Optional, TextIO, Tuple
import sys
import logging
import argparse
import contextlib
from dataclasses import dataclass

from .alignment import read_alignments
from .gfa_io import GFALoadError
from .path_index import PathStepIndex
from .projector import project_alignments
from .range_query import query

USAGE = "USAGE: `gfa-injection --gfa <gfa-path> --bam <bam-path>`"


class UsageError(Exception):
    """Raised instead of exiting when the command line cannot be parsed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


@dataclass(frozen=True)
class Config:
    """Options of one run, parsed once from the command line."""

    gfa: str
    alignments: Optional[str] = None
    path_range: Optional[Tuple[str, int, int]] = None
    output: Optional[str] = None
    verbose: bool = False


def parse_args(argv: Optional[List[str]] = None) -> Config:
    """Parse the command line.

    Raises:
        UsageError: when --gfa is missing, a value is malformed or the
            --path/--start/--end group is incomplete.
    """
    parser = _ArgumentParser(prog="gfa-injection", description=__doc__)
    parser.add_argument("--gfa", type=str, required=True, help="GFA file, optionally gzipped")
    parser.add_argument("--bam", type=str, help="BAM/SAM/CRAM file to project onto the graph paths")
    parser.add_argument("--path", type=str, help="Path name for a diagnostic range query")
    parser.add_argument("--start", type=int, help="0-based start of the diagnostic range")
    parser.add_argument("--end", type=int, help="0-based exclusive end of the diagnostic range")
    parser.add_argument("--output", type=str, help="Output file, standard output by default")
    parser.add_argument("--verbose", action="store_true", help="Print debugging message")
    args = parser.parse_args(argv)

    path_range = None
    range_args = (args.path, args.start, args.end)
    if any(a is not None for a in range_args):
        if any(a is None for a in range_args):
            raise UsageError("--path, --start and --end must be given together")
        if args.start < 0 or args.end < 0:
            raise UsageError("--start and --end must not be negative")
        path_range = range_args

    return Config(
        gfa=args.gfa,
        alignments=args.bam,
        path_range=path_range,
        output=args.output,
        verbose=args.verbose,
    )


def _open_output(path: Optional[str]):
    if path is None or path == "-":
        return contextlib.nullcontext(sys.stdout)
    return open(path, "w", encoding="utf-8")


def path_range_cmd(path_index: PathStepIndex, path_name: str, start: int, end: int, out: TextIO) -> bool:
    """Print rank information and the steps overlapping [start, end) of a path.

    Returns:
        False when the path is not in the graph.
    """
    path_id = path_index.path_id(path_name)
    if path_id is None:
        logging.getLogger("gfa_injection").error("Path not found: %s", path_name)
        return False

    offsets = path_index.offsets(path_id)
    steps = path_index.steps(path_id)

    start_rank = offsets.rank(start)
    end_rank = offsets.rank(end)
    cardinality = offsets.range_cardinality(start, end)

    out.write(f"start_rank: {start_rank}\n")
    out.write(f"end_rank: {end_rank}\n")
    out.write(f"cardinality: {cardinality}\n")
    out.write("------\n")

    skip = max(start_rank - 1, 0)
    out.write("step_ix\tnode\tpos\n")
    for step_ix in range(skip, end_rank):
        node = path_index.segment_id(steps[step_ix])
        out.write(f"{step_ix}\t{node}\t{offsets.select(step_ix)}\n")

    out.write("------------\n")
    step_range = query(path_index, path_name, start, end)
    if step_range is not None:
        for step_ix, step in step_range.iter_steps(path_index):
            out.write(f"{step_ix}\t{path_index.segment_id(step)}\t{offsets.select(step_ix)}\n")
    out.flush()
    return True


def main(argv: Optional[List[str]] = None) -> None:
    """Load the path index from the GFA file, then run the requested command.

    With --bam every alignment is projected onto the graph paths; with
    --path/--start/--end a single range query is printed instead."""
    try:
        config = parse_args(argv)
    except UsageError:
        print(USAGE)
        return

    logger = logging.getLogger("gfa_injection")
    logger.setLevel(logging.INFO)
    if config.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        path_index = PathStepIndex.from_gfa(config.gfa)
    except GFALoadError as err:
        logger.error("Could not load %s: %s", config.gfa, err)
        sys.exit(1)

    if config.alignments:
        logger.info("Projecting %s", config.alignments)
        with _open_output(config.output) as out:
            project_alignments(read_alignments(config.alignments), path_index, out)
    elif config.path_range:
        with _open_output(config.output) as out:
            if not path_range_cmd(path_index, *config.path_range, out):
                sys.exit(1)


# Setting up the logger
main_logger = logging.getLogger("gfa_injection")
console_handler = logging.StreamHandler()
console_format = logging.Formatter(
    "%(asctime)s| %(levelname)s | %(module)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(console_format)
main_logger.addHandler(console_handler)

if __name__ == "__main__":
    main()
