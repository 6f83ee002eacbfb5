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

import dataclasses

import pytest

from gfa_injection.gfa_injection import USAGE, Config, UsageError, main, parse_args


def test_parse_args_builds_frozen_config():
    config = parse_args(["--gfa", "g.gfa", "--path", "chr1", "--start", "5", "--end", "9"])
    assert config == Config(gfa="g.gfa", path_range=("chr1", 5, 9))
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.gfa = "other.gfa"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--bam", "reads.bam"],
        ["--gfa", "g.gfa", "--path", "chr1"],
        ["--gfa", "g.gfa", "--path", "chr1", "--start", "x", "--end", "9"],
        ["--gfa", "g.gfa", "--path", "chr1", "--start", "-1", "--end", "9"],
    ],
)
def test_bad_arguments_print_usage(argv, capsys):
    with pytest.raises(UsageError):
        parse_args(argv)
    main(argv)
    assert capsys.readouterr().out == USAGE + "\n"


def test_path_range_command(chr1_gfa, capsys):
    main(["--gfa", str(chr1_gfa), "--path", "chr1", "--start", "5", "--end", "9"])
    assert capsys.readouterr().out.splitlines() == [
        "start_rank: 2",
        "end_rank: 3",
        "cardinality: 1",
        "------",
        "step_ix\tnode\tpos",
        "1\t2\t4",
        "2\t3\t7",
        "------------",
        "1\t2\t4",
        "2\t3\t7",
    ]


def test_path_range_unknown_path(chr1_gfa):
    with pytest.raises(SystemExit) as exc:
        main(["--gfa", str(chr1_gfa), "--path", "chr9", "--start", "0", "--end", "1"])
    assert exc.value.code == 1


def test_load_error_aborts(write_gfa):
    gfa = write_gfa("S\t1\tA\nS\t2\tA\nS\t4\tA\n")
    with pytest.raises(SystemExit) as exc:
        main(["--gfa", str(gfa), "--path", "chr1", "--start", "0", "--end", "1"])
    assert exc.value.code == 1


def test_bam_projection_to_file(chr1_gfa, bam_path, tmp_path):
    gaf = tmp_path / "reads.gaf"
    main(["--gfa", str(chr1_gfa), "--bam", str(bam_path), "--output", str(gaf)])
    assert gaf.read_text().splitlines() == [
        "r1\t4\t0\t4\t+\t>2<3\t8\t1\t5\t4\t4\t60",
        "r2\t6\t0\t6\t+\t>3<2\t8\t3\t7\t4\t4\t255",
    ]


def test_bam_projection_to_stdout(chr1_gfa, bam_path, capsys):
    main(["--gfa", str(chr1_gfa), "--bam", str(bam_path)])
    out = capsys.readouterr().out.splitlines()
    assert [ln.split("\t")[0] for ln in out] == ["r1", "r2"]
