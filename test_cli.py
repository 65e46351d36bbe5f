#!/usr/bin/env python3
# test_cli.py
# Tests for the command-line programs bcc2sat and ECSAT0_QueensCubes

import io
import os

from bcc2sat import main as bcc2sat_main
from dimacs_writer import read_dimacs
from ecsat0_queens_cubes import main as ecsat0_main
from ecsat0_queens_cubes import output_filename

CUBING_5 = "0 2 4 1 3\n0 3 1 4 2\n"
K4_TEXT = "a b c d\nb c d\nc d\n"


def statistics(out):
    """Statistics lines "c key value" as a dict"""
    result = {}
    for line in out.splitlines():
        parts = line.split()
        if len(parts) == 3 and parts[0] == 'c':
            result[parts[1]] = parts[2]
    return result


def test_ecsat0_statistics(capsys):
    assert ecsat0_main(["seco"], io.StringIO(CUBING_5)) == 0
    stats = statistics(capsys.readouterr().out)
    assert stats['N'] == "5"
    assert stats['m'] == "2"
    assert stats['Constraint_type'] == "seco"
    assert stats['Primary-n'] == "10"
    assert stats['Auxilliary-n'] == "0"
    assert stats['n'] == "10"
    assert stats['Non-disjointness-clauses'] == "20"
    assert stats['c'] == "30"


def test_ecsat0_default_constraint_type(capsys):
    assert ecsat0_main([""], io.StringIO(CUBING_5)) == 0
    assert statistics(capsys.readouterr().out)['Constraint_type'] == "prime"


def test_ecsat0_file_output(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert ecsat0_main(["+primes"], io.StringIO(CUBING_5)) == 0
    filename = output_filename(5, 2)
    assert filename == "ECSAT0_QC_5_2.cnf"
    assert capsys.readouterr().out == filename + "\n"
    with open(os.path.join(str(tmp_path), filename)) as f:
        n, clauses = read_dimacs(f)
    assert n == 10
    assert len(clauses) == 30


def test_ecsat0_empty_input(capsys):
    assert ecsat0_main(["+prime"], io.StringIO("")) == 0
    assert capsys.readouterr().out == "Empty input.\n"


def test_ecsat0_usage_errors(capsys):
    assert ecsat0_main(["sequential"], io.StringIO(CUBING_5)) == 1
    assert ecsat0_main([], io.StringIO(CUBING_5)) == 1
    assert ecsat0_main(["prime", "a", "b"], io.StringIO(CUBING_5)) == 1
    err = capsys.readouterr().err
    assert "ERROR[ECSAT0_QueensCubes]: " in err
    assert "\"sequential\"" in err


def test_ecsat0_solution_output(tmp_path, capsys):
    solution = tmp_path / "solution.txt"
    solution.write_text("s SATISFIABLE\nv 1 -2 3 -4 5 -6 7 -8 9 -10 0\n")
    assert ecsat0_main(["prime", str(solution)], io.StringIO(CUBING_5)) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == " 0,0 1,0 2,0 3,0 4,0"
    assert lines[1] == "0 1 2 3 4"
    assert lines[2] == "3 4 0 1 2"
    assert len(lines) == 6


def test_ecsat0_solution_errors(tmp_path, capsys):
    solution = tmp_path / "solution.txt"
    solution.write_text("s UNSATISFIABLE\n")
    assert ecsat0_main(["prime", str(solution)], io.StringIO(CUBING_5)) == 20
    assert capsys.readouterr().out == "UNSAT\n"
    solution.write_text("v 1 11 0\n")
    assert ecsat0_main(["prime", str(solution)], io.StringIO(CUBING_5)) == 2
    # A single cube is no exact cover
    solution.write_text("v 1 0\n")
    assert ecsat0_main(["prime", str(solution)], io.StringIO(CUBING_5)) == 2
    assert ecsat0_main(["prime", str(tmp_path / "missing.txt")], io.StringIO(CUBING_5)) == 3
    assert "ERROR[ECSAT0_QueensCubes]: " in capsys.readouterr().err


def test_ecsat0_input_error(capsys):
    assert ecsat0_main(["prime"], io.StringIO("0 1 2\n0 1\n")) == 2


def test_ecsat0_version(capsys):
    assert ecsat0_main(["--version"]) == 0
    assert "ECSAT0_QueensCubes" in capsys.readouterr().out


def test_bcc2sat_file(tmp_path, capsys):
    graph = tmp_path / "k4.txt"
    graph.write_text(K4_TEXT)
    out = tmp_path / "k4.cnf"
    assert bcc2sat_main([str(graph), "-B", "1", "-o", str(out)]) == 0
    assert capsys.readouterr().out == str(out) + "\n"
    with open(out) as f:
        n, clauses = read_dimacs(f)
    assert n == 14
    # 34 clauses plus one symmetry-breaking unit
    assert len(clauses) == 35


def test_bcc2sat_stdout(tmp_path, capsys):
    graph = tmp_path / "k4.txt"
    graph.write_text(K4_TEXT)
    assert bcc2sat_main([str(graph), "-B", "2", "--partition", "--no-sb"]) == 0
    n, clauses = read_dimacs(capsys.readouterr().out)
    assert n == 28
    assert len(clauses) == 2 * 28 + 6 + 6


def test_bcc2sat_errors(tmp_path, capsys):
    graph = tmp_path / "k4.txt"
    graph.write_text(K4_TEXT)
    assert bcc2sat_main([str(graph), "-B", "0"]) == 1
    assert bcc2sat_main([str(tmp_path / "missing.txt")]) == 3
    assert bcc2sat_main([str(graph), "-o", str(tmp_path / "no" / "dir.cnf")]) == 3
    assert "ERROR[bcc2sat]: " in capsys.readouterr().err


def test_bcc2sat_conflict_graph(tmp_path, capsys):
    cnf = tmp_path / "f.cnf"
    # Conflict graph: the path 1-2-3
    cnf.write_text("p cnf 2 3\n1 0\n-1 2 0\n-2 0\n")
    assert bcc2sat_main([str(cnf), "--cnf", "-B", "1", "--sb-rounds", "3", "--seed", "5"]) == 0
    n, clauses = read_dimacs(capsys.readouterr().out)
    assert n == 2 * 3 + 2
    assert bcc2sat_main([str(cnf), "--cnf", "--directed"]) == 1
    assert bcc2sat_main([str(cnf), "--cnf", "--sb-rounds", "0"]) == 1
