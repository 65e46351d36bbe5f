#!/usr/bin/env python3
# test_cover_disassembler.py
# Tests for per-block output and per-leaf corpus decoding

import os

import pytest

from adjacency_graph import parse_adjacency_text
from cover_disassembler import (
    BLOCKS_DIR, a_path, decode_leaf, disassemble, disassemble_corpus, e0_path, extract_dir_path,
    read_leaf_params, write_graph,
)
from cover_errors import IOFailure, InconsistentAssignment, InputFormatError
from cover_options import GraphType
from solution_decoder import BicliqueCover, Block

# The 4-cycle a-b-c-d-a, i.e. the complete bipartite graph {a,c} x {b,d}
C4_TEXT = "a b d\nc b d\n"
# B = 2: left(v,b) = 1+v+4b, right(v,b) = 9+v+4b, edge(e,b) = 17+e+4b
C4_SOLUTION = "s SATISFIABLE\nv 1 4 10 11 -12\nv 17 18 19 20 0\n"


def read(path):
    with open(path) as f:
        return f.read()


def make_leaf(directory, solution=C4_SOLUTION, params="B 2\ngraph und\n"):
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, "graph.txt"), 'w') as f:
        f.write(C4_TEXT)
    with open(os.path.join(directory, "params.txt"), 'w') as f:
        f.write(params)
    with open(os.path.join(directory, "solution.txt"), 'w') as f:
        f.write(solution)


def test_extract_dir_path():
    assert extract_dir_path(os.path.join("instances", "k4_B2.cnf")) == "k4_B2"
    assert extract_dir_path("k4_B2.cnf", "out") == "out"


def test_file_names():
    assert e0_path("d") == os.path.join("d", "E0")
    assert a_path("d", 24, 52, 0) == os.path.join("d", "A_24_52_1")


def test_disassemble(tmp_path):
    graph = parse_adjacency_text("a b c d\nb c d\nc d\n")
    cover = BicliqueCover((
        Block(frozenset({0, 1}), frozenset({2, 3}), frozenset({1, 2, 3, 4})),
        Block(frozenset(), frozenset(), frozenset()),
        Block(frozenset({0, 2}), frozenset({1, 3}), frozenset({0, 2, 3, 5})),
    ))
    directory = str(tmp_path / "k4")
    written = disassemble(cover, graph, directory, 42, 99)
    assert relative_names(written) == ["E0", "A_42_99_1", "E_42_99_1", "A_42_99_2", "E_42_99_2"]
    assert read(os.path.join(directory, "E0")) == "a b | c d\na c | b d\n"
    assert read(os.path.join(directory, "A_42_99_2")) == "a c | b d\n"
    assert read(os.path.join(directory, "E_42_99_1")) == "a c\na d\nb c\nb d\n"


def relative_names(paths):
    return [os.path.basename(p) for p in paths]


def test_disassemble_unwritable(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    graph = parse_adjacency_text("a b\n")
    with pytest.raises(IOFailure):
        disassemble(BicliqueCover(()), graph, str(blocker / "sub"), 1, 1)


def test_write_graph(tmp_path):
    graph = parse_adjacency_text(C4_TEXT)
    path = write_graph(graph, str(tmp_path))
    assert os.path.basename(path) == "graph.txt"
    assert read(path) == "a b d\nb c\nd c\nc\n"
    assert parse_adjacency_text(read(path)).edges == graph.edges


def test_read_leaf_params(tmp_path):
    path = tmp_path / "params.txt"
    path.write_text("# bound\nB 3\ngraph dir\npartition 1\n")
    params = read_leaf_params(str(path))
    assert params == {'B': 3, 'graph_type': GraphType.DIRECTED, 'partition': True, 'sb': 0,
                      'sb_rounds': 1, 'seed': 0}
    path.write_text("B 3\nsb 2\nsb_rounds 50\nseed 9\n")
    params = read_leaf_params(str(path))
    assert (params['sb'], params['sb_rounds'], params['seed']) == (2, 50, 9)

    path.write_text("graph und\n")
    with pytest.raises(InputFormatError):
        read_leaf_params(str(path))
    path.write_text("B 2\ngraph sideways\n")
    with pytest.raises(InputFormatError):
        read_leaf_params(str(path))


def test_decode_leaf(tmp_path):
    leaf = str(tmp_path / "c4.B")
    make_leaf(leaf)
    graph, cover = decode_leaf(leaf)
    assert cover.validate(graph)
    assert cover.nonempty_blocks() == [0]
    blocks = os.path.join(leaf, BLOCKS_DIR)
    # n = 2*4*2 + 4*2 = 24; c = 2 * (4*4 + 8) + 4 = 52
    assert sorted(os.listdir(blocks)) == ["A_24_52_1", "E0", "E_24_52_1"]
    assert read(os.path.join(blocks, "A_24_52_1")) == "a c | b d\n"


def test_decode_leaf_rejects_non_cover(tmp_path):
    leaf = str(tmp_path / "c4.B")
    make_leaf(leaf, solution="v 1 4 10 11 17 18 19 0\n")
    with pytest.raises(InconsistentAssignment):
        decode_leaf(leaf)


def test_decode_leaf_rejects_foreign_assignment(tmp_path):
    leaf = str(tmp_path / "c4.B")
    make_leaf(leaf, solution="v 1 4 10 11 17 18 19 20 25 0\n")
    with pytest.raises(InconsistentAssignment):
        decode_leaf(leaf)


def test_decode_leaf_unsat(tmp_path):
    leaf = str(tmp_path / "c4.B")
    make_leaf(leaf, solution="s UNSATISFIABLE\n")
    with pytest.raises(InconsistentAssignment):
        decode_leaf(leaf)


def test_disassemble_corpus(tmp_path):
    make_leaf(str(tmp_path / "run1" / "c4.B"))
    make_leaf(str(tmp_path / "run2" / "c4_again.B"))
    results = disassemble_corpus(str(tmp_path), workers=2)
    assert sorted(results.values()) == [1, 1]
    for leaf in results:
        assert os.path.isfile(os.path.join(leaf, BLOCKS_DIR, "E0"))
    # Output inside a leaf is not visited as a new leaf
    assert len(disassemble_corpus(str(tmp_path))) == 2
