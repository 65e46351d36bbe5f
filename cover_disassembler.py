# cover_disassembler.py
# Splitting a decoded biclique cover into per-block files
#
# Output directory layout for an instance with DIMACS parameters n, c:
#   E0              the whole cover, one line "left | right" per block
#   A_<n>_<c>_<i>   the i-th block (1-based) as "left | right"
#   E_<n>_<c>_<i>   the edges covered by the i-th block, one per line
#   graph.txt       the graph itself (write_graph), for a self-contained directory
# A corpus leaf holds graph.txt, params.txt and solution.txt; its blocks
# go to <leaf>/blocks.

import os
from typing import Dict, List, Tuple

from adjacency_graph import Graph, parse_adjacency_file
from biclique_encoder import BicliqueCoverTranslation, greedy_incompatible_edges
from corpus_walker import LEAF_SUFFIX, for_each_leaf
from cover_errors import IOFailure, InconsistentAssignment, InputFormatError
from cover_options import GraphType
from external_solver import parse_solver_output
from solution_decoder import BicliqueCover, decode_bicliques

GRAPH_FILE = "graph.txt"
PARAMS_FILE = "params.txt"
SOLUTION_FILE = "solution.txt"
BLOCKS_DIR = "blocks"


def extract_dir_path(filename, dirname: str = "") -> str:
    """Output directory: dirname if given, else the stem of filename"""
    if dirname:
        return dirname
    return os.path.splitext(os.path.basename(filename))[0]


def e0_path(directory) -> str:
    return os.path.join(directory, "E0")


def par_part(n: int, c: int, i: int) -> str:
    return f"{n}_{c}_{i + 1}"


def a_path(directory, n: int, c: int, i: int) -> str:
    return os.path.join(directory, "A_" + par_part(n, c, i))


def e_path(directory, n: int, c: int, i: int) -> str:
    return os.path.join(directory, "E_" + par_part(n, c, i))


def _write_lines(path, lines: List[str]):
    try:
        with open(path, 'w') as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e


def disassemble(cover: BicliqueCover, graph: Graph, directory, n: int, c: int) -> List[str]:
    """
    Write E0 and the per-block files of the non-empty blocks

    Returns:
        list: paths written, E0 first
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise IOFailure(directory, e.strerror or str(e)) from e

    written = [e0_path(directory)]
    _write_lines(written[0], cover.output_lines(graph))
    trimmed = cover.trim()
    for i, block in enumerate(trimmed.blocks):
        single = BicliqueCover((block,))
        path = a_path(directory, n, c, i)
        _write_lines(path, single.output_lines(graph))
        written.append(path)
        edges = []
        for e in sorted(block.edges):
            u, v = graph.edge(e)
            edges.append(f"{graph.name(u)} {graph.name(v)}")
        path = e_path(directory, n, c, i)
        _write_lines(path, edges)
        written.append(path)
    return written


def write_graph(graph: Graph, directory) -> str:
    """Write the graph as adjacency list to directory/graph.txt"""
    path = os.path.join(directory, GRAPH_FILE)
    try:
        with open(path, 'w') as f:
            f.write(graph.to_adjacency_text())
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e
    return path


def read_leaf_params(path) -> Dict[str, object]:
    """
    Parameters of a corpus leaf, one "key value" pair per line

    Keys: B (required), graph (und/dir, default und), partition (0/1),
    sb (number of symmetry-breaking edges, default 0), sb_rounds and seed
    (greedy rounds and their seed, default 1 and 0).
    """
    try:
        with open(path) as f:
            lines = f.readlines()
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e

    raw = {}
    for line in lines:
        tokens = line.split()
        if not tokens or tokens[0].startswith('#'):
            continue
        if len(tokens) != 2:
            raise InputFormatError(f"{path}: expected \"key value\", got \"{line.strip()}\"")
        raw[tokens[0]] = tokens[1]
    if 'B' not in raw:
        raise InputFormatError(f"{path}: missing parameter B")

    graph_type = GraphType.read(raw.get('graph', ''))
    if graph_type is None:
        raise InputFormatError(f"{path}: unknown graph type \"{raw['graph']}\"")
    try:
        return {
            'B': int(raw['B']),
            'graph_type': graph_type,
            'partition': bool(int(raw.get('partition', '0'))),
            'sb': int(raw.get('sb', '0')),
            'sb_rounds': int(raw.get('sb_rounds', '1')),
            'seed': int(raw.get('seed', '0')),
        }
    except ValueError:
        raise InputFormatError(f"{path}: numeric parameter expected") from None


def decode_leaf(leaf, verbose: bool = False) -> Tuple[Graph, BicliqueCover]:
    """
    Decode the solution stored in a corpus leaf and write its blocks

    Raises:
        InconsistentAssignment: the solution is not a biclique cover of the graph
    """
    params = read_leaf_params(os.path.join(leaf, PARAMS_FILE))
    graph = parse_adjacency_file(os.path.join(leaf, GRAPH_FILE), params['graph_type'])
    sb_edges = greedy_incompatible_edges(graph, params['sb_rounds'], params['seed'])[:params['sb']] \
        if params['sb'] else ()
    translation = BicliqueCoverTranslation(graph, params['B'], params['partition'], sb_edges)

    solution_path = os.path.join(leaf, SOLUTION_FILE)
    try:
        with open(solution_path) as f:
            trues = parse_solver_output(f.read())
    except OSError as e:
        raise IOFailure(solution_path, e.strerror or str(e)) from e
    if trues is None:
        raise InconsistentAssignment(f"{solution_path}: no satisfying assignment")

    cover = decode_bicliques(translation.enc, trues)
    problems = cover.problems(graph)
    if problems:
        raise InconsistentAssignment(f"{leaf}: " + "; ".join(problems[:5]))
    disassemble(cover, graph, os.path.join(leaf, BLOCKS_DIR),
                translation.enc.n_total, translation.num_clauses())
    if verbose:
        print(f"{leaf}: {len(cover.nonempty_blocks())} bicliques")
    return graph, cover


def disassemble_corpus(root, suffix: str = LEAF_SUFFIX, workers: int = 1,
                       verbose: bool = False) -> Dict[str, int]:
    """Decode every leaf of the corpus; leaf path -> number of non-empty blocks"""
    def operation(leaf):
        _, cover = decode_leaf(leaf, verbose)
        return len(cover.nonempty_blocks())

    return for_each_leaf(root, operation, suffix, workers)
