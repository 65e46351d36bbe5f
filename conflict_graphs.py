# conflict_graphs.py
# Conflict graphs of clause-sets
#
# The vertices of the conflict graph are the clauses (named "1".."c" in
# input order); two clauses are adjacent iff they clash, i.e. one contains
# a literal whose complement is in the other. Biclique covers of this graph
# correspond to variables of equivalent clause-sets.

from typing import Dict, List, Sequence, Tuple

from adjacency_graph import Graph
from cover_errors import IOFailure
from dimacs_writer import read_dimacs


def conflict_graph_by_definition(clauses: Sequence[Sequence[int]]) -> Graph:
    """Conflict graph by pairwise comparison of the clauses"""
    complements = [{-lit for lit in clause} for clause in clauses]
    edges = []
    for i, clause in enumerate(clauses):
        for j in range(i + 1, len(clauses)):
            if complements[j].intersection(clause):
                edges.append((i, j))
    return Graph.from_edge_list(len(clauses), edges)


def occurrences(clauses: Sequence[Sequence[int]]) -> Dict[int, List[int]]:
    """Literal -> indices of the clauses containing it, ascending"""
    occ: Dict[int, List[int]] = {}
    for i, clause in enumerate(clauses):
        for lit in set(clause):
            occ.setdefault(lit, []).append(i)
    return occ


def conflict_graph(clauses: Sequence[Sequence[int]]) -> Graph:
    """
    Conflict graph via occurrence lists

    For every variable the clauses containing it positively and those
    containing it negatively form a biclique of the conflict graph; the
    graph is the union of these bicliques. Edges are numbered in the order
    of conflict_graph_by_definition.
    """
    occ = occurrences(clauses)
    pairs = set()
    for lit, positive in occ.items():
        if lit < 0:
            continue
        for i in positive:
            for j in occ.get(-lit, ()):
                if i != j:
                    pairs.add((i, j) if i < j else (j, i))
    return Graph.from_edge_list(len(clauses), sorted(pairs))


def connected_components(clauses: Sequence[Sequence[int]]) -> Tuple[int, List[int]]:
    """
    Connected components of the conflict graph by depth-first search

    The graph is not built; neighbours are found through the occurrence
    lists. Components are numbered 1, 2, ... in order of their first clause.

    Returns:
        tuple: (number of components, component of each clause)
    """
    occ = occurrences(clauses)
    component = [0] * len(clauses)
    count = 0
    for start in range(len(clauses)):
        if component[start]:
            continue
        count += 1
        component[start] = count
        stack = [start]
        while stack:
            i = stack.pop()
            for lit in clauses[i]:
                for j in occ.get(-lit, ()):
                    if not component[j]:
                        component[j] = count
                        stack.append(j)
    return count, component


def read_conflict_graph(source) -> Graph:
    """Conflict graph of a DIMACS CNF (text or text stream)"""
    _, clauses = read_dimacs(source)
    return conflict_graph(clauses)


def load_conflict_graph(path) -> Graph:
    try:
        with open(path) as f:
            return read_conflict_graph(f)
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e
