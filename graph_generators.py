# graph_generators.py
# Standard graphs with known biclique-cover numbers, for testing the search
#
# Vertices are named "1".."n" as in Graph.from_edge_list; bicliques name
# their sides "l1".."lp" and "r1".."rq".

from typing import List

from adjacency_graph import Graph
from cover_errors import InvalidBound


def clique(n: int) -> Graph:
    """The complete graph K_n"""
    if n < 0:
        raise InvalidBound(f"Number of vertices must be non-negative, but is {n}")
    return Graph.from_edge_list(n, [(u, v) for u in range(n) for v in range(u + 1, n)])


def bcc_clique(n: int) -> int:
    """bcc(K_n) = ceil(log2 n), 0 for n <= 1"""
    if n < 0:
        raise InvalidBound(f"Number of vertices must be non-negative, but is {n}")
    return (n - 1).bit_length() if n > 1 else 0


def biclique(p: int, q: int) -> Graph:
    """The complete bipartite graph K_{p,q}"""
    if p < 0 or q < 0:
        raise InvalidBound(f"Side sizes must be non-negative, but are {p} and {q}")
    names = [f"l{i + 1}" for i in range(p)] + [f"r{j + 1}" for j in range(q)]
    return Graph(names, [(i, p + j) for i in range(p) for j in range(q)])


def bcc_biclique(p: int, q: int) -> int:
    return min(p * q, 1)


def cnf_clique(n: int) -> List[List[int]]:
    """
    n clauses whose conflict graph is K_n

    The clauses are the first n full clauses over bcc_clique(n) variables,
    clause i having variable k+1 positive iff bit k of i is set. Any two
    differ in some variable, which is a clash.
    """
    k = bcc_clique(n)
    return [[v + 1 if (i >> v) & 1 else -(v + 1) for v in range(k)] for i in range(n)]
