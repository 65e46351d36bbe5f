# biclique_encoder.py
# SAT translation of the biclique-cover problem: variable encoding and clauses
#
# For a graph G with n vertices and m edges and a bound B on the number of
# bicliques, three variable families are allocated in this order:
#   left(v,b)  = 1 + v + n*b                  (n*B variables)
#   right(v,b) = 1 + n*B + v + n*b            (n*B variables)
#   edge(e,b)  = 1 + 2*n*B + e + m*b          (m*B variables)
# Together they are exactly 1..2nB+mB. Saved instances and solver outputs
# depend on this numbering, so it must never change.

import random
from typing import Iterator, List, Sequence, Tuple

from adjacency_graph import Graph
from cover_errors import GraphTooLarge, IndexOutOfRange, InvalidBound

# Largest variable index a 32-bit DIMACS solver (and pysat) accepts
MAX_VAR_ID = 2**31 - 1

LEFT, RIGHT, EDGE = "left", "right", "edge"


class VarEncoding:
    """
    Immutable numbering of the left/right/edge variables for (G, B).

    Attributes:
        n: number of vertices
        m: number of edges
        B: number of blocks (bicliques)
        nb: number of vertex variables (2*n*B)
        ne: number of edge variables (m*B)
        n_total: total number of variables (nb + ne)
    """

    __slots__ = ('n', 'm', 'B', 'nb', 'ne', 'n_total')

    def __init__(self, graph: Graph, B: int):
        if B < 1:
            raise InvalidBound(f"Number of bicliques must be at least 1, but is {B}")
        n, m = graph.n(), graph.m()
        vertex_vars = n * B
        edge_vars = m * B
        if vertex_vars > MAX_VAR_ID or edge_vars > MAX_VAR_ID or \
                2 * vertex_vars + edge_vars > MAX_VAR_ID:
            raise GraphTooLarge(
                f"n={n}, m={m}, B={B} needs {2 * vertex_vars + edge_vars} variables,"
                f" maximum is {MAX_VAR_ID}")
        object.__setattr__(self, 'n', n)
        object.__setattr__(self, 'm', m)
        object.__setattr__(self, 'B', B)
        object.__setattr__(self, 'nb', 2 * vertex_vars)
        object.__setattr__(self, 'ne', edge_vars)
        object.__setattr__(self, 'n_total', 2 * vertex_vars + edge_vars)

    def __setattr__(self, name, value):
        raise AttributeError("VarEncoding is immutable")

    def __eq__(self, other):
        if not isinstance(other, VarEncoding):
            return NotImplemented
        return (self.n, self.m, self.B) == (other.n, other.m, other.B)

    def __hash__(self):
        return hash((self.n, self.m, self.B))

    def __repr__(self):
        return f"VarEncoding(n={self.n}, m={self.m}, B={self.B}, n_total={self.n_total})"

    def _check_block(self, b):
        if not 0 <= b < self.B:
            raise IndexOutOfRange(f"Block {b} outside 0..{self.B - 1}")

    def left(self, v: int, b: int) -> int:
        if not 0 <= v < self.n:
            raise IndexOutOfRange(f"Vertex {v} outside 0..{self.n - 1}")
        self._check_block(b)
        return 1 + v + self.n * b

    def right(self, v: int, b: int) -> int:
        if not 0 <= v < self.n:
            raise IndexOutOfRange(f"Vertex {v} outside 0..{self.n - 1}")
        self._check_block(b)
        return 1 + self.n * self.B + v + self.n * b

    def edge(self, e: int, b: int) -> int:
        if not 0 <= e < self.m:
            raise IndexOutOfRange(f"Edge {e} outside 0..{self.m - 1}")
        self._check_block(b)
        return 1 + self.nb + e + self.m * b

    def decode_var(self, var: int) -> Tuple[str, int, int]:
        """
        Inverse of left/right/edge

        Returns:
            tuple: (family, vertex-or-edge index, block)
        """
        if not 1 <= var <= self.n_total:
            raise IndexOutOfRange(f"Variable {var} outside 1..{self.n_total}")
        code = var - 1
        half = self.nb // 2
        if code < half:
            return LEFT, code % self.n, code // self.n
        if code < self.nb:
            code -= half
            return RIGHT, code % self.n, code // self.n
        code -= self.nb
        return EDGE, code % self.m, code // self.m


def edges_compatible(graph: Graph, e1: int, e2: int) -> bool:
    """Whether some biclique of the graph contains both edges"""
    a, b = graph.edge(e1)
    c, d = graph.edge(e2)
    orientations = [({a, c}, {b, d})]
    if not graph.directed:
        orientations.append(({a, d}, {b, c}))
    for left, right in orientations:
        if left & right:
            continue
        if all(graph.has_edge(x, y) for x in left for y in right):
            return True
    return False


def _greedy_round(graph: Graph, order: Sequence[int]) -> List[int]:
    chosen: List[int] = []
    for e in order:
        if all(not edges_compatible(graph, e, f) for f in chosen):
            chosen.append(e)
    return chosen


def greedy_incompatible_edges(graph: Graph, rounds: int = 1, seed: int = 0,
                              verbose: bool = False) -> List[int]:
    """
    Pairwise incompatible edges, chosen greedily

    No biclique contains two of them, so their number is a lower bound
    for the biclique-cover number. The first round takes the edges in
    index order, every further round in an order shuffled by
    random.Random(seed). The first largest result is returned.

    Args:
        graph: the graph
        rounds: number of greedy rounds, at least 1
        seed: seed of the shuffles
        verbose: print the sizes found
    """
    if rounds < 1:
        raise InvalidBound(f"Number of symmetry-breaking rounds must be at least 1, but is {rounds}")
    order = list(range(graph.m()))
    best = _greedy_round(graph, order)
    sizes = [len(best)]
    rng = random.Random(seed)
    for _ in range(rounds - 1):
        rng.shuffle(order)
        chosen = _greedy_round(graph, order)
        sizes.append(len(chosen))
        if len(chosen) > len(best):
            best = chosen
    if verbose:
        print(f"Symmetry-breaking: {rounds} : {min(sizes)} {sum(sizes) / len(sizes):.2f} {max(sizes)}; seed {seed}")
    return best


class BicliqueCoverTranslation:
    """
    Clauses expressing "G has a biclique cover (or partition) of size <= B".

    Clauses are generated lazily, block by block: edge definitions, then
    the biclique property; afterwards the cover clauses, the partition
    clauses and the symmetry-breaking units.
    """

    def __init__(self, graph: Graph, B: int, partition: bool = False,
                 symmetry_edges: Sequence[int] = ()):
        self.graph = graph
        self.enc = VarEncoding(graph, B)
        self.partition = partition
        symmetry_edges = tuple(symmetry_edges)
        for e in symmetry_edges:
            if not 0 <= e < graph.m():
                raise IndexOutOfRange(f"Symmetry-breaking edge {e} outside 0..{graph.m() - 1}")
        # Fixing more than B edges would address blocks that do not exist
        self.symmetry_edges = symmetry_edges[:B]

    def num_nonedges(self) -> int:
        """Ordered pairs (v,w), v == w included, which are not edges"""
        n, m = self.enc.n, self.enc.m
        return n * n - (m if self.graph.directed else 2 * m)

    def num_clauses(self) -> int:
        B, m = self.enc.B, self.enc.m
        per_edge = 2 if self.graph.directed else 4
        count = B * (per_edge * m + self.num_nonedges()) + m
        if self.partition:
            count += m * B * (B - 1) // 2
        return count + len(self.symmetry_edges)

    def edge_definition_clauses(self, b: int) -> Iterator[List[int]]:
        enc = self.enc
        for e, (u, v) in enumerate(self.graph.edges):
            x = enc.edge(e, b)
            if self.graph.directed:
                yield [-x, enc.left(u, b)]
                yield [-x, enc.right(v, b)]
            else:
                lu, lv = enc.left(u, b), enc.left(v, b)
                ru, rv = enc.right(u, b), enc.right(v, b)
                yield [-x, lu, lv]
                yield [-x, ru, rv]
                yield [-x, lu, ru]
                yield [-x, lv, rv]

    def biclique_clauses(self, b: int) -> Iterator[List[int]]:
        enc = self.enc
        n = enc.n
        for v in range(n):
            neighbours = self.graph.neighbours(v)
            for w in range(n):
                if w not in neighbours:
                    yield [-enc.left(v, b), -enc.right(w, b)]

    def cover_clauses(self) -> Iterator[List[int]]:
        for e in range(self.enc.m):
            yield [self.enc.edge(e, b) for b in range(self.enc.B)]

    def partition_clauses(self) -> Iterator[List[int]]:
        B = self.enc.B
        for e in range(self.enc.m):
            for b in range(B):
                for b2 in range(b + 1, B):
                    yield [-self.enc.edge(e, b), -self.enc.edge(e, b2)]

    def symmetry_breaking_clauses(self) -> Iterator[List[int]]:
        for i, e in enumerate(self.symmetry_edges):
            yield [self.enc.edge(e, i)]

    def clauses(self) -> Iterator[List[int]]:
        for b in range(self.enc.B):
            yield from self.edge_definition_clauses(b)
            yield from self.biclique_clauses(b)
        yield from self.cover_clauses()
        if self.partition:
            yield from self.partition_clauses()
        yield from self.symmetry_breaking_clauses()

    def statistics(self) -> List[Tuple[str, object]]:
        """Key/value pairs for the comment block of the CNF output"""
        enc = self.enc
        return [
            ('V', enc.n),
            ('E', enc.m),
            ('B', enc.B),
            ('graph_type', self.graph.graph_type.long_name),
            ('partition', int(self.partition)),
            ('sb_edges', len(self.symmetry_edges)),
            ('  nb', enc.nb),
            ('  ne', enc.ne),
            ('n', enc.n_total),
            ('c', self.num_clauses()),
        ]
