# adjacency_graph.py
# Graph model for the SAT translations, read from adjacency-list text
#
# Input format: one line per vertex, "name neighbour1 neighbour2 ...";
# lines starting with "#" and blank lines are skipped. Vertices are indexed
# 0..n-1 in order of first appearance, edges 0..m-1 in order of first
# appearance.

import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cover_errors import IOFailure, IndexOutOfRange, InputFormatError
from cover_options import GraphType


class Graph:
    """
    Read-only graph: vertices 0..n-1, edges 0..m-1.

    Undirected edges are stored as (u, v) with u < v, directed edges as
    the arc (u, v). Lookup of an edge index by endpoint pair is O(1).
    """

    def __init__(self, names: Sequence[str], edges: Iterable[Tuple[int, int]],
                 graph_type=GraphType.UNDIRECTED):
        self._names = tuple(names)
        self._graph_type = graph_type
        self._index_of_name = {name: i for i, name in enumerate(self._names)}
        if len(self._index_of_name) != len(self._names):
            raise InputFormatError("Vertex names must be unique")

        n = len(self._names)
        edge_list = []
        edge_index = {}
        for u, v in edges:
            if not (0 <= u < n and 0 <= v < n):
                raise IndexOutOfRange(f"Edge ({u},{v}) outside vertex range 0..{n - 1}")
            if u == v:
                raise InputFormatError(f"Loop at vertex {self._names[u]} not allowed")
            key = self._key(u, v)
            if key in edge_index:
                raise InputFormatError(f"Duplicate edge {self._names[u]} {self._names[v]}")
            edge_index[key] = len(edge_list)
            edge_list.append(key)
        self._edges = tuple(edge_list)
        self._edge_index = edge_index

        adjacency = [set() for _ in range(n)]
        for u, v in self._edges:
            adjacency[u].add(v)
            if not self.directed:
                adjacency[v].add(u)
        self._adjacency = tuple(frozenset(a) for a in adjacency)

    def _key(self, u, v):
        if self.directed or u < v:
            return (u, v)
        return (v, u)

    @classmethod
    def from_edge_list(cls, n, edges, graph_type=GraphType.UNDIRECTED):
        """Graph on vertices named "1".."n" (0-based indices in edges)"""
        return cls([str(i + 1) for i in range(n)], edges, graph_type)

    @property
    def directed(self) -> bool:
        return self._graph_type == GraphType.DIRECTED

    @property
    def graph_type(self):
        return self._graph_type

    def n(self) -> int:
        return len(self._names)

    def m(self) -> int:
        return len(self._edges)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def edges(self) -> Tuple[Tuple[int, int], ...]:
        return self._edges

    def name(self, v: int) -> str:
        if not 0 <= v < self.n():
            raise IndexOutOfRange(f"Vertex {v} outside 0..{self.n() - 1}")
        return self._names[v]

    def index(self, name: str) -> int:
        try:
            return self._index_of_name[name]
        except KeyError:
            raise IndexOutOfRange(f"Unknown vertex name \"{name}\"") from None

    def edge(self, e: int) -> Tuple[int, int]:
        if not 0 <= e < self.m():
            raise IndexOutOfRange(f"Edge {e} outside 0..{self.m() - 1}")
        return self._edges[e]

    def edge_index(self, u: int, v: int) -> Optional[int]:
        """Index of the edge between u and v (arc u->v if directed), or None"""
        if u == v:
            return None
        return self._edge_index.get(self._key(u, v))

    def has_edge(self, u: int, v: int) -> bool:
        return self.edge_index(u, v) is not None

    def neighbours(self, v: int) -> frozenset:
        """Out-neighbours for directed graphs"""
        if not 0 <= v < self.n():
            raise IndexOutOfRange(f"Vertex {v} outside 0..{self.n() - 1}")
        return self._adjacency[v]

    def get_graph_statistics(self) -> Dict[str, float]:
        """
        Get basic graph statistics

        Returns:
            dict: n, m, min/max/avg degree, density
        """
        n, m = self.n(), self.m()
        degrees = [0] * n
        for u, v in self._edges:
            degrees[u] += 1
            degrees[v] += 1
        possible = n * (n - 1) if self.directed else n * (n - 1) // 2
        return {
            'num_nodes': n,
            'num_edges': m,
            'min_degree': min(degrees) if degrees else 0,
            'max_degree': max(degrees) if degrees else 0,
            'avg_degree': sum(degrees) / n if n else 0,
            'density': m / possible if possible else 0,
        }

    def to_adjacency_text(self) -> str:
        """Inverse of parse_adjacency_text (up to the order of lines)"""
        lines = []
        for v in range(self.n()):
            targets = sorted(w for w in self._adjacency[v]
                             if self.directed or w > v)
            lines.append(" ".join([self._names[v]] + [self._names[w] for w in targets]))
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return f"Graph(n={self.n()}, m={self.m()}, type={self._graph_type.short_name})"


class AdjacencyParser:
    """
    Parser for adjacency-list graph files
    Converts the text representation to a Graph
    """

    def __init__(self, graph_type=GraphType.UNDIRECTED, verbose=False):
        self.graph_type = graph_type
        self.verbose = verbose

    def parse_lines(self, lines: Iterable[str]) -> Graph:
        names: List[str] = []
        index: Dict[str, int] = {}
        edges = []
        seen = set()
        directed = self.graph_type == GraphType.DIRECTED

        def vertex(token):
            if token not in index:
                index[token] = len(names)
                names.append(token)
            return index[token]

        for line_number, line in enumerate(lines, 1):
            tokens = line.split()
            if not tokens or tokens[0].startswith('#'):
                continue
            u = vertex(tokens[0])
            for token in tokens[1:]:
                v = vertex(token)
                if u == v:
                    raise InputFormatError(f"Line {line_number}: loop at vertex \"{token}\"")
                key = (u, v) if directed or u < v else (v, u)
                # Both directions of an undirected edge may be listed
                if key in seen:
                    continue
                seen.add(key)
                edges.append(key)

        graph = Graph(names, edges, self.graph_type)
        if self.verbose:
            print(f"Graph extracted: {graph.n()} nodes, {graph.m()} edges")
        return graph

    def parse_text(self, text: str) -> Graph:
        return self.parse_lines(text.splitlines())

    def parse_file(self, path) -> Graph:
        if self.verbose:
            print(f"Parsing adjacency file: {path}")
        try:
            with open(path, 'r') as f:
                return self.parse_lines(f)
        except OSError as e:
            raise IOFailure(path, e.strerror or str(e)) from e


def parse_adjacency_text(text, graph_type=GraphType.UNDIRECTED) -> Graph:
    return AdjacencyParser(graph_type).parse_text(text)


def parse_adjacency_file(path, graph_type=GraphType.UNDIRECTED, verbose=False) -> Graph:
    if not os.path.exists(path):
        raise IOFailure(path, "file not found")
    return AdjacencyParser(graph_type, verbose).parse_file(path)
