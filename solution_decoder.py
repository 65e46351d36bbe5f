# solution_decoder.py
# Reconstructing biclique covers and exact covers from satisfying assignments
#
# The decoders use the same encoding objects as the translations, so the
# numbering arithmetic exists in one place only. Decoding is all-or-nothing.
# The decoders take the ids of the true variables, and an id the encoding does not
# know (including 0 and negatives) is rejected before any result is built.
# Solver models are reduced with true_variables first.

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from adjacency_graph import Graph
from biclique_encoder import EDGE, LEFT, RIGHT, VarEncoding
from cover_errors import InconsistentAssignment
from exact_cover_encoder import EC0Encoding


def true_variables(assignment: Iterable[int]) -> Set[int]:
    """
    Reduce solver output to the set of variables assigned true

    Negative literals and 0 terminators are ignored.
    """
    return {lit for lit in assignment if lit > 0}


def _check_range(trues: Iterable[int], n: int) -> Set[int]:
    trues = set(trues)
    outside = sorted(v for v in trues if not 1 <= v <= n)
    if outside:
        shown = " ".join(map(str, outside[:10]))
        raise InconsistentAssignment(
            f"{len(outside)} true variable(s) outside 1..{n}: {shown}")
    return trues


@dataclass(frozen=True)
class Block:
    """One biclique: its two sides (vertex indices) and the edges it covers"""
    left: frozenset
    right: frozenset
    edges: frozenset

    def is_empty(self) -> bool:
        return not (self.left or self.right or self.edges)


@dataclass(frozen=True)
class BicliqueCover:
    blocks: Tuple[Block, ...]

    def size(self) -> int:
        return len(self.blocks)

    def nonempty_blocks(self) -> List[int]:
        return [b for b, block in enumerate(self.blocks) if block.edges]

    def trim(self) -> "BicliqueCover":
        """Drop blocks covering no edge"""
        return BicliqueCover(tuple(block for block in self.blocks if block.edges))

    def problems(self, graph: Graph) -> List[str]:
        """Violations of the biclique/cover properties (empty if valid)"""
        problems = []
        covered = set()
        for b, block in enumerate(self.blocks):
            if block.left & block.right:
                problems.append(f"block {b}: sides intersect")
            for v in block.left:
                for w in block.right:
                    if not graph.has_edge(v, w):
                        problems.append(f"block {b}: {graph.name(v)} {graph.name(w)} not an edge")
            for e in block.edges:
                u, v = graph.edge(e)
                inside = (u in block.left and v in block.right) or \
                    (not graph.directed and v in block.left and u in block.right)
                if not inside:
                    problems.append(f"block {b}: edge {graph.name(u)} {graph.name(v)} not in biclique")
            covered |= block.edges
        for e in range(graph.m()):
            if e not in covered:
                u, v = graph.edge(e)
                problems.append(f"edge {graph.name(u)} {graph.name(v)} not covered")
        return problems

    def validate(self, graph: Graph) -> bool:
        return not self.problems(graph)

    def is_partition(self) -> bool:
        seen = set()
        for block in self.blocks:
            if seen & block.edges:
                return False
            seen |= block.edges
        return True

    def output_lines(self, graph: Graph) -> List[str]:
        """One line "left-names | right-names" per block with edges"""
        lines = []
        for block in self.blocks:
            if not block.edges:
                continue
            left = " ".join(graph.name(v) for v in sorted(block.left))
            right = " ".join(graph.name(v) for v in sorted(block.right))
            lines.append(f"{left} | {right}")
        return lines


def decode_bicliques(enc: VarEncoding, trues: Iterable[int]) -> BicliqueCover:
    """
    Blocks of the cover encoded by a satisfying assignment

    Args:
        enc: the VarEncoding the instance was built with
        trues: ids of the variables assigned true (see true_variables)

    Raises:
        InconsistentAssignment: an id lies outside 1..n_total
    """
    trues = _check_range(trues, enc.n_total)
    sides = {LEFT: [set() for _ in range(enc.B)],
             RIGHT: [set() for _ in range(enc.B)],
             EDGE: [set() for _ in range(enc.B)]}
    for var in trues:
        family, index, b = enc.decode_var(var)
        sides[family][b].add(index)
    return BicliqueCover(tuple(
        Block(frozenset(sides[LEFT][b]), frozenset(sides[RIGHT][b]), frozenset(sides[EDGE][b]))
        for b in range(enc.B)))


@dataclass(frozen=True)
class ExactCoverSolution:
    N: int
    m: int
    choices: Tuple[Tuple[int, int], ...]  # (digit, cube) sorted

    def output_line(self) -> str:
        """Chosen cubes as " co,cu co,cu ..." """
        return "".join(f" {co},{cu}" for co, cu in self.choices)

    def as_latin_square(self, cubes) -> List[List[int]]:
        """
        Cell (i,j) gets the digit of the cube covering it

        Raises:
            InconsistentAssignment: if the chosen cubes are no exact cover
        """
        N = self.N
        square: List[List[Optional[int]]] = [[None] * N for _ in range(N)]
        for co, cu in self.choices:
            for i, j in enumerate(cubes.queens(co, cu)):
                if square[i][j] is not None:
                    raise InconsistentAssignment(f"Cell ({i},{j}) covered twice")
                square[i][j] = co
        for i in range(N):
            for j in range(N):
                if square[i][j] is None:
                    raise InconsistentAssignment(f"Cell ({i},{j}) not covered")
        return square


def decode_exact_cover(enc: EC0Encoding, trues: Iterable[int]) -> ExactCoverSolution:
    """
    Selected cubes of a satisfying assignment; auxiliary variables are ignored

    Raises:
        InconsistentAssignment: an id lies outside 1..n
    """
    trues = _check_range(trues, enc.n)
    choices = sorted(enc.cube_of(v) for v in trues if v <= enc.n0)
    return ExactCoverSolution(enc.N, enc.m, tuple(choices))
