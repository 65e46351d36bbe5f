# exact_cover_encoder.py
# SAT translation of the exact-cover problem for "queens cubes"
#
# Input are m solutions Q of the (pandiagonal) N-queens problem, each a
# permutation of 0..N-1. Shifting solution cu by digit co gives the cube
# (co,cu) covering the cells (i, (Q[i]+co) mod N). An exact cover of the
# N x N cells by such cubes is a Latin square. One primary variable per cube:
#   cube(co,cu) = 1 + co*m + cu                     (N*m variables)
# followed by the auxiliary variables of the exactly-one constraints.

from typing import Iterable, Iterator, List, Sequence, Tuple

from pysat.card import CardEnc, EncType
from pysat.formula import IDPool

from biclique_encoder import MAX_VAR_ID
from cover_errors import EmptyInput, GraphTooLarge, IndexOutOfRange, InputFormatError
from cover_options import ConstraintType


class QueensCubes:
    """The m base solutions of order N; cubes are their cyclic shifts"""

    def __init__(self, N: int, solutions: Sequence[Sequence[int]]):
        self.N = N
        self.solutions = tuple(tuple(q) for q in solutions)
        self.m = len(self.solutions)
        for q in self.solutions:
            if sorted(q) != list(range(N)):
                raise InputFormatError(f"Not a permutation of 0..{N - 1}: {' '.join(map(str, q))}")

    def queens(self, co: int, cu: int) -> Tuple[int, ...]:
        """Column of the queen in each row for cube (co,cu)"""
        if not 0 <= co < self.N:
            raise IndexOutOfRange(f"Digit {co} outside 0..{self.N - 1}")
        if not 0 <= cu < self.m:
            raise IndexOutOfRange(f"Cube {cu} outside 0..{self.m - 1}")
        N = self.N
        return tuple((j + co) % N for j in self.solutions[cu])

    def cells(self, co: int, cu: int) -> List[int]:
        """Cell indices i*N+j covered by cube (co,cu)"""
        N = self.N
        return [i * N + j for i, j in enumerate(self.queens(co, cu))]


def read_queens_cubing(lines: Iterable[str]) -> QueensCubes:
    """
    Read one solution per line, N whitespace-separated integers

    Blank lines and lines starting with "c" or "#" are skipped. N is the
    common line length (0 for empty input).
    """
    solutions = []
    N = None
    for line_number, line in enumerate(lines, 1):
        stripped = line.strip()
        if not stripped or stripped[0] in "c#":
            continue
        try:
            q = [int(token) for token in stripped.split()]
        except ValueError:
            raise InputFormatError(f"Line {line_number}: not a list of integers: \"{stripped}\"") from None
        if N is None:
            N = len(q)
        elif len(q) != N:
            raise InputFormatError(f"Line {line_number}: length {len(q)}, expected {N}")
        solutions.append(q)
    return QueensCubes(N or 0, solutions)


# Exactly-one building blocks. "prime" is the pairwise AMO; "seco" (sequential
# commander) replaces three literals x1,x2,x3 by a new y with the pairwise AMO
# over x1,x2,x3,-y and continues with y,x4,... until at most four remain.

def n_amo_seco(k: int) -> int:
    """Number of auxiliary variables of the seco AMO over k literals"""
    return 0 if k <= 4 else (k - 3) // 2


def c_amo_prime(k: int) -> int:
    return k * (k - 1) // 2


def c_amo_seco(k: int) -> int:
    return c_amo_prime(k) if k <= 4 else 3 * k - 6


def c_eo(k: int, ct: ConstraintType) -> int:
    """Clauses of one exactly-one constraint over k literals"""
    if ct == ConstraintType.PRIME:
        return 1 + c_amo_prime(k)
    count = 1 + c_amo_seco(k)
    if ct == ConstraintType.SECOUEP:
        count += n_amo_seco(k)
    return count


def amo_prime(lits: Sequence[int]) -> List[List[int]]:
    if len(lits) <= 1:
        return []
    return CardEnc.atmost(lits=list(lits), bound=1, encoding=EncType.pairwise).clauses


def amo_seco(lits: Sequence[int], new_var, uep: bool = False) -> Iterator[List[int]]:
    lits = list(lits)
    while len(lits) > 4:
        y = new_var()
        head = lits[:3]
        yield from amo_prime(head + [-y])
        if uep:
            yield [-y] + head
        lits = [y] + lits[3:]
    yield from amo_prime(lits)


class EC0Encoding:
    """
    Immutable parameters and clauses of the exact-cover SAT instance.

    Attributes:
        N, m: order and number of base solutions
        ct: ConstraintType
        n0: primary variables (one per cube, N*m)
        naux: auxiliary variables of the exactly-one constraints
        n: n0 + naux
        ceo: exactly-one clauses (one constraint per digit)
        cbin: non-disjointness clauses (cubes of different digits sharing a cell)
        c: ceo + cbin
    """

    def __init__(self, cubes: QueensCubes, ct: ConstraintType = ConstraintType.PRIME,
                 verbose: bool = False):
        if cubes.m == 0:
            raise EmptyInput("No queens cubes given")
        self.cubes = cubes
        self.ct = ct
        self.N = cubes.N
        self.m = cubes.m
        self.n0 = self.N * self.m
        self.aux_per_digit = 0 if ct == ConstraintType.PRIME else n_amo_seco(self.m)
        self.naux = self.N * self.aux_per_digit
        self.n = self.n0 + self.naux
        if self.n > MAX_VAR_ID:
            raise GraphTooLarge(f"N={self.N}, m={self.m} needs {self.n} variables, maximum is {MAX_VAR_ID}")
        self.ceo = self.N * c_eo(self.m, ct)
        self.cbin = self.count_conflicting_pairs()
        self.c = self.ceo + self.cbin
        if verbose:
            print(f"Created exact-cover encoding: N={self.N}, m={self.m}, ct={ct}")
            print(f"Variables: {self.n0} primary + {self.naux} auxiliary = {self.n}")
            print(f"Clauses: {self.ceo} exactly-one + {self.cbin} non-disjointness = {self.c}")

    def __setattr__(self, name, value):
        if name in self.__dict__:
            raise AttributeError("EC0Encoding is immutable")
        super().__setattr__(name, value)

    def cube_var(self, co: int, cu: int) -> int:
        if not 0 <= co < self.N:
            raise IndexOutOfRange(f"Digit {co} outside 0..{self.N - 1}")
        if not 0 <= cu < self.m:
            raise IndexOutOfRange(f"Cube {cu} outside 0..{self.m - 1}")
        return 1 + co * self.m + cu

    def cube_of(self, var: int) -> Tuple[int, int]:
        """Inverse of cube_var for primary variables"""
        if not 1 <= var <= self.n0:
            raise IndexOutOfRange(f"Variable {var} is not primary (1..{self.n0})")
        return divmod(var - 1, self.m)

    def _covering(self) -> List[List[int]]:
        """Primary variables covering each cell, ascending"""
        covering = [[] for _ in range(self.N * self.N)]
        for co in range(self.N):
            for cu in range(self.m):
                var = self.cube_var(co, cu)
                for cell in self.cubes.cells(co, cu):
                    covering[cell].append(var)
        return covering

    def count_conflicting_pairs(self) -> int:
        """Number of pairs yielded by conflicting_pairs(), via bitmasks over the variables"""
        N, m = self.N, self.m
        masks = []
        for vars_ in self._covering():
            mask = 0
            for var in vars_:
                mask |= 1 << var
            masks.append(mask)
        count = 0
        for co in range(N - 1):
            # Variables of the digits after co
            later = ~((1 << ((co + 1) * m + 1)) - 1)
            for cu in range(m):
                partners = 0
                for cell in self.cubes.cells(co, cu):
                    partners |= masks[cell]
                count += bin(partners & later).count("1")
        return count

    def conflicting_pairs(self) -> Iterator[Tuple[int, int]]:
        """Pairs a < b of primary variables of different digits sharing a cell"""
        N, m = self.N, self.m
        covering = self._covering()
        for co in range(N):
            for cu in range(m):
                a = self.cube_var(co, cu)
                first_other = (co + 1) * m + 1
                partners = set()
                for cell in self.cubes.cells(co, cu):
                    partners.update(b for b in covering[cell] if b >= first_other)
                for b in sorted(partners):
                    yield a, b

    def exactly_one_clauses(self) -> Iterator[List[int]]:
        vpool = IDPool(start_from=self.n0 + 1)
        for co in range(self.N):
            lits = [self.cube_var(co, cu) for cu in range(self.m)]
            yield lits
            if self.ct == ConstraintType.PRIME:
                yield from amo_prime(lits)
            else:
                step = iter(range(self.aux_per_digit))

                def new_var(co=co, step=step):
                    return vpool.id(('seco', co, next(step)))

                yield from amo_seco(lits, new_var, uep=self.ct == ConstraintType.SECOUEP)

    def non_disjointness_clauses(self) -> Iterator[List[int]]:
        for a, b in self.conflicting_pairs():
            yield [-a, -b]

    def clauses(self) -> Iterator[List[int]]:
        yield from self.exactly_one_clauses()
        yield from self.non_disjointness_clauses()

    def statistics(self) -> List[Tuple[str, object]]:
        return [
            ('N', self.N),
            ('m', self.m),
            ('Constraint_type', self.ct.short_name),
            ('  Primary-n', self.n0),
            ('  Auxilliary-n', self.naux),
            ('n', self.n),
            ('  Exactly-One-clauses', self.ceo),
            ('  Non-disjointness-clauses', self.cbin),
            ('c', self.c),
        ]

