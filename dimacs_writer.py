# dimacs_writer.py
# Writing and reading CNF formulas in the DIMACS format
#
# Header "p cnf <n> <c>", then one clause per line, literals as signed
# integers terminated by 0. Optional comment lines "c ..." precede the header.

import io
import os
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from cover_errors import ClauseCountMismatch, IOFailure, IndexOutOfRange, InputFormatError


def format_statistics(statistics: Sequence[Tuple[str, object]], width: int = 28) -> List[str]:
    """Key/value pairs as aligned lines (without the "c " prefix)"""
    return [f"{key:<{width}}{value}" for key, value in statistics]


def write_dimacs(out: TextIO, n: int, clauses: Iterable[Sequence[int]],
                 c: Optional[int] = None, comments: Iterable[str] = ()) -> int:
    """
    Write a CNF in DIMACS format

    The header needs the clause count before the clauses: if c is None the
    clauses are materialised first, otherwise they are streamed and the
    count checked afterwards.

    Args:
        out: text stream
        n: number of variables (all literals must lie in -n..-1, 1..n)
        clauses: iterable of clauses
        c: declared number of clauses
        comments: lines written as "c <line>" before the header

    Returns:
        int: number of clauses written

    Raises:
        ClauseCountMismatch: if c was given and differs from the emitted count
        IndexOutOfRange: for a literal outside the declared variables
    """
    if c is None:
        clauses = [list(clause) for clause in clauses]
        c = len(clauses)
    for line in comments:
        out.write(f"c {line}\n")
    out.write(f"p cnf {n} {c}\n")
    emitted = 0
    for clause in clauses:
        for lit in clause:
            if lit == 0 or abs(lit) > n:
                raise IndexOutOfRange(f"Literal {lit} outside the {n} declared variables")
        out.write(" ".join(map(str, clause)) + " 0\n")
        emitted += 1
    if emitted != c:
        raise ClauseCountMismatch(c, emitted)
    return emitted


def save_dimacs(path, n: int, clauses: Iterable[Sequence[int]],
                c: Optional[int] = None, comments: Iterable[str] = ()) -> int:
    """
    write_dimacs to a file; failure to open or write is an IOFailure

    A file whose clauses do not match its header is removed before the
    ClauseCountMismatch or IndexOutOfRange propagates.
    """
    try:
        with open(path, 'w') as f:
            try:
                return write_dimacs(f, n, clauses, c, comments)
            except (ClauseCountMismatch, IndexOutOfRange):
                f.close()
                os.remove(path)
                raise
    except OSError as e:
        if isinstance(e, IOFailure):
            raise
        raise IOFailure(path, e.strerror or str(e)) from e


def dimacs_string(n: int, clauses: Iterable[Sequence[int]],
                  c: Optional[int] = None, comments: Iterable[str] = ()) -> str:
    out = io.StringIO()
    write_dimacs(out, n, clauses, c, comments)
    return out.getvalue()


def read_dimacs(source) -> Tuple[int, List[List[int]]]:
    """
    Read a strict DIMACS CNF

    Args:
        source: text or text stream

    Returns:
        tuple: (n, clauses)
    """
    if isinstance(source, str):
        source = io.StringIO(source)
    header = None
    for line in source:
        stripped = line.strip()
        if not stripped or stripped.startswith('c'):
            continue
        header = stripped
        break
    if header is None or not header.startswith('p cnf '):
        raise InputFormatError(f"Missing \"p cnf\" header, found: {header!r}")
    try:
        n, c = (int(x) for x in header[6:].split())
    except ValueError:
        raise InputFormatError(f"Invalid header format: {header}") from None

    clauses = []
    current = []
    for line in source:
        stripped = line.strip()
        if not stripped or stripped.startswith('c'):
            continue
        try:
            lits = [int(token) for token in stripped.split()]
        except ValueError:
            raise InputFormatError(f"Not a clause line: \"{stripped}\"") from None
        for lit in lits:
            if lit == 0:
                clauses.append(current)
                current = []
            elif abs(lit) > n:
                raise InputFormatError(f"Literal {lit} exceeds n={n}")
            else:
                current.append(lit)
    if current:
        raise InputFormatError("Last clause not terminated by 0")
    if len(clauses) != c:
        raise ClauseCountMismatch(c, len(clauses))
    return n, clauses
