# external_solver.py
# Running SAT solvers on the generated instances
#
# Two backends with the same interface: pysat's bundled solvers in-process,
# or any solver binary that reads DIMACS and follows the competition
# conventions (exit code 10 = SAT, 20 = UNSAT, model in "v" lines).

import os
import shutil
import subprocess
import tempfile
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Set

from pysat.solvers import Cadical195, Glucose42, Solver

from cover_errors import IOFailure, InputFormatError
from dimacs_writer import save_dimacs
from solution_decoder import true_variables


class SolverResult(Enum):
    UNKNOWN = "unknown"
    SAT = "sat"
    UNSAT = "unsat"
    ABORTED = "aborted"

    @classmethod
    def from_exit_code(cls, code: int) -> "SolverResult":
        if code == 10:
            return cls.SAT
        if code == 20:
            return cls.UNSAT
        if code == 0:
            return cls.UNKNOWN
        raise RuntimeError(f"Unexpected solver exit code {code}")


@dataclass
class SolveOutcome:
    result: SolverResult
    model: Optional[Set[int]]  # true variables, only for SAT
    solve_time: float

    @property
    def is_sat(self) -> bool:
        return self.result == SolverResult.SAT


def parse_solver_output(text: str) -> Optional[Set[int]]:
    """
    Reduce solver output to the set of true variables

    Accepted forms: competition output ("s SATISFIABLE" and "v" lines),
    minisat result files ("SAT" then one literal line) and bare literal
    lines. Comment lines ("c ...") are skipped.

    Returns:
        set of true variables, or None if the output reports UNSAT/UNKNOWN
    """
    trues = set()
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith('c'):
            continue
        if stripped.startswith('s '):
            if stripped[2:].strip() != "SATISFIABLE":
                return None
            continue
        if stripped in ("UNSAT", "INDET", "UNKNOWN"):
            return None
        if stripped == "SAT":
            continue
        if stripped.startswith('v'):
            stripped = stripped[1:]
        try:
            lits = [int(token) for token in stripped.split()]
        except ValueError:
            raise InputFormatError(f"Unexpected line in solver output: \"{stripped}\"") from None
        trues.update(true_variables(lits))
    return trues


class PysatBackend:
    """In-process solving through pysat; name as understood by pysat.solvers.Solver"""

    def __init__(self, name: str = 'glucose42', verbose: bool = False):
        self.name = name
        self.verbose = verbose

    def _create_solver(self):
        if self.name == 'glucose42':
            return Glucose42()
        elif self.name == 'cadical195':
            return Cadical195()
        try:
            return Solver(name=self.name)
        except NotImplementedError:
            raise ValueError(f"Unknown pysat solver '{self.name}'") from None

    def solve(self, n: int, clauses: Iterable[Sequence[int]],
              timeout: Optional[float] = None) -> SolveOutcome:
        """
        Args:
            n: number of variables (unused variables are reported false)
            clauses: iterable of clauses
            timeout: seconds, None for no limit
        """
        solver = self._create_solver()
        try:
            for clause in clauses:
                solver.add_clause(clause)
            start_time = time.time()
            if timeout is None:
                is_sat = solver.solve()
            else:
                timer = threading.Timer(timeout, solver.interrupt)
                timer.start()
                try:
                    is_sat = solver.solve_limited(expect_interrupt=True)
                finally:
                    timer.cancel()
            solve_time = time.time() - start_time
            model = None
            if is_sat:
                result = SolverResult.SAT
                model = {v for v in true_variables(solver.get_model()) if v <= n}
            elif is_sat is False:
                result = SolverResult.UNSAT
            else:
                result = SolverResult.ABORTED
        finally:
            solver.delete()
        if self.verbose:
            print(f"{self.name} result: {result.value.upper()} ({solve_time:.3f}s)")
        return SolveOutcome(result, model, solve_time)


class ExternalBackend:
    """
    Solver binary reading a DIMACS file

    Args:
        path: path to the executable
        args: extra arguments placed before the CNF file
        model_file: the solver writes its model to a second file argument
            (minisat style) instead of stdout
    """

    def __init__(self, path: str, args: Sequence[str] = (), model_file: bool = False,
                 verbose: bool = False):
        if not os.path.exists(path):
            raise IOFailure(path, "solver executable not found")
        self.path = path
        self.args = list(args)
        self.model_file = model_file
        self.verbose = verbose

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def solve(self, n: int, clauses: Iterable[Sequence[int]],
              timeout: Optional[float] = None) -> SolveOutcome:
        temp_dir = tempfile.mkdtemp()
        cnf_file = os.path.join(temp_dir, "formula.cnf")
        result_file = os.path.join(temp_dir, "result.out")
        try:
            save_dimacs(cnf_file, n, clauses)
            cmd = [self.path] + self.args + [cnf_file]
            if self.model_file:
                cmd.append(result_file)
            if self.verbose:
                print(f"Running: {' '.join(cmd)}")

            start_time = time.time()
            try:
                completed = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
            except subprocess.TimeoutExpired:
                if self.verbose:
                    print(f"{self.name} timeout after {timeout}s")
                return SolveOutcome(SolverResult.ABORTED, None, time.time() - start_time)
            solve_time = time.time() - start_time

            result = SolverResult.from_exit_code(completed.returncode)
            model = None
            if result == SolverResult.SAT:
                if self.model_file:
                    with open(result_file) as f:
                        output = f.read()
                else:
                    output = completed.stdout
                model = parse_solver_output(output)
                if model is None:
                    raise InputFormatError(f"{self.name} exited with SAT but printed no model")
            if self.verbose:
                print(f"{self.name} result: {result.value.upper()} ({solve_time:.3f}s)")
            return SolveOutcome(result, model, solve_time)
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)


def create_backend(solver: str, verbose: bool = False):
    """A path to an existing file selects ExternalBackend, anything else a pysat solver"""
    if os.sep in solver or os.path.isfile(solver):
        return ExternalBackend(solver, verbose=verbose)
    return PysatBackend(solver, verbose=verbose)
