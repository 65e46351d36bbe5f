# bcc_by_sat.py
# Biclique-cover number by a chain of SAT calls
#
# Starting from an upper bound B, each satisfiable instance yields a cover;
# its empty blocks are removed and the search continues with one block less
# than the cover actually uses. The chain stops when the instance becomes
# unsatisfiable (the last cover is optimal), when B drops below the lower
# bound given by pairwise incompatible edges, or when a solver call is
# aborted (the last cover is only an upper bound).

import argparse
import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from adjacency_graph import Graph, parse_adjacency_file, parse_adjacency_text
from biclique_encoder import BicliqueCoverTranslation, greedy_incompatible_edges
from conflict_graphs import load_conflict_graph, read_conflict_graph
from cover_errors import CoverEncodingError, IOFailure, InconsistentAssignment
from cover_disassembler import disassemble, extract_dir_path, write_graph
from cover_options import GraphType, ProgramInfo
from external_solver import SolverResult, create_backend
from solution_decoder import BicliqueCover, decode_bicliques

PROGRAM_INFO = ProgramInfo("bcc_by_sat", "0.2.0", "19.10.2026")


class SearchConfig:
    """Configuration of the SAT search chain"""

    def __init__(self):
        self.solver = 'glucose42'
        # Seconds; 0 disables the limit
        self.sat_solve_timeout = 300.0
        self.total_timeout = 600.0

        self.partition = False
        self.symmetry_breaking = True
        # Greedy rounds for the incompatible edges; rounds after the first are shuffled
        self.sb_rounds = 100
        self.seed = 0

    def update(self, **kwargs):
        """Update settings; timeouts are converted to float"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                if isinstance(getattr(self, key), float):
                    value = float(value)
                setattr(self, key, value)
                print(f"Updated {key} = {value}")
            else:
                print(f"Warning: Unknown search setting '{key}'")

    def get_summary(self) -> str:
        summary = []
        summary.append(f"Solver: {self.solver}")
        summary.append(f"SAT solve timeout: {self.sat_solve_timeout}s")
        summary.append(f"Total timeout: {self.total_timeout}s")
        summary.append(f"Biclique partition: {self.partition}")
        summary.append(f"Symmetry breaking: {self.symmetry_breaking}")
        if self.symmetry_breaking:
            summary.append(f"Symmetry-breaking rounds: {self.sb_rounds} (seed {self.seed})")
        return '\n'.join(summary)


@dataclass
class SearchResult:
    """
    Outcome of the search chain

    bcc is the size of the best cover found (None if none was found);
    it is the biclique-cover (or partition) number iff exact is True.
    """
    bcc: Optional[int]
    lower_bound: int
    upper_bound: Optional[int]
    exact: bool
    cover: Optional[BicliqueCover]
    calls: List[Dict] = field(default_factory=list)

    def status(self) -> str:
        if self.bcc is None:
            return "unsat" if self.exact else "unknown"
        return "exact" if self.exact else "upper"


def _remaining(config: SearchConfig, start_time: float) -> Optional[float]:
    limits = []
    if config.sat_solve_timeout > 0:
        limits.append(config.sat_solve_timeout)
    if config.total_timeout > 0:
        limits.append(config.total_timeout - (time.time() - start_time))
    return min(limits) if limits else None


def search_bcc(graph: Graph, config: Optional[SearchConfig] = None, B: Optional[int] = None,
               verbose: bool = False) -> SearchResult:
    """
    Minimise the number of bicliques covering (or partitioning) the edges

    Args:
        graph: the graph
        config: SearchConfig (defaults if None)
        B: initial upper bound, default the number of edges
        verbose: print one line per solver call

    Returns:
        SearchResult
    """
    config = config or SearchConfig()
    if graph.m() == 0:
        return SearchResult(0, 0, 0, True, BicliqueCover(()))

    sb_edges = greedy_incompatible_edges(graph, config.sb_rounds, config.seed, verbose) \
        if config.symmetry_breaking else []
    lower = max(1, len(sb_edges))
    B = graph.m() if B is None else B
    backend = create_backend(config.solver, verbose=verbose)

    best = None
    exact = False
    calls = []
    start_time = time.time()
    while True:
        if best is not None and B < lower:
            exact = True
            break
        timeout = _remaining(config, start_time)
        if timeout is not None and timeout <= 0:
            break
        translation = BicliqueCoverTranslation(graph, B, config.partition, sb_edges)
        enc = translation.enc
        if verbose:
            print(f"B = {B}: n = {enc.n_total}, c = {translation.num_clauses()}")
        outcome = backend.solve(enc.n_total, translation.clauses(), timeout)
        calls.append({
            'B': B,
            'result': outcome.result.value,
            'solve_time': outcome.solve_time,
            'n': enc.n_total,
            'c': translation.num_clauses(),
        })
        if outcome.result == SolverResult.SAT:
            cover = decode_bicliques(enc, outcome.model).trim()
            problems = cover.problems(graph)
            if problems:
                raise InconsistentAssignment("Solver model is no cover: " + "; ".join(problems[:5]))
            best = cover
            B = cover.size() - 1
        elif outcome.result == SolverResult.UNSAT:
            lower = max(lower, B + 1)
            exact = True
            break
        else:
            break

    upper = best.size() if best is not None else None
    if best is not None and exact:
        lower = upper
    return SearchResult(upper, lower, upper, exact, best, calls)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Compute the biclique-cover number of a graph by SAT solving'
    )
    parser.add_argument('graph', help='Adjacency-list file ("-" for standard input)')
    parser.add_argument('-B', type=int, help='Initial upper bound (default: number of edges)')
    parser.add_argument('--solver', default='glucose42',
                        help='pysat solver name or path to a DIMACS solver binary')
    parser.add_argument('--directed', action='store_true', help='Read the graph as directed')
    parser.add_argument('--cnf', action='store_true',
                        help='Input is a DIMACS CNF; use its conflict graph')
    parser.add_argument('--partition', action='store_true',
                        help='Biclique partition instead of cover')
    parser.add_argument('--no-sb', action='store_true', help='Disable symmetry breaking')
    parser.add_argument('--sb-rounds', type=int, default=100,
                        help='Greedy rounds for the symmetry-breaking edges (default: 100)')
    parser.add_argument('--seed', type=int, default=0, help='Seed for the shuffled rounds (default: 0)')
    parser.add_argument('--timeout', type=float, default=300.0,
                        help='Timeout per SAT call in seconds, 0 for none (default: 300)')
    parser.add_argument('--total-timeout', type=float, default=600.0,
                        help='Timeout of the whole search in seconds, 0 for none (default: 600)')
    parser.add_argument('--cover-dir', nargs='?', const='', default=None,
                        help='Write the optimal cover as block files into this directory'
                             ' (default directory: the stem of the graph file)')
    parser.add_argument('--version', action='store_true', help='Show program information')
    parser.add_argument('-q', '--quiet', action='store_true', help='Print only the result')
    args = parser.parse_args(argv)

    if args.version:
        print(PROGRAM_INFO.banner())
        return 0

    graph_type = GraphType.DIRECTED if args.directed else GraphType.UNDIRECTED
    error = PROGRAM_INFO.error_prefix()
    if args.cnf and args.directed:
        print(error + "Conflict graphs are undirected; --cnf excludes --directed", file=sys.stderr)
        return 1
    if args.cover_dir == '' and args.graph == '-':
        print(error + "--cover-dir needs a directory when reading standard input", file=sys.stderr)
        return 1
    try:
        if args.cnf:
            graph = read_conflict_graph(sys.stdin) if args.graph == '-' else load_conflict_graph(args.graph)
        elif args.graph == '-':
            graph = parse_adjacency_text(sys.stdin.read(), graph_type)
        else:
            graph = parse_adjacency_file(args.graph, graph_type)
    except IOFailure as e:
        print(error + str(e), file=sys.stderr)
        return 3
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 2

    config = SearchConfig()
    config.solver = args.solver
    config.sat_solve_timeout = args.timeout
    config.total_timeout = args.total_timeout
    config.partition = args.partition
    config.symmetry_breaking = not args.no_sb
    config.sb_rounds = args.sb_rounds
    config.seed = args.seed

    if not args.quiet:
        print("=" * 60)
        stats = graph.get_graph_statistics()
        print(f"Graph: {args.graph}, {stats['num_nodes']} vertices, {stats['num_edges']} edges"
              f" ({graph_type.long_name})")
        print(f"Degrees: min {stats['min_degree']}, max {stats['max_degree']},"
              f" avg {stats['avg_degree']:.2f}; density {stats['density']:.4f}")
        print(config.get_summary())
        print("=" * 60)

    try:
        result = search_bcc(graph, config, args.B, verbose=not args.quiet)
    except IOFailure as e:
        print(error + str(e), file=sys.stderr)
        return 3
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 1

    print(f"bcc {result.status()} {result.bcc if result.bcc is not None else '-'}"
          f" lower {result.lower_bound}")
    if result.cover is not None:
        for line in result.cover.output_lines(graph):
            print(line)
    if args.cover_dir is not None and result.cover is not None:
        directory = extract_dir_path(args.graph, args.cover_dir)
        sat_calls = [call for call in result.calls if call['result'] == "sat"]
        n, c = (sat_calls[-1]['n'], sat_calls[-1]['c']) if sat_calls else (0, 0)
        try:
            written = disassemble(result.cover, graph, directory, n, c)
            write_graph(graph, directory)
        except IOFailure as e:
            print(error + str(e), file=sys.stderr)
            return 3
        if not args.quiet:
            print(f"Cover written to {directory} ({len(written)} files)")
    if not args.quiet:
        total_time = sum(call['solve_time'] for call in result.calls)
        print(f"SAT calls: {len(result.calls)}, solve time: {total_time:.3f}s")
    return 20 if result.status() == "unsat" else 0


if __name__ == '__main__':
    sys.exit(main())
