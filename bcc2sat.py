# bcc2sat.py
# Command-line driver: one biclique-cover SAT instance in DIMACS format

import argparse
import sys

from adjacency_graph import parse_adjacency_file, parse_adjacency_text
from biclique_encoder import BicliqueCoverTranslation, greedy_incompatible_edges
from conflict_graphs import load_conflict_graph, read_conflict_graph
from cover_errors import CoverEncodingError, IOFailure
from cover_options import GraphType, ProgramInfo
from dimacs_writer import format_statistics, save_dimacs, write_dimacs

PROGRAM_INFO = ProgramInfo("bcc2sat", "0.3.0", "19.10.2026")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Translate "graph has a biclique cover of size <= B" into CNF'
    )
    parser.add_argument('graph', nargs='?', default='-',
                        help='Adjacency-list file ("-" or missing for standard input)')
    parser.add_argument('-B', type=int, default=None,
                        help='Number of bicliques (default: number of edges)')
    parser.add_argument('--directed', action='store_true', help='Read the graph as directed')
    parser.add_argument('--cnf', action='store_true',
                        help='Input is a DIMACS CNF; use its conflict graph')
    parser.add_argument('--partition', action='store_true',
                        help='Biclique partition instead of cover')
    parser.add_argument('--no-sb', action='store_true', help='Disable symmetry breaking')
    parser.add_argument('--sb-rounds', type=int, default=100,
                        help='Greedy rounds for the symmetry-breaking edges (default: 100)')
    parser.add_argument('--seed', type=int, default=0, help='Seed for the shuffled rounds (default: 0)')
    parser.add_argument('-o', '--output', help='Output file (default: standard output)')
    parser.add_argument('--version', action='store_true', help='Show program information')
    args = parser.parse_args(argv)

    if args.version:
        print(PROGRAM_INFO.banner())
        return 0

    error = PROGRAM_INFO.error_prefix()
    if args.cnf and args.directed:
        print(error + "Conflict graphs are undirected; --cnf excludes --directed", file=sys.stderr)
        return 1
    graph_type = GraphType.DIRECTED if args.directed else GraphType.UNDIRECTED
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

    B = max(1, graph.m()) if args.B is None else args.B
    try:
        sb_edges = () if args.no_sb else greedy_incompatible_edges(graph, args.sb_rounds, args.seed)
        translation = BicliqueCoverTranslation(graph, B, args.partition, sb_edges)
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 1

    command_line = [PROGRAM_INFO.program] + list(sys.argv[1:] if argv is None else argv)
    comments = [PROGRAM_INFO.program + " " + PROGRAM_INFO.version,
                "command-line " + " ".join(command_line)]
    comments += format_statistics(translation.statistics())
    n, c = translation.enc.n_total, translation.num_clauses()
    try:
        if args.output:
            save_dimacs(args.output, n, translation.clauses(), c, comments)
            print(args.output)
        else:
            write_dimacs(sys.stdout, n, translation.clauses(), c, comments)
    except IOFailure as e:
        print(error + str(e), file=sys.stderr)
        return 3
    return 0


if __name__ == '__main__':
    sys.exit(main())
