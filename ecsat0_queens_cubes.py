# ecsat0_queens_cubes.py
# Command-line driver: exact-cover SAT instance from queens cubes
#
# Reads m queens cubes of order N from standard input and creates the
# SAT instance with N*m primary variables directly representing the
# exact-cover problem. Without "+" only the statistics are printed. With a
# solver output as second argument, its solution is decoded instead: one line
# " co,cu ..." (digit, cube) followed by the Latin square.

import sys

from cover_errors import CoverEncodingError, EmptyInput, IOFailure
from cover_options import ConstraintType, ProgramInfo, read_with_output_flag
from dimacs_writer import format_statistics, save_dimacs
from exact_cover_encoder import EC0Encoding, read_queens_cubing
from external_solver import parse_solver_output
from solution_decoder import decode_exact_cover

PROGRAM_INFO = ProgramInfo("ECSAT0_QueensCubes", "0.1.1", "19.10.2026")

FILE_PREFIX = "ECSAT0_QC_"
FILE_SUFFIX = ".cnf"


def output_filename(N: int, m: int) -> str:
    return f"{FILE_PREFIX}{N}_{m}{FILE_SUFFIX}"


def usage() -> str:
    return (
        f"> {PROGRAM_INFO.program} [+]constraint-type [solver-output]\n\n"
        f" - constraint-type : {ConstraintType.describe()}\n"
        " - solver-output   : file with a solution of the instance\n\n"
        "reads from standard input and establishes N, m:\n\n"
        f"  - if \"+\" used, creates file {FILE_PREFIX}N_m{FILE_SUFFIX}\n"
        "    (otherwise just statistics are output)\n"
        "  - for the option the first possibility is the default, "
        "triggered by the empty string.\n"
        "  - with solver-output, its solution is printed as \"digit,cube\" pairs\n"
        "    and as Latin square.\n"
    )


def statistics_lines(enc: EC0Encoding, argv, full: bool = False):
    lines = []
    if full:
        lines += PROGRAM_INFO.banner().splitlines()
        lines.append("** Parameters **")
    lines += format_statistics([('command-line', " ".join([PROGRAM_INFO.program] + list(argv)))])
    lines += format_statistics(enc.statistics())
    return lines


def print_solution(enc: EC0Encoding, path) -> int:
    """Decode the solver output in path; exit code as for main"""
    error = PROGRAM_INFO.error_prefix()
    try:
        with open(path) as f:
            trues = parse_solver_output(f.read())
    except OSError as e:
        print(error + str(IOFailure(path, e.strerror or str(e))), file=sys.stderr)
        return 3
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 2
    if trues is None:
        print("UNSAT")
        return 20
    try:
        solution = decode_exact_cover(enc, trues)
        square = solution.as_latin_square(enc.cubes)
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 2
    print(solution.output_line())
    for row in square:
        print(" ".join(map(str, row)))
    return 0


def main(argv=None, stdin=None):
    argv = sys.argv[1:] if argv is None else argv
    stdin = sys.stdin if stdin is None else stdin
    error = PROGRAM_INFO.error_prefix()

    if argv and argv[0] in ("-v", "--version"):
        print(PROGRAM_INFO.banner())
        return 0
    if argv and argv[0] in ("-h", "--help"):
        print(usage())
        return 0
    if len(argv) not in (1, 2):
        print(error + "1 or 2 command-line arguments needed (constraint-type, solver-output),"
              f" but the real number is {len(argv)}.", file=sys.stderr)
        return 1

    ct, output = read_with_output_flag(ConstraintType, argv[0])
    if ct is None:
        rest = argv[0][1:] if output else argv[0]
        print(error + f"The constraint-type could not be read from string \"{rest}\".",
              file=sys.stderr)
        return 1

    try:
        cubes = read_queens_cubing(stdin)
        enc = EC0Encoding(cubes, ct)
    except EmptyInput:
        print("Empty input.")
        return 0
    except CoverEncodingError as e:
        print(error + str(e), file=sys.stderr)
        return 2

    if len(argv) == 2:
        return print_solution(enc, argv[1])

    if not output:
        for line in statistics_lines(enc, argv):
            print("c " + line)
        return 0

    filename = output_filename(enc.N, enc.m)
    print(filename)
    try:
        save_dimacs(filename, enc.n, enc.clauses(), enc.c, statistics_lines(enc, argv, full=True))
    except IOFailure as e:
        print(error + str(e), file=sys.stderr)
        return 3
    return 0


if __name__ == '__main__':
    sys.exit(main())
