"""linebasic CLI: load and run a program file."""

from __future__ import annotations

import logging
import sys

from . import load
from .parse import ParseError
from .runtime import BasicRuntimeError, run_program
from .tokens import TokenizeError


USAGE: str = """\
linebasic [OPTIONS] FILE

Run a linebasic program. INPUT statements read from stdin.

Options:
  --debug    Log tokenizing, assembly and every executed line to stderr
  --help     Show this help message
"""


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    debug = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--debug":
            debug = True
            i += 1
        elif arg.startswith("-"):
            print("linebasic: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("linebasic: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath == "":
        print("linebasic: missing file argument", file=sys.stderr)
        return 2

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(name)s: %(message)s",
        )

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("linebasic: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("linebasic: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("linebasic: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        program = load(source)
    except TokenizeError as e:
        print("linebasic: lexical error: " + str(e), file=sys.stderr)
        return 1
    except ParseError as e:
        print("linebasic: parse error: " + str(e), file=sys.stderr)
        return 1

    try:
        run_program(program)
    except BasicRuntimeError as e:
        sys.stdout.flush()
        print("linebasic: runtime error: " + str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
