"""linebasic interpreter: public API."""

from __future__ import annotations

from typing import Callable

from .assemble import EXIT_LABEL, AssembleError, Program, assemble
from .parse import ParseError as ParseError, parse, parse_tokens
from .runtime import BasicRuntimeError, Interpreter, run_program
from .tokens import TokenizeError as TokenizeError, tokenize

__all__ = [
    "EXIT_LABEL",
    "AssembleError",
    "BasicRuntimeError",
    "Interpreter",
    "ParseError",
    "Program",
    "TokenizeError",
    "assemble",
    "load",
    "parse",
    "parse_tokens",
    "run",
    "run_file",
    "tokenize",
]


def load(source: str) -> Program:
    """Tokenize, parse and assemble linebasic source."""
    return assemble(parse(source))


def run(
    source: str,
    *,
    write: Callable[[str], object] | None = None,
    read_line: Callable[[], str] | None = None,
) -> None:
    """Run linebasic source to completion, or raise the first fatal error."""
    run_program(load(source), write=write, read_line=read_line)


def run_file(
    path: str,
    *,
    write: Callable[[str], object] | None = None,
    read_line: Callable[[], str] | None = None,
) -> None:
    """Read a program from ``path`` and run it."""
    with open(path, encoding="utf-8") as f:
        source = f.read()
    run(source, write=write, read_line=read_line)
