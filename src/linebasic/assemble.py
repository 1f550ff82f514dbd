"""linebasic assembler: lay out lines as instructions and index their labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ast import Label, Line
from .parse import ParseError

log = logging.getLogger(__name__)

# Reserved label bound to one-past-the-end. Declared labels are non-negative
# integers or identifier strings, so -1 is never user-declared.
EXIT_LABEL = -1


class AssembleError(ParseError):
    """Program-level error found after all lines are parsed."""


@dataclass(frozen=True)
class Program:
    """Assembled program.

    ``labels`` maps every declared label, plus ``EXIT_LABEL``, to a 1-based
    instruction position. ``entry`` is the first declared label in textual
    order, or None when no line is labeled.
    """

    instructions: tuple[Line, ...]
    labels: dict[Label, int] = field(hash=False)
    entry: Label | None

    def entry_index(self) -> int:
        if self.entry is None:
            return 1
        return self.labels[self.entry]

    def exit_index(self) -> int:
        return len(self.instructions) + 1


def assemble(lines: list[Line]) -> Program:
    """Build the instruction list, label table and entry point."""
    labels: dict[Label, int] = {}
    declared_at: dict[Label, Line] = {}
    entry: Label | None = None
    for index, line in enumerate(lines, start=1):
        if line.label is None:
            continue
        if line.label in declared_at:
            first = declared_at[line.label]
            raise AssembleError(
                "duplicate label "
                + repr(line.label)
                + " (first declared at line "
                + str(first.pos.line)
                + ")",
                line.pos.line,
                line.pos.col,
            )
        declared_at[line.label] = line
        labels[line.label] = index
        if entry is None:
            entry = line.label
    labels[EXIT_LABEL] = len(lines) + 1
    log.debug("assembled %d instructions, entry %r, labels %r", len(lines), entry, labels)
    return Program(tuple(lines), labels, entry)
