"""linebasic AST: parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass

Label = int | str


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Expr:
    """Base for all expressions."""

    pos: Pos


@dataclass(frozen=True)
class IntLit(Expr):
    value: int


@dataclass(frozen=True)
class FloatLit(Expr):
    value: float


@dataclass(frozen=True)
class BoolLit(Expr):
    """#t or #f."""

    value: bool


@dataclass(frozen=True)
class StringLit(Expr):
    """Quoted string, escapes already resolved."""

    value: str


@dataclass(frozen=True)
class Var(Expr):
    name: str


@dataclass(frozen=True)
class UnaryOp(Expr):
    """'-' (negate) or '!' (logical not)."""

    op: str
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str
    left: Expr
    right: Expr


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Stmt:
    """Base for all statements."""

    pos: Pos


@dataclass(frozen=True)
class PrintStmt(Stmt):
    """PRINT expr."""

    expr: Expr


@dataclass(frozen=True)
class InputStmt(Stmt):
    """INPUT name."""

    name: str


@dataclass(frozen=True)
class LetStmt(Stmt):
    """LET name = expr."""

    name: str
    expr: Expr


@dataclass(frozen=True)
class IfStmt(Stmt):
    """IF cond THEN stmt [ELSE stmt]."""

    cond: Expr
    then: Stmt
    else_: Stmt | None


@dataclass(frozen=True)
class WhileStmt(Stmt):
    """WHILE cond THEN stmt."""

    cond: Expr
    body: Stmt


@dataclass(frozen=True)
class GotoStmt(Stmt):
    """GOTO target: a literal label, or a variable holding one."""

    target: Label


@dataclass(frozen=True)
class NopStmt(Stmt):
    pass


@dataclass(frozen=True)
class ExitStmt(Stmt):
    pass


# ============================================================
# LINES
# ============================================================


@dataclass(frozen=True)
class Line:
    """One physical line: optional label and its '\\'-joined statements."""

    pos: Pos
    label: Label | None
    stmts: tuple[Stmt, ...]
