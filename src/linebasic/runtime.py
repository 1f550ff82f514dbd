"""linebasic runtime: run an assembled program under an instruction pointer.

Values are typed (int, float, bool, string) and every operator applies its own
promotion rules; nothing is delegated to Python's operator overloading. Control
transfer uses the instruction pointer register of one ``Interpreter``, so
separate instances never share state.
"""

from __future__ import annotations

import logging
import math
import re
import sys
from dataclasses import dataclass
from typing import Callable

from .assemble import EXIT_LABEL, Program
from .ast import (
    BinaryOp,
    BoolLit,
    ExitStmt,
    Expr,
    FloatLit,
    GotoStmt,
    IfStmt,
    InputStmt,
    IntLit,
    Label,
    LetStmt,
    NopStmt,
    Pos,
    PrintStmt,
    Stmt,
    StringLit,
    UnaryOp,
    Var,
    WhileStmt,
)

log = logging.getLogger(__name__)


# ============================================================
# Diagnostics
# ============================================================


class BasicRuntimeError(Exception):
    """Runtime fault (undefined name, bad jump, invalid operands)."""

    def __init__(self, msg: str, pos: Pos | None = None):
        if pos is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg} at line {pos.line} col {pos.col}")
        self.msg = msg
        self.pos = pos


# ============================================================
# Values
# ============================================================


class Value:
    """A runtime value with a concrete type tag."""

    kind: str = "value"

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class VInt(Value):
    value: int
    kind = "int"

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VFloat(Value):
    value: float
    kind = "float"

    def to_string(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class VBool(Value):
    value: bool
    kind = "bool"

    def to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class VString(Value):
    value: str
    kind = "string"

    def to_string(self) -> str:
        return self.value


def _is_numeric(v: Value) -> bool:
    return isinstance(v, (VInt, VFloat))


def _num(v: Value) -> int | float:
    if isinstance(v, (VInt, VFloat)):
        return v.value
    raise TypeError(v.kind)


def _value_eq(a: Value, b: Value) -> bool:
    if _is_numeric(a) and _is_numeric(b):
        return _num(a) == _num(b)
    if type(a) is not type(b):
        return False
    return a == b


def _int_div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


NUMERIC_OPS = ("+", "-", "*", "/", "|")


def _arith(op: str, left: Value, right: Value) -> Value:
    """Apply a numeric operator; the divisor is already known to be nonzero."""
    both_int = isinstance(left, VInt) and isinstance(right, VInt)
    a, b = _num(left), _num(right)
    if op == "/":
        return VFloat(a / b)
    if op == "|":
        if both_int:
            return VInt(_int_div_trunc(int(a), int(b)))
        return VFloat(float(math.trunc(a / b)))
    if not both_int:
        a, b = float(a), float(b)
    if op == "+":
        result = a + b
    elif op == "-":
        result = a - b
    else:
        result = a * b
    return VInt(int(result)) if both_int else VFloat(result)


def _operand_error(op: str, left: Value, right: Value, pos: Pos) -> BasicRuntimeError:
    return BasicRuntimeError(
        f"operator '{op}' not supported between {left.kind} and {right.kind}", pos
    )


_DECIMAL = re.compile(r"-?[0-9]+")


def _as_label(v: Value) -> Label | None:
    """The label a variable's value names, if any."""
    if isinstance(v, VInt):
        return v.value
    if isinstance(v, VString):
        text = v.value.strip()
        if _DECIMAL.fullmatch(text) is None:
            return text
        try:
            return int(text)
        except ValueError:
            return None
    return None


# ============================================================
# Control flow signals (internal)
# ============================================================


class _Signal(Exception):
    pass


class _Jump(_Signal):
    """Ends the current line once the instruction pointer is set."""


# ============================================================
# Environment
# ============================================================


class Environment:
    """Global variable bindings for one run."""

    def __init__(self) -> None:
        self._vars: dict[str, Value] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._vars

    def get(self, name: str, *, pos: Pos | None = None) -> Value:
        if name not in self._vars:
            raise BasicRuntimeError(f"undefined variable '{name}'", pos)
        return self._vars[name]

    def set(self, name: str, value: Value) -> None:
        self._vars[name] = value


# ============================================================
# Interpreter
# ============================================================


def _default_read_line() -> str:
    return sys.stdin.readline()


def _default_write(text: str) -> None:
    sys.stdout.write(text)


class Interpreter:
    """Executes one program; owns its instruction pointer and variables."""

    ip: Label | None

    def __init__(
        self,
        program: Program,
        *,
        write: Callable[[str], object] | None = None,
        read_line: Callable[[], str] | None = None,
    ):
        self.program = program
        self.write = write if write is not None else _default_write
        self.read_line = read_line if read_line is not None else _default_read_line
        self.env = Environment()
        self.ip = None

    # ---- Running -----------------------------------------------------------

    def run(self) -> None:
        instructions = self.program.instructions
        index = self.program.entry_index()
        exit_index = self.program.exit_index()
        while index < exit_index:
            self.ip = None
            line = instructions[index - 1]
            log.debug("line %d (label %r)", index, line.label)
            try:
                for st in line.stmts:
                    self._exec_stmt(st)
            except _Jump:
                pass
            if self.ip is None:
                index += 1
            else:
                index = self.program.labels[self.ip]
                log.debug("jump to %r (index %d)", self.ip, index)

    # ---- Statements --------------------------------------------------------

    def _exec_stmt(self, st: Stmt) -> None:
        if isinstance(st, PrintStmt):
            val = self._eval_expr(st.expr)
            self.write(self._display(val, st.pos) + "\n")
            return

        if isinstance(st, InputStmt):
            text = self.read_line()
            if text.endswith("\n"):
                text = text[:-1]
            if text.endswith("\r"):
                text = text[:-1]
            self.env.set(st.name, VString(text))
            return

        if isinstance(st, LetStmt):
            self.env.set(st.name, self._eval_expr(st.expr))
            return

        if isinstance(st, IfStmt):
            if self._eval_cond(st.cond, "IF"):
                self._exec_stmt(st.then)
            elif st.else_ is not None:
                self._exec_stmt(st.else_)
            return

        if isinstance(st, WhileStmt):
            while self._eval_cond(st.cond, "WHILE"):
                self._exec_stmt(st.body)
            return

        if isinstance(st, GotoStmt):
            self.ip = self._resolve_target(st.target, st.pos)
            raise _Jump()

        if isinstance(st, ExitStmt):
            self.ip = EXIT_LABEL
            raise _Jump()

        if isinstance(st, NopStmt):
            return

        raise BasicRuntimeError(f"unknown statement {type(st).__name__}", st.pos)

    def _resolve_target(self, target: Label, pos: Pos) -> Label:
        """Literal label first, then a variable holding the label."""
        labels = self.program.labels
        if target in labels:
            return target
        name = str(target)
        if name not in self.env:
            raise BasicRuntimeError(f"undefined label {target!r}", pos)
        resolved = _as_label(self.env.get(name))
        if resolved is None or resolved not in labels:
            raise BasicRuntimeError(
                f"variable '{name}' does not hold a defined label", pos
            )
        return resolved

    def _eval_cond(self, expr: Expr, where: str) -> bool:
        cond = self._eval_expr(expr)
        if not isinstance(cond, VBool):
            raise BasicRuntimeError(f"{where} condition is {cond.kind}, not bool", expr.pos)
        return cond.value

    # ---- Expressions -------------------------------------------------------

    def _eval_expr(self, expr: Expr) -> Value:
        if isinstance(expr, IntLit):
            return VInt(expr.value)
        if isinstance(expr, FloatLit):
            return VFloat(expr.value)
        if isinstance(expr, BoolLit):
            return VBool(expr.value)
        if isinstance(expr, StringLit):
            return VString(expr.value)
        if isinstance(expr, Var):
            return self.env.get(expr.name, pos=expr.pos)
        if isinstance(expr, UnaryOp):
            return self._eval_unary(expr.op, self._eval_expr(expr.operand), expr.pos)
        if isinstance(expr, BinaryOp):
            if expr.op in ("&&", "||"):
                return self._eval_logical(expr)
            left = self._eval_expr(expr.left)
            right = self._eval_expr(expr.right)
            return self._eval_binary(expr.op, left, right, expr.pos)
        raise BasicRuntimeError(f"unknown expression {type(expr).__name__}", expr.pos)

    def _display(self, val: Value, pos: Pos) -> str:
        # str() of an int is capped at the interpreter's digit limit.
        try:
            return val.to_string()
        except ValueError:
            raise BasicRuntimeError(f"{val.kind} too large to display", pos) from None

    def _eval_unary(self, op: str, operand: Value, pos: Pos) -> Value:
        if op == "-":
            if isinstance(operand, VInt):
                return VInt(-operand.value)
            if isinstance(operand, VFloat):
                return VFloat(-operand.value)
            raise BasicRuntimeError(f"cannot negate {operand.kind}", pos)
        if op == "!":
            if isinstance(operand, VBool):
                return VBool(not operand.value)
            raise BasicRuntimeError(f"operator '!' needs bool, got {operand.kind}", pos)
        raise BasicRuntimeError(f"unknown unary operator '{op}'", pos)

    def _eval_logical(self, expr: BinaryOp) -> Value:
        left = self._eval_expr(expr.left)
        if not isinstance(left, VBool):
            raise BasicRuntimeError(
                f"operator '{expr.op}' needs bool, got {left.kind}", expr.pos
            )
        if expr.op == "&&" and not left.value:
            return left
        if expr.op == "||" and left.value:
            return left
        right = self._eval_expr(expr.right)
        if not isinstance(right, VBool):
            raise BasicRuntimeError(
                f"operator '{expr.op}' needs bool, got {right.kind}", expr.pos
            )
        return right

    def _eval_binary(self, op: str, left: Value, right: Value, pos: Pos) -> Value:
        if op == "==":
            return VBool(_value_eq(left, right))
        if op == "!=":
            return VBool(not _value_eq(left, right))

        if op == "++":
            return VString(self._display(left, pos) + self._display(right, pos))

        if op in ("<", ">"):
            if _is_numeric(left) and _is_numeric(right):
                lo, hi = (_num(left), _num(right)) if op == "<" else (_num(right), _num(left))
                return VBool(lo < hi)
            if isinstance(left, VString) and isinstance(right, VString):
                if op == "<":
                    return VBool(left.value < right.value)
                return VBool(left.value > right.value)
            raise _operand_error(op, left, right, pos)

        if not (_is_numeric(left) and _is_numeric(right)):
            raise _operand_error(op, left, right, pos)
        if op not in NUMERIC_OPS:
            raise BasicRuntimeError(f"unknown operator '{op}'", pos)
        if op in ("/", "|") and _num(right) == 0:
            raise BasicRuntimeError("division by zero", pos)
        # Huge ints do not fit a float, and infinities have no integer part.
        try:
            return _arith(op, left, right)
        except (OverflowError, ValueError):
            raise BasicRuntimeError(f"numeric overflow in operator '{op}'", pos) from None


def run_program(
    program: Program,
    *,
    write: Callable[[str], object] | None = None,
    read_line: Callable[[], str] | None = None,
) -> Interpreter:
    """Run an assembled program to completion; returns the finished interpreter."""
    interp = Interpreter(program, write=write, read_line=read_line)
    interp.run()
    return interp
