"""linebasic parser: recursive descent, one method per grammar production."""

from __future__ import annotations

import logging

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
    Line,
    NopStmt,
    Pos,
    PrintStmt,
    Stmt,
    StringLit,
    UnaryOp,
    Var,
    WhileStmt,
)
from .tokens import (
    TK_BOOL,
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_NEWLINE,
    TK_OP,
    TK_STRING,
    Token,
    tokenize,
)

log = logging.getLogger(__name__)

# Arithmetic and concatenation bind tighter than comparison and logic.
ARITH_OPS: set[str] = {"+", "-", "*", "/", "|", "++"}

LOGIC_OPS: set[str] = {"<", ">", "==", "!=", "&&", "||"}

UNARY_OPS: set[str] = {"-", "!"}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


def describe(tok: Token) -> str:
    """Human-readable name of a token for error messages."""
    if tok.type == TK_NEWLINE:
        return "end of line"
    if tok.type == TK_EOF:
        return "end of input"
    if tok.type == TK_STRING:
        return repr(tok.value)
    return "'" + tok.value + "'"


class Parser:
    """Recursive descent parser for linebasic."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def at(self, value: str) -> bool:
        tok = self.current()
        return tok.value == value and tok.type not in (TK_STRING, TK_IDENT)

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def expect(self, value: str) -> Token:
        if not self.at(value):
            raise self.error(
                "expected '" + value + "', got " + describe(self.current())
            )
        return self.advance()

    def expect_ident(self) -> Token:
        tok = self.current()
        if tok.type != TK_IDENT:
            raise self.error("expected identifier, got " + describe(tok))
        return self.advance()

    def int_value(self, tok: Token) -> int:
        # int() refuses digit strings past the interpreter's conversion limit.
        try:
            return int(tok.value)
        except ValueError:
            raise ParseError("integer literal too long", tok.line, tok.col) from None

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> list[Line]:
        lines: list[Line] = []
        while True:
            while self.at_type(TK_NEWLINE):
                self.advance()
            if self.at_type(TK_EOF):
                break
            lines.append(self.parse_line())
        return lines

    def parse_line(self) -> Line:
        """Line = Label? Stmt ( '\\' Stmt )* ( NEWLINE | EOF )"""
        pos = self._pos()
        label = self.parse_label_decl()
        stmts: list[Stmt] = [self.parse_stmt()]
        while self.at("\\"):
            self.advance()
            stmts.append(self.parse_stmt())
        if self.at_type(TK_NEWLINE):
            self.advance()
        elif not self.at_type(TK_EOF):
            raise self.error("expected end of line, got " + describe(self.current()))
        return Line(pos, label, tuple(stmts))

    def parse_label_decl(self) -> Label | None:
        """Label = INT ':'? | IDENT ':'"""
        tok = self.current()
        if tok.type == TK_INT:
            self.advance()
            if self.at(":"):
                self.advance()
            return self.int_value(tok)
        if tok.type == TK_IDENT:
            self.advance()
            if not self.at(":"):
                raise self.error(
                    "expected ':' after line label '"
                    + tok.value
                    + "', got "
                    + describe(self.current())
                )
            self.advance()
            return tok.value
        return None

    def parse_label_ref(self) -> Label:
        tok = self.current()
        if tok.type == TK_INT:
            self.advance()
            return self.int_value(tok)
        if tok.type == TK_IDENT:
            self.advance()
            return tok.value
        raise self.error("expected line label, got " + describe(tok))

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Stmt:
        tok = self.current()
        if tok.type == "PRINT":
            return self.parse_print_stmt()
        if tok.type == "INPUT":
            return self.parse_input_stmt()
        if tok.type == "LET":
            return self.parse_let_stmt()
        if tok.type == "IF":
            return self.parse_if_stmt()
        if tok.type == "WHILE":
            return self.parse_while_stmt()
        if tok.type == "GOTO":
            pos = self._pos()
            self.advance()
            return GotoStmt(pos, self.parse_label_ref())
        if tok.type == "NOP":
            pos = self._pos()
            self.advance()
            return NopStmt(pos)
        if tok.type == "EXIT":
            pos = self._pos()
            self.advance()
            return ExitStmt(pos)
        raise self.error("expected statement, got " + describe(tok))

    def parse_print_stmt(self) -> PrintStmt:
        pos = self._pos()
        self.expect("PRINT")
        return PrintStmt(pos, self.parse_expr())

    def parse_input_stmt(self) -> InputStmt:
        pos = self._pos()
        self.expect("INPUT")
        name_tok = self.expect_ident()
        return InputStmt(pos, name_tok.value)

    def parse_let_stmt(self) -> LetStmt:
        pos = self._pos()
        self.expect("LET")
        name_tok = self.expect_ident()
        self.expect("=")
        return LetStmt(pos, name_tok.value, self.parse_expr())

    def parse_if_stmt(self) -> IfStmt:
        pos = self._pos()
        self.expect("IF")
        cond = self.parse_expr()
        self.expect("THEN")
        then = self.parse_stmt()
        else_: Stmt | None = None
        if self.at("ELSE"):
            self.advance()
            else_ = self.parse_stmt()
        return IfStmt(pos, cond, then, else_)

    def parse_while_stmt(self) -> WhileStmt:
        pos = self._pos()
        self.expect("WHILE")
        cond = self.parse_expr()
        self.expect("THEN")
        body = self.parse_stmt()
        return WhileStmt(pos, cond, body)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_logic()

    def parse_logic(self) -> Expr:
        """Logic = Arith ( LogicOp Arith )*  (left-associative)"""
        left = self.parse_arith()
        while self._at_op(LOGIC_OPS):
            op = self.advance().value
            right = self.parse_arith()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_arith(self) -> Expr:
        """Arith = Unary ( ArithOp Unary )*  (left-associative)"""
        left = self.parse_unary()
        while self._at_op(ARITH_OPS):
            op = self.advance().value
            right = self.parse_unary()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_unary(self) -> Expr:
        """Unary = ( '-' | '!' ) Unary | Primary"""
        if self._at_op(UNARY_OPS):
            pos = self._pos()
            op = self.advance().value
            operand = self.parse_unary()
            return UnaryOp(pos, op, operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """Parse a primary expression."""
        tok = self.current()
        pos = self._pos()

        if tok.type == TK_INT:
            self.advance()
            return IntLit(pos, self.int_value(tok))
        if tok.type == TK_FLOAT:
            self.advance()
            return FloatLit(pos, float(tok.value))
        if tok.type == TK_STRING:
            self.advance()
            return StringLit(pos, tok.value)
        if tok.type == TK_BOOL:
            self.advance()
            return BoolLit(pos, tok.value == "#t")
        if tok.type == TK_IDENT:
            self.advance()
            return Var(pos, tok.value)
        if self.at("("):
            self.advance()
            inner = self.parse_expr()
            self.expect(")")
            return inner

        raise self.error("expected expression, got " + describe(tok))

    def _at_op(self, ops: set[str]) -> bool:
        tok = self.current()
        return tok.type == TK_OP and tok.value in ops


def parse_tokens(tokens: list[Token]) -> list[Line]:
    """Parse a token stream into program lines."""
    lines = Parser(tokens).parse_program()
    log.debug("parsed %d lines", len(lines))
    return lines


def parse(source: str) -> list[Line]:
    """Tokenize and parse linebasic source."""
    return parse_tokens(tokenize(source))
