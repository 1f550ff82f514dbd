"""linebasic tokenizer: ordered prefix rules over the remaining input."""

from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_STRING = "STRING"
TK_BOOL = "BOOL"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_NEWLINE = "NEWLINE"
TK_EOF = "EOF"

# Keywords tokenize with their own spelling as the token type.
KEYWORDS: list[str] = [
    "IF",
    "WHILE",
    "THEN",
    "ELSE",
    "PRINT",
    "INPUT",
    "GOTO",
    "EXIT",
    "NOP",
    "LET",
]

# Multi-character operators must be tried before their one-character prefixes.
MULTI_OPS: list[str] = ["++", "&&", "||", "==", "!="]

SINGLE_OPS: list[str] = ["+", "-", "*", "/", "|", "<", ">", "!", "=", "(", ")", ":"]

IDENT_CHARS = "A-Za-z0-9-"

_COMMENT = "COMMENT"
_WHITESPACE = re.compile(r"[ \t\r]+")


def _op_pattern(ops: list[str]) -> str:
    return "|".join(re.escape(op) for op in ops)


# Order is priority: the first rule whose pattern matches at the cursor wins.
_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"//[^\n]*\n?"), _COMMENT),
    (re.compile(_op_pattern(MULTI_OPS)), TK_OP),
    (re.compile(_op_pattern(SINGLE_OPS)), TK_OP),
    (re.compile("(?:" + "|".join(KEYWORDS) + ")(?![" + IDENT_CHARS + "])"), ""),
    (re.compile(r"[0-9]+\.[0-9]*"), TK_FLOAT),
    (re.compile(r"[0-9]+"), TK_INT),
    (re.compile(r"([\"'`])((?:\\.|(?!\1).)*)\1", re.DOTALL), TK_STRING),
    (re.compile(r"#[tf]"), TK_BOOL),
    (re.compile(r"\n"), TK_NEWLINE),
    (re.compile(r"\\"), TK_OP),
    (re.compile("[" + IDENT_CHARS + "]+"), TK_IDENT),
]

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


class TokenizeError(Exception):
    """No tokenizer rule matches the remaining input."""

    def __init__(self, msg: str, line: int, col: int, rest: str = ""):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        self.rest: str = rest
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Token:
    """A token with type, value, and position."""

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (
            self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _unescape(body: str) -> str:
    return _ESCAPE.sub(lambda m: m.group(1), body)


def _snippet(source: str, pos: int) -> str:
    rest = source[pos:]
    end = rest.find("\n")
    if end != -1:
        rest = rest[:end]
    if len(rest) > 20:
        rest = rest[:20] + "..."
    return rest


def tokenize(source: str) -> list[Token]:
    """Tokenize linebasic source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)

    while pos < length:
        # Horizontal whitespace only; newlines are tokens.
        ws = _WHITESPACE.match(source, pos)
        if ws is not None:
            col += ws.end() - pos
            pos = ws.end()
            continue

        m: re.Match[str] | None = None
        kind = ""
        for pattern, rule_kind in _RULES:
            m = pattern.match(source, pos)
            if m is not None:
                kind = rule_kind
                break
        if m is None:
            rest = source[pos:]
            raise TokenizeError(
                "unexpected input " + repr(_snippet(source, pos)), line, col, rest
            )

        text = m.group(0)
        if kind == TK_STRING:
            tokens.append(Token(TK_STRING, _unescape(m.group(2)), line, col))
        elif kind == "":
            tokens.append(Token(text, text, line, col))
        elif kind != _COMMENT:
            tokens.append(Token(kind, text, line, col))

        newlines = text.count("\n")
        if newlines:
            line += newlines
            col = len(text) - text.rfind("\n")
        else:
            col += len(text)
        pos = m.end()

    tokens.append(Token(TK_EOF, "", line, col))
    log.debug("tokenized %d tokens", len(tokens))
    return tokens
