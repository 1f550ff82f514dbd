"""Tokenizer tests."""

import pytest

from linebasic.tokens import (
    TK_BOOL,
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_NEWLINE,
    TK_OP,
    TK_STRING,
    TokenizeError,
    tokenize,
)


def kinds(source: str) -> list[tuple[str, str]]:
    return [(t.type, t.value) for t in tokenize(source)]


def test_simple_statement():
    assert kinds("PRINT 2 + 2") == [
        ("PRINT", "PRINT"),
        (TK_INT, "2"),
        (TK_OP, "+"),
        (TK_INT, "2"),
        (TK_EOF, ""),
    ]


def test_multi_char_operators_win_over_prefixes():
    ops = [t.value for t in tokenize("== = != ! ++ + && || |") if t.type == TK_OP]
    assert ops == ["==", "=", "!=", "!", "++", "+", "&&", "||", "|"]


def test_keyword_needs_boundary():
    assert kinds("IFX IF") == [
        (TK_IDENT, "IFX"),
        ("IF", "IF"),
        (TK_EOF, ""),
    ]


def test_keyword_followed_by_digit_or_hyphen_is_identifier():
    assert [t.type for t in tokenize("GOTO1 PRINT-x")][:2] == [TK_IDENT, TK_IDENT]


def test_keywords_are_case_sensitive():
    assert tokenize("print")[0].type == TK_IDENT


def test_identifiers_allow_hyphens():
    toks = tokenize("LET my-var = x-1")
    assert (toks[1].type, toks[1].value) == (TK_IDENT, "my-var")
    assert (toks[3].type, toks[3].value) == (TK_IDENT, "x-1")


def test_leading_minus_is_operator():
    assert kinds("-x")[:2] == [(TK_OP, "-"), (TK_IDENT, "x")]


def test_numbers():
    assert kinds("12 3.5 7.")[:3] == [(TK_INT, "12"), (TK_FLOAT, "3.5"), (TK_FLOAT, "7.")]


def test_integer_then_identifier():
    assert kinds("10abc")[:2] == [(TK_INT, "10"), (TK_IDENT, "abc")]


@pytest.mark.parametrize(
    "source,value",
    [
        ('"hello"', "hello"),
        ("'single'", "single"),
        ("`tick`", "tick"),
        (r'"say \"hi\""', 'say "hi"'),
        (r"'it\'s'", "it's"),
        ('"mixed \'quotes\'"', "mixed 'quotes'"),
        (r'"back\\slash"', "back\\slash"),
        ('""', ""),
    ],
)
def test_strings(source, value):
    tok = tokenize(source)[0]
    assert tok.type == TK_STRING
    assert tok.value == value


def test_booleans():
    assert kinds("#t #f")[:2] == [(TK_BOOL, "#t"), (TK_BOOL, "#f")]


def test_newline_and_backslash_are_significant():
    assert [t.type for t in tokenize("NOP \\ NOP\nNOP")] == [
        "NOP",
        TK_OP,
        "NOP",
        TK_NEWLINE,
        "NOP",
        TK_EOF,
    ]


def test_comment_discarded_with_newline():
    assert kinds("// note\nPRINT 1") == [
        ("PRINT", "PRINT"),
        (TK_INT, "1"),
        (TK_EOF, ""),
    ]


def test_comment_at_end_of_input():
    assert kinds("NOP // trailing") == [("NOP", "NOP"), (TK_EOF, "")]


def test_whitespace_skipped():
    assert kinds("  \t PRINT\t1  \r\n") == [
        ("PRINT", "PRINT"),
        (TK_INT, "1"),
        (TK_NEWLINE, "\n"),
        (TK_EOF, ""),
    ]


def test_positions():
    toks = tokenize("10 PRINT x\n  GOTO 10")
    assert (toks[0].line, toks[0].col) == (1, 1)
    assert (toks[2].line, toks[2].col) == (1, 10)
    goto = toks[4]
    assert goto.type == "GOTO"
    assert (goto.line, goto.col) == (2, 3)


def test_position_after_multiline_string():
    toks = tokenize('PRINT "a\nb" NOP')
    assert (toks[2].line, toks[2].col) == (2, 4)


def test_unknown_character_raises():
    with pytest.raises(TokenizeError) as exc:
        tokenize("PRINT 1 $ 2")
    err = exc.value
    assert err.rest == "$ 2"
    assert (err.line, err.col) == (1, 9)
    assert "line 1 col 9" in str(err)


def test_unterminated_string_raises():
    with pytest.raises(TokenizeError) as exc:
        tokenize('PRINT "open')
    assert exc.value.rest == '"open'


def test_same_input_same_tokens():
    source = '10 LET x = 1.5 ++ "a"\nGOTO 10\n'
    assert tokenize(source) == tokenize(source)
