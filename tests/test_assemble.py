"""Assembler tests: label table, exit sentinel, entry point."""

import pytest

from linebasic import EXIT_LABEL, AssembleError, ParseError, load


def test_label_positions_are_one_based():
    program = load("10 NOP\nNOP\nend: NOP\n")
    assert program.labels[10] == 1
    assert program.labels["end"] == 3
    assert len(program.instructions) == 3


def test_exit_sentinel_is_one_past_the_end():
    program = load("NOP\nNOP\n")
    assert program.labels[EXIT_LABEL] == 3
    assert program.exit_index() == 3


def test_empty_program_still_has_exit_sentinel():
    program = load("")
    assert program.instructions == ()
    assert program.labels == {EXIT_LABEL: 1}
    assert program.entry is None
    assert program.entry_index() == 1


def test_entry_is_first_labeled_line():
    program = load('5: PRINT "x"\n10 PRINT "y"\n')
    assert program.entry == 5
    assert program.entry_index() == 1


def test_entry_skips_unlabeled_leading_lines():
    program = load('PRINT "a"\nPRINT "b"\nstart: PRINT "c"\n20 PRINT "d"\n')
    assert program.entry == "start"
    assert program.entry_index() == 3


def test_no_labels_means_entry_at_first_line():
    program = load("NOP\nNOP\n")
    assert program.entry is None
    assert program.entry_index() == 1


def test_unlabeled_lines_are_not_in_table():
    program = load("NOP\n10 NOP\nNOP\n")
    assert set(program.labels) == {10, EXIT_LABEL}


def test_integer_and_identifier_labels_are_distinct():
    program = load("10 NOP\nten: NOP\n")
    assert program.labels[10] == 1
    assert program.labels["ten"] == 2


def test_duplicate_label_rejected():
    with pytest.raises(AssembleError) as exc:
        load("10 NOP\n20 NOP\n10 NOP\n")
    err = exc.value
    assert "duplicate label 10" in err.msg
    assert "first declared at line 1" in err.msg
    assert err.line == 3


def test_duplicate_identifier_label_rejected():
    with pytest.raises(AssembleError):
        load("top: NOP\ntop: NOP\n")


def test_integer_label_with_and_without_colon_collide():
    with pytest.raises(AssembleError):
        load("10 NOP\n10: NOP\n")


def test_assemble_error_is_a_parse_error():
    with pytest.raises(ParseError):
        load("a: NOP\na: NOP\n")
