import pytest

from barebones.ast import NOOP, CLEAR, INCR, WHILE, END, ELSE
from barebones.errors import UnparseableInstruction
from barebones.parser import parse_program, parse_statement, split_statements


def test_split_joins_lines_before_splitting():
    assert split_statements('incr x;\nincr\ny;') == ['incr x', ' incr y', '']


def test_statements_are_lowercased_and_trimmed():
    program = parse_program('  INCR Counter ; Clear counter;')
    first, second, trailing = program.instructions
    assert (first.keyword, first.operand, first.line) == (INCR, 'counter', 1)
    assert (second.keyword, second.operand, second.line) == (CLEAR, 'counter', 2)
    assert trailing.is_noop


def test_comments_and_blanks_keep_their_position():
    program = parse_program('# setup; ; while x; end')
    keywords = [i.keyword for i in program.instructions]
    assert keywords == [NOOP, NOOP, WHILE, END]
    assert program.instructions[2].line == 3


def test_bare_keywords_take_no_operand():
    assert parse_statement('else', 4).keyword == ELSE
    assert parse_statement('else', 4).operand is None


def test_variables_in_first_appearance_order():
    program = parse_program('incr y; incr x; decr y; while z; end')
    assert program.variables() == ['y', 'x', 'z']


@pytest.mark.parametrize('text', [
    'print x',      # unknown keyword
    'incr',         # missing operand
    'while',
    'elif',
    'incr x y',     # surplus operand
    'end x',
    'ifx',          # keyword glued to a name
    'incr while',   # keyword used as a name
])
def test_unparseable_statements(text):
    with pytest.raises(UnparseableInstruction) as info:
        parse_program(f'clear a; {text}; clear b')
    assert info.value.line == 2
    assert info.value.text == text
