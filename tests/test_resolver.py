from barebones.ast import BRANCH_TARGETS, END, ENDIF
from barebones.compiler import size_of
from barebones.parser import parse_program
from barebones.resolver import NOT_FOUND, find_next, span


def test_finds_next_branch_keyword():
    program = parse_program('if a; incr b; elif a; incr c; else; endif')
    assert find_next(program.instructions, 0, BRANCH_TARGETS) == 2
    assert find_next(program.instructions, 2, BRANCH_TARGETS) == 4
    assert find_next(program.instructions, 4, BRANCH_TARGETS) == 5


def test_skips_nested_blocks():
    program = parse_program(
        'if a; while b; if c; else; endif; end; else; endif'
    )
    # positions: 0 if, 1 while, 2 if, 3 else, 4 endif, 5 end, 6 else, 7 endif
    assert find_next(program.instructions, 0, BRANCH_TARGETS) == 6
    assert find_next(program.instructions, 1, (END,)) == 5
    assert find_next(program.instructions, 2, BRANCH_TARGETS) == 3


def test_ignores_comments():
    program = parse_program('if a; # else; endif')
    assert find_next(program.instructions, 0, BRANCH_TARGETS) == 2


def test_not_found_when_program_ends():
    program = parse_program('if a; incr b')
    assert find_next(program.instructions, 0, (ENDIF,)) == NOT_FOUND


def test_span_counts_emitted_bytes():
    program = parse_program('if a; incr b; while c; decr c; end; # note; elif a; endif')
    # if 14 + incr 7 + while 0 + decr 7 + end 7 + comment 0
    assert span(program.instructions, 0, 6, size_of) == 35
    assert span(program.instructions, 6, 8, size_of) == 21
