from pathlib import Path

import pytest

from barebones.environment import Environment
from barebones.errors import StructureError
from barebones.interpreter import Interpreter, run_file, run_program
from barebones.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_straight_line_program():
    values = run_program('incr x; incr x; incr y; decr x; clear y; incr z')
    assert values == {'x': 1, 'y': 0, 'z': 1}


def test_variables_are_case_insensitive():
    assert run_program('incr X; incr x; INCR x') == {'x': 3}


def test_decr_below_zero_is_not_clamped():
    assert run_program('decr x; decr x') == {'x': -2}


def test_loop_body_runs_before_first_test():
    # x is 0 on entry, the body still runs once
    assert run_program('while x; incr y; end') == {'x': 0, 'y': 1}


def test_loop_counts_down_once():
    assert run_program('incr x; while x; decr x; incr runs; end') == {'x': 0, 'runs': 1}


def test_loop_repeats_until_zero():
    values = run_program('incr x; incr x; incr x; while x; decr x; incr y; incr y; end')
    assert values == {'x': 0, 'y': 6}


@pytest.mark.parametrize('a, expected', [
    (0, {'a': 0, 'b': 0, 'c': 0, 'd': 1}),
    (1, {'a': 1, 'b': 1, 'c': 0, 'd': 0}),
])
def test_if_chain_runs_one_branch(a, expected):
    source = 'if a; incr b; elif a; incr c; else; incr d; endif'
    assert run_program(source, initial={'a': a}) == expected


def test_elif_runs_when_if_fails():
    source = 'incr e; if a; incr b; elif e; incr c; else; incr d; endif'
    assert run_program(source) == {'e': 1, 'a': 0, 'b': 0, 'c': 1, 'd': 0}


def test_if_without_else_skips_body():
    assert run_program('if a; incr b; endif; incr c') == {'a': 0, 'b': 0, 'c': 1}


def test_nested_if_inside_taken_branch():
    source = 'incr a; if a; if b; incr x; else; incr y; endif; incr z; else; incr w; endif'
    assert run_program(source) == {'a': 1, 'b': 0, 'x': 0, 'y': 1, 'z': 1, 'w': 0}


def test_nested_if_inside_skipped_branch():
    source = 'if a; if b; incr x; endif; incr y; elif c; incr z; else; incr w; endif'
    assert run_program(source) == {'a': 0, 'b': 0, 'x': 0, 'y': 0, 'c': 0, 'z': 0, 'w': 1}


def test_initial_values_for_unreferenced_names():
    assert run_program('incr x', initial={'Other': 4}) == {'x': 1, 'other': 4}


def test_multiply_example():
    values = run_file(str(EXAMPLES / 'multiply.bb'))
    assert values == {'x': 0, 'y': 4, 'z': 12, 'w': 0}


def test_branches_example():
    values = run_file(str(EXAMPLES / 'branches.bb'))
    assert values == {'a': 1, 'b': 1, 'c': 0, 'd': 0}


def test_nested_example():
    values = run_file(str(EXAMPLES / 'nested.bb'))
    assert values == {'n': 0, 'odd': 3, 'parity': 1}


@pytest.mark.parametrize('source', [
    'end',
    'incr x; end',
    'elif a',
    'else',
    'endif',
    'if a; incr a; end',           # end closing an if
    'incr a; while a; decr a; endif',   # endif closing a while
    'if a; incr b',                # skipped if never closed
    'incr a; if a; incr b',        # taken if never closed
    'while a; incr b',             # loop never closed
    'if a; end; endif',            # stray end in a skipped branch
    'incr a; if a; incr b; else; end; endif',   # stray end in a skipped else
])
def test_unbalanced_structure(source):
    with pytest.raises(StructureError):
        run_program(source)


def test_structure_error_reports_line():
    with pytest.raises(StructureError) as info:
        run_program('incr x;\n# comment;\nend')
    assert info.value.line == 3
    assert info.value.text == 'end'


def test_trace_each_step(capsys):
    program = parse_program('incr x; incr y')
    Interpreter(debug_level=1).run(program)
    out = capsys.readouterr().out.splitlines()
    assert out == ['incr x', 'x = 1', 'y = 0', 'incr y', 'x = 1', 'y = 1']


def test_silent_without_debug(capsys):
    run_program('incr x; while x; decr x; end')
    assert capsys.readouterr().out == ''


def test_trace_to_debug_file(tmp_path):
    debug_file = tmp_path / 'trace.txt'
    Interpreter(debug_level=2, debug_file=str(debug_file)).run(parse_program('if a; incr b; endif'))
    lines = debug_file.read_text(encoding='utf-8').splitlines()
    assert lines[0] == 'skip from line 1 to line 3'
    assert lines[-2:] == ['a = 0', 'b = 0']


def test_slots_follow_first_appearance():
    env = Environment.for_program(parse_program('incr y; incr x; incr y'))
    assert env.slot('y') == 0
    assert env.slot('x') == 1


def test_structure_checked_before_first_step(capsys):
    program = parse_program('incr a; if a; incr b; else; end; endif')
    with pytest.raises(StructureError) as info:
        Interpreter(debug_level=1).run(program)
    assert info.value.line == 5
    assert capsys.readouterr().out == ''
