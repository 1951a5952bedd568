"""Parser for the Barebones language.

Parsing happens in two stages:

1. **Splitting**: source lines are joined with a space and the result is
   cut on `;` into raw statements. A statement is trimmed and lower-cased,
   which is what makes variable names case-insensitive. Statements that are
   blank or start with `#` become no-op entries.

2. **Parsing**: every remaining statement is fed to a Lark parser built
   from a one-statement grammar and turned into an `Instruction` by a
   transformer. Anything the grammar rejects (unknown keyword, missing or
   surplus operand) raises `UnparseableInstruction`.

`parse_program` is the public entry point and returns a `Program`.
"""

from __future__ import annotations

from typing import Iterable, List

from lark import Lark, Transformer
from lark.exceptions import LarkError

from .ast import (
    Instruction, Program, NOOP,
    CLEAR, INCR, DECR, WHILE, END, IF, ELIF, ELSE, ENDIF,
)
from .errors import UnparseableInstruction


BAREBONES_GRAMMAR = r"""
    start: clear
         | incr
         | decr
         | while_loop
         | end
         | if_branch
         | elif_branch
         | else_branch
         | endif

    clear: "clear" NAME
    incr: "incr" NAME
    decr: "decr" NAME
    while_loop: "while" NAME
    end: "end"
    if_branch: "if" NAME
    elif_branch: "elif" NAME
    else_branch: "else"
    endif: "endif"

    // Anything up to whitespace is a name, except the keywords themselves
    NAME: /\S+/

    %import common.WS
    %ignore WS
"""


BAREBONES_PARSER = Lark(
    BAREBONES_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=False,
)


class InstructionTransformer(Transformer):
    """Reduces a statement parse tree to a `(keyword, operand)` pair."""

    def start(self, items):
        return items[0]

    def clear(self, items):
        return CLEAR, str(items[0])

    def incr(self, items):
        return INCR, str(items[0])

    def decr(self, items):
        return DECR, str(items[0])

    def while_loop(self, items):
        return WHILE, str(items[0])

    def end(self, items):
        return END, None

    def if_branch(self, items):
        return IF, str(items[0])

    def elif_branch(self, items):
        return ELIF, str(items[0])

    def else_branch(self, items):
        return ELSE, None

    def endif(self, items):
        return ENDIF, None


_TRANSFORMER = InstructionTransformer()


def split_statements(source: str) -> List[str]:
    """Join the source lines and split them into raw statements."""
    return ' '.join(source.splitlines()).split(';')


def parse_statement(raw: str, line: int) -> Instruction:
    text = raw.strip().lower()
    if not text or text.startswith('#'):
        return Instruction(NOOP, None, line, text)
    try:
        tree = BAREBONES_PARSER.parse(text)
    except LarkError:
        raise UnparseableInstruction(line, text) from None
    keyword, operand = _TRANSFORMER.transform(tree)
    return Instruction(keyword, operand, line, text)


def parse_statements(statements: Iterable[str]) -> Program:
    """Parse already split statements; numbering starts at 1."""
    return Program([parse_statement(raw, n) for n, raw in enumerate(statements, start=1)])


def parse_program(source: str) -> Program:
    """Parse Barebones source code into a `Program`.

    The whole program is parsed before anything runs, so a bad statement
    is reported even when it sits in a branch that would never execute.
    """
    return parse_statements(split_statements(source))
