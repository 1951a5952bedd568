"""Instruction model for Barebones programs.

A program is an ordered list of statements. Every statement is kept,
including blanks and comments, so that a statement's position in the list
is its statement number minus one. Blank and comment statements have an
empty keyword and are skipped by everything that walks the list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

CLEAR = 'clear'
INCR = 'incr'
DECR = 'decr'
WHILE = 'while'
END = 'end'
IF = 'if'
ELIF = 'elif'
ELSE = 'else'
ENDIF = 'endif'
NOOP = ''

# Keywords that open a block closed by the paired keyword.
BLOCK_CLOSERS: Dict[str, str] = {WHILE: END, IF: ENDIF}

# Where an if/elif with a zero condition continues.
BRANCH_TARGETS = frozenset((ELIF, ELSE, ENDIF))


@dataclass(frozen=True)
class Instruction:
    keyword: str
    operand: Optional[str]
    line: int
    text: str

    @property
    def is_noop(self) -> bool:
        return self.keyword == NOOP


@dataclass
class Program:
    instructions: List[Instruction]

    def __len__(self) -> int:
        return len(self.instructions)

    def variables(self) -> List[str]:
        """Operand names in order of first appearance."""
        seen: Dict[str, None] = {}
        for instruction in self.instructions:
            if instruction.operand is not None:
                seen.setdefault(instruction.operand, None)
        return list(seen)
