"""Forward scanning over nested control-flow blocks.

Both the interpreter and the compiler need to find where a skipped branch
continues. `find_next` locates the next sibling keyword of a block while
stepping over any nested `while ... end` or `if ... endif` between them;
`span` measures the code the compiler emits between two positions.
"""

from __future__ import annotations

from typing import Callable, Collection, Sequence

from .ast import Instruction, BLOCK_CLOSERS

NOT_FOUND = -1

_CLOSERS = frozenset(BLOCK_CLOSERS.values())


def find_next(instructions: Sequence[Instruction], start: int, targets: Collection[str]) -> int:
    """Return the position of the next keyword in `targets` after `start`.

    Keywords belonging to a block nested between `start` and the match are
    ignored; both `end` and `endif` close a nesting level. Returns
    `NOT_FOUND` when the program ends first.
    """
    depth = 0
    for position in range(start + 1, len(instructions)):
        keyword = instructions[position].keyword
        if not keyword:
            continue
        if depth == 0 and keyword in targets:
            return position
        if keyword in BLOCK_CLOSERS:
            depth += 1
        elif keyword in _CLOSERS and depth > 0:
            depth -= 1
    return NOT_FOUND


def span(instructions: Sequence[Instruction], start: int, stop: int,
         size_of: Callable[[Instruction], int]) -> int:
    """Total size of the instructions in `[start, stop)`."""
    return sum(size_of(instructions[position]) for position in range(start, stop))
