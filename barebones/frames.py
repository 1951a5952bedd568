"""Control frames shared by the interpreter and the compiler.

One stack holds both kinds of frame, so a `while` closed by `endif` or an
`if` closed by `end` shows up as a frame of the wrong kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Type, TypeVar, Union

from .ast import Instruction, WHILE, END, IF, ELIF, ELSE, ENDIF
from .errors import StructureError


@dataclass
class LoopFrame:
    # Statement position (interpreter) or byte offset (compiler) to resume at.
    return_to: int
    slot: int
    line: int


@dataclass
class IfFrame:
    resolved: bool
    line: int


Frame = Union[LoopFrame, IfFrame]
F = TypeVar('F', LoopFrame, IfFrame)

_OPENER = {LoopFrame: WHILE, IfFrame: IF}


def innermost(frames: List[Frame], kind: Type[F], instruction: Instruction) -> F:
    """Return the top frame, which must be of `kind`."""
    if not frames or not isinstance(frames[-1], kind):
        raise StructureError(
            f"'{instruction.keyword}' without an enclosing '{_OPENER[kind]}'",
            instruction.line, instruction.text,
        )
    return frames[-1]


def check_closed(frames: List[Frame]) -> None:
    """Fail on the outermost block left open at the end of the program."""
    if not frames:
        return
    frame = frames[0]
    if isinstance(frame, LoopFrame):
        raise StructureError("'while' without a matching 'end'", frame.line)
    raise StructureError("'if' without a matching 'endif'", frame.line)


def check_structure(instructions: Sequence[Instruction]) -> None:
    """Check block nesting of every statement, executed or not."""
    frames: List[Frame] = []
    for position, instruction in enumerate(instructions):
        keyword = instruction.keyword
        if keyword == WHILE:
            frames.append(LoopFrame(position, 0, instruction.line))
        elif keyword == END:
            innermost(frames, LoopFrame, instruction)
            frames.pop()
        elif keyword == IF:
            frames.append(IfFrame(False, instruction.line))
        elif keyword in (ELIF, ELSE):
            innermost(frames, IfFrame, instruction)
        elif keyword == ENDIF:
            innermost(frames, IfFrame, instruction)
            frames.pop()
    check_closed(frames)
