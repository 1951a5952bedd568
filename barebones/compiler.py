"""Ahead-of-time compiler from Barebones to bytecode.

The compiler makes a single forward pass over the instruction list and
emits 7-byte records. Loops need no lookahead: `while` only remembers the
current offset and `end` jumps back to it. Branches need the offsets of
statements not yet emitted; those come from the resolver, which finds the
sibling keyword, and `span`, which sums the sizes of everything in
between.

Unconditional jumps test a reserved slot that the prelude sets to 1:

    if V      GOTO V -> body ; GOTO always -> next branch
    elif V    GOTO always -> endif ; GOTO V -> body ; GOTO always -> next branch
    else      GOTO always -> endif

A jump to an `elif` or `else` lands after its leading `GOTO always`.
"""

from __future__ import annotations

from typing import Collection, Dict, List, Optional

from .ast import (
    Instruction, Program,
    CLEAR, INCR, DECR, WHILE, END, IF, ELIF, ELSE, ENDIF, NOOP, BRANCH_TARGETS,
)
from . import bytecode
from .bytecode import GOTO, MAX_SLOTS, MAX_TARGET, RECORD_SIZE, Record
from .container import CompiledProgram
from .environment import assign_slots
from .errors import CompileError, StructureError, UnparseableInstruction
from .frames import Frame, IfFrame, LoopFrame, check_closed, innermost
from .parser import parse_program
from .resolver import NOT_FOUND, find_next, span

# Symbol name of the slot that always holds 1. Names never contain spaces.
ALWAYS_SET = '<always set>'

RECORDS_PER_KEYWORD: Dict[str, int] = {
    CLEAR: 1, INCR: 1, DECR: 1, END: 1,
    IF: 2, ELIF: 3, ELSE: 1,
    WHILE: 0, ENDIF: 0, NOOP: 0,
}

OPCODES = {CLEAR: bytecode.CLEAR, INCR: bytecode.INC, DECR: bytecode.DEC}


def size_of(instruction: Instruction) -> int:
    """Bytes emitted for one instruction."""
    return RECORDS_PER_KEYWORD[instruction.keyword] * RECORD_SIZE


def entry_offset(instruction: Instruction, start: int) -> int:
    """Where a jump to `instruction`, emitted at `start`, must land."""
    if instruction.keyword in (ELIF, ELSE):
        return start + RECORD_SIZE
    return start


class Compiler:
    """Compiles a parsed `Program` into a `CompiledProgram`."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None, symbols: bool = True):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_file and debug_level > 0 else None
        self.symbols = symbols

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def compile(self, program: Program) -> CompiledProgram:
        try:
            return self._compile(program)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def _compile(self, program: Program) -> CompiledProgram:
        instructions = program.instructions
        slots = assign_slots(program.variables())
        branches = any(i.keyword in (IF, ELIF, ELSE) for i in instructions)
        always = len(slots) if branches else None
        names = list(slots)
        if always is not None:
            names.append(ALWAYS_SET)
        if len(names) > MAX_SLOTS:
            raise CompileError(f"{len(names)} variables exceed the {MAX_SLOTS} available slots")

        code = bytearray()
        frames: List[Frame] = []

        def emit(record: Record, instruction: Optional[Instruction] = None):
            if record.target > MAX_TARGET:
                raise CompileError(f"jump target {record.target} does not fit in 4 bytes")
            if self.debug_level >= 1:
                source = f"  ; {instruction.text}" if instruction else ''
                self.debug(f"{len(code):08d}  {record.name:<5} {names[record.slot]}"
                           + (f" -> {record.target:08d}" if record.opcode == GOTO else '') + source)
            code.extend(record.encode())

        if always is not None:
            emit(Record(bytecode.CLEAR, always))
            emit(Record(bytecode.INC, always))

        for position, instruction in enumerate(instructions):
            keyword = instruction.keyword
            slot = slots[instruction.operand] if instruction.operand is not None else None
            start = len(code)
            if keyword == NOOP:
                continue
            if keyword in OPCODES:
                emit(Record(OPCODES[keyword], slot), instruction)
            elif keyword == WHILE:
                frames.append(LoopFrame(start, slot, instruction.line))
            elif keyword == END:
                frame = innermost(frames, LoopFrame, instruction)
                frames.pop()
                emit(Record(GOTO, frame.slot, frame.return_to), instruction)
            elif keyword == IF:
                frames.append(IfFrame(False, instruction.line))
                emit(Record(GOTO, slot, start + 2 * RECORD_SIZE), instruction)
                emit(Record(GOTO, always, self.target(program, position, start, BRANCH_TARGETS)), instruction)
            elif keyword == ELIF:
                innermost(frames, IfFrame, instruction)
                emit(Record(GOTO, always, self.target(program, position, start, (ENDIF,))), instruction)
                emit(Record(GOTO, slot, start + 3 * RECORD_SIZE), instruction)
                emit(Record(GOTO, always, self.target(program, position, start, BRANCH_TARGETS)), instruction)
            elif keyword == ELSE:
                innermost(frames, IfFrame, instruction)
                emit(Record(GOTO, always, self.target(program, position, start, (ENDIF,))), instruction)
            elif keyword == ENDIF:
                innermost(frames, IfFrame, instruction)
                frames.pop()
            else:
                raise UnparseableInstruction(instruction.line, instruction.text)
            if len(code) - start != size_of(instruction):
                raise CompileError(f"line {instruction.line}: emitted {len(code) - start} bytes, expected {size_of(instruction)}")
        check_closed(frames)

        symbols = dict(enumerate(names)) if self.symbols else {}
        return CompiledProgram(len(names), bytes(code), symbols)

    def target(self, program: Program, position: int, start: int, targets: Collection[str]) -> int:
        """Byte offset of the next sibling in `targets` of the branch at `position`.

        `start` is the offset the branch's own code begins at.
        """
        instructions = program.instructions
        found = find_next(instructions, position, targets)
        if found == NOT_FOUND:
            instruction = instructions[position]
            raise StructureError(
                f"'{instruction.keyword}' without a matching 'endif'",
                instruction.line, instruction.text,
            )
        offset = entry_offset(instructions[found], start + span(instructions, position, found, size_of))
        if self.debug_level >= 2:
            self.debug(f"line {instructions[position].line} branches to line {instructions[found].line} at {offset:08d}")
        return offset


def compile_program(source: str, debug_level: int = 0, symbols: bool = True) -> bytes:
    """Convenience function to parse and compile a Barebones program to container bytes."""
    program = parse_program(source)
    compiler = Compiler(debug_level=debug_level, symbols=symbols)
    return compiler.compile(program).to_bytes()
