"""Direct interpreter for the Barebones language.

The interpreter walks the instruction list with an explicit instruction
pointer. Loops and if-chains are tracked on a single stack of frames;
skipped branches are located with the shared resolver.

Loops test their variable only at `end`, so a loop body always runs at
least once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .ast import (
    Instruction, Program,
    CLEAR, INCR, DECR, WHILE, END, IF, ELIF, ELSE, ENDIF, BRANCH_TARGETS,
)
from .environment import Environment, format_table
from .errors import StructureError, UnparseableInstruction
from .frames import Frame, IfFrame, LoopFrame, check_closed, check_structure, innermost
from .parser import parse_program
from .resolver import NOT_FOUND, find_next


@dataclass
class ExecutionContext:
    """Everything one run owns. Nothing here outlives `Interpreter.run`."""
    program: Program
    env: Environment
    # Operand slot per position, resolved once before the first step.
    operands: List[Optional[int]] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    steps: int = 0

    def __post_init__(self):
        slots = self.env.slots
        self.operands = [
            slots[i.operand] if i.operand is not None else None
            for i in self.program.instructions
        ]


class Interpreter:
    """Executes a parsed Barebones `Program`."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_file and debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Program, initial: Optional[Mapping[str, int]] = None) -> Dict[str, int]:
        """Run `program` and return the final variable table.

        `initial` presets variables before the first statement; every
        other variable starts at 0. Block nesting is checked for the whole
        program before the first statement runs.
        """
        ctx = ExecutionContext(program, Environment.for_program(program, initial))
        try:
            check_structure(program.instructions)
            pointer = 0
            instructions = program.instructions
            while pointer < len(instructions):
                instruction = instructions[pointer]
                if instruction.is_noop:
                    pointer += 1
                    continue
                pointer = self.execute(pointer, instruction, ctx)
                ctx.steps += 1
                if self.debug_level >= 1:
                    self.debug(instruction.text)
                    self.debug(format_table(ctx.env.as_dict()))
            check_closed(ctx.frames)
            return ctx.env.as_dict()
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute(self, pointer: int, instruction: Instruction, ctx: ExecutionContext) -> int:
        """Execute one instruction and return the next instruction pointer."""
        env = ctx.env
        keyword = instruction.keyword
        slot = ctx.operands[pointer]
        if keyword == CLEAR:
            env.set(slot, 0)
            return pointer + 1
        if keyword == INCR:
            env.set(slot, env.get(slot) + 1)
            return pointer + 1
        if keyword == DECR:
            env.set(slot, env.get(slot) - 1)
            return pointer + 1
        if keyword == WHILE:
            ctx.frames.append(LoopFrame(pointer, slot, instruction.line))
            return pointer + 1
        if keyword == END:
            frame = innermost(ctx.frames, LoopFrame, instruction)
            if env.get(frame.slot) == 0:
                ctx.frames.pop()
                return pointer + 1
            return frame.return_to + 1
        if keyword == IF:
            if env.get(slot) == 0:
                ctx.frames.append(IfFrame(False, instruction.line))
                return self.skip(pointer, BRANCH_TARGETS, ctx)
            ctx.frames.append(IfFrame(True, instruction.line))
            return pointer + 1
        if keyword == ELIF:
            frame = innermost(ctx.frames, IfFrame, instruction)
            if frame.resolved or env.get(slot) == 0:
                return self.skip(pointer, BRANCH_TARGETS, ctx)
            frame.resolved = True
            return pointer + 1
        if keyword == ELSE:
            frame = innermost(ctx.frames, IfFrame, instruction)
            if frame.resolved:
                return self.skip(pointer, (ENDIF,), ctx)
            frame.resolved = True
            return pointer + 1
        if keyword == ENDIF:
            innermost(ctx.frames, IfFrame, instruction)
            ctx.frames.pop()
            return pointer + 1
        raise UnparseableInstruction(instruction.line, instruction.text)

    def skip(self, pointer: int, targets, ctx: ExecutionContext) -> int:
        """Jump to the next sibling keyword in `targets`."""
        instructions = ctx.program.instructions
        target = find_next(instructions, pointer, targets)
        if target == NOT_FOUND:
            instruction = instructions[pointer]
            raise StructureError(
                f"'{instruction.keyword}' without a matching 'endif'",
                instruction.line, instruction.text,
            )
        if self.debug_level >= 2:
            self.debug(f"skip from line {instructions[pointer].line} to line {instructions[target].line}")
        return target


def run_program(source: str, debug_level: int = 0,
                initial: Optional[Mapping[str, int]] = None) -> Dict[str, int]:
    """Convenience function to parse and run a Barebones program from source."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program, initial)


def run_file(file_path: str, debug_level: int = 0) -> Dict[str, int]:
    """Parse and run a Barebones source file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
