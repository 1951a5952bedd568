# Barebones language package
# This package provides an interpreter and a bytecode compiler for Barebones.
from .parser import parse_program
from .interpreter import run_program, Interpreter
from .compiler import compile_program, Compiler
from .container import CompiledProgram, is_compiled
from .errors import (
    BarebonesError, UnparseableInstruction, StructureError, CompileError, ContainerError,
)

__all__ = [
    'parse_program',
    'run_program',
    'Interpreter',
    'compile_program',
    'Compiler',
    'CompiledProgram',
    'is_compiled',
    'BarebonesError',
    'UnparseableInstruction',
    'StructureError',
    'CompileError',
    'ContainerError',
]
