"""CLI entry point for Barebones.

Usage:
    python -m barebones [-v|-vv] <program_file>
    python -m barebones [-v|-vv] [--no-symbols] --compile OUT_FILE <program_file>
    python -m barebones --disasm <compiled_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Write debug output to a file instead of stdout
  --compile     Compile the program and write the binary container to OUT_FILE
  --no-symbols  Leave the symbol table out of the compiled container
  --disasm      List the records of a compiled container

Running a program prints its final variable table.
"""

import argparse
import sys
from pathlib import Path
from .parser import parse_program
from .interpreter import Interpreter
from .compiler import Compiler
from .container import CompiledProgram, is_compiled
from .bytecode import disassemble
from .environment import format_table
from .errors import BarebonesError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Barebones interpreter and compiler")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', metavar='FILE', help='write debug output to FILE')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--compile', metavar='OUT_FILE', help='compile the program into OUT_FILE')
    group.add_argument('--disasm', metavar='COMPILED_FILE', help='list the records of a compiled file')
    parser.add_argument('--no-symbols', action='store_true', help='omit the symbol table when compiling')
    parser.add_argument('program', nargs='?', help='Barebones program file to run or compile')
    args = parser.parse_args(argv)

    # Disassemble mode
    if args.disasm:
        compiled_file = Path(args.disasm)
        if not compiled_file.exists():
            print(f"Error: file {compiled_file} not found", file=sys.stderr)
            sys.exit(1)
        try:
            compiled = CompiledProgram.from_bytes(compiled_file.read_bytes())
        except BarebonesError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"variables: {compiled.var_count}, code length: {compiled.code_length}")
        print(disassemble(compiled.code, compiled.symbols))
        return

    if not args.program:
        parser.error('missing program file')
    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    if is_compiled(program_file):
        print(f"Error: {program_file} is already compiled; use --disasm to inspect it", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    try:
        program = parse_program(source)
    except BarebonesError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    # Compile mode
    if args.compile:
        compiler = Compiler(debug_level=args.v, debug_file=args.debug_file, symbols=not args.no_symbols)
        try:
            compiled = compiler.compile(program)
        except BarebonesError as e:
            print(f"Compile error: {e}", file=sys.stderr)
            sys.exit(1)
        Path(args.compile).write_bytes(compiled.to_bytes())
        print(f"{args.compile}: {compiled.var_count} variables, {compiled.code_length} bytes of code")
        return

    # Default: execute source file
    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        values = interpreter.run(program)
    except BarebonesError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    print(format_table(values))

if __name__ == '__main__':
    main()
