from typing import Optional


class BarebonesError(Exception):
    """Base class for every error raised while handling a Barebones program."""


class UnparseableInstruction(BarebonesError):
    """A statement whose keyword or operands match no instruction form."""
    def __init__(self, line: int, text: str):
        super().__init__(f"instruction on line {line} failed to parse: {text!r}")
        self.line = line
        self.text = text


class StructureError(BarebonesError):
    """Unbalanced while/end or if/elif/else/endif blocks."""
    def __init__(self, message: str, line: Optional[int] = None, text: str = ''):
        where = f" (line {line}: {text!r})" if line is not None else ''
        super().__init__(message + where)
        self.line = line
        self.text = text


class CompileError(BarebonesError):
    """The program cannot be expressed in the bytecode format."""


class ContainerError(BarebonesError):
    """A byte buffer is not a well-formed compiled program."""
