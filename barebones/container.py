"""Binary container for compiled Barebones programs.

Layout, all multi-byte fields big-endian::

    MAGIC (4) | VAR_COUNT (2) | CODE_LEN (4) | CODE (CODE_LEN) | SYMBOLS

MAGIC is `BONE`. CODE is a run of 7-byte records. SYMBOLS is optional
UTF-8 text of `slot=name;` entries mapping slots back to variable names.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .bytecode import RECORD_SIZE, Record, iter_records
from .errors import ContainerError

MAGIC = bytes((0x42, 0x4F, 0x4E, 0x45))
HEADER = struct.Struct('>4sHI')


@dataclass
class CompiledProgram:
    var_count: int
    code: bytes
    symbols: Dict[int, str] = field(default_factory=dict)

    @property
    def code_length(self) -> int:
        return len(self.code)

    @property
    def records(self) -> List[Record]:
        return [record for _, record in iter_records(self.code)]

    def to_bytes(self) -> bytes:
        table = ''.join(f"{slot}={name};" for slot, name in sorted(self.symbols.items()))
        return HEADER.pack(MAGIC, self.var_count, len(self.code)) + self.code + table.encode('utf-8')

    @classmethod
    def from_bytes(cls, data: bytes) -> 'CompiledProgram':
        data = bytes(data)
        if len(data) < HEADER.size:
            raise ContainerError(f"container is {len(data)} bytes, shorter than its header")
        magic, var_count, code_length = HEADER.unpack_from(data)
        if magic != MAGIC:
            raise ContainerError(f"bad magic {magic!r}")
        if code_length % RECORD_SIZE:
            raise ContainerError(f"code length {code_length} is not a multiple of {RECORD_SIZE}")
        end = HEADER.size + code_length
        if len(data) < end:
            raise ContainerError(f"code section truncated: expected {code_length} bytes, got {len(data) - HEADER.size}")
        return cls(var_count, data[HEADER.size:end], parse_symbols(data[end:]))


def parse_symbols(raw: bytes) -> Dict[int, str]:
    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ContainerError(f"symbol table is not UTF-8: {e}") from None
    symbols: Dict[int, str] = {}
    for entry in text.split(';'):
        if not entry:
            continue
        slot, sep, name = entry.partition('=')
        if not sep or not slot.isdigit():
            raise ContainerError(f"bad symbol table entry {entry!r}")
        symbols[int(slot)] = name
    return symbols


def is_compiled(source: Any) -> bool:
    """Report whether `source` starts with the container magic.

    `source` may be a bytes-like object, a path, or a binary file object.
    Short reads and I/O failures mean "not compiled", never an exception.
    """
    try:
        if isinstance(source, (bytes, bytearray, memoryview)):
            head = bytes(source[:len(MAGIC)])
        elif isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as f:
                head = f.read(len(MAGIC))
        else:
            head = source.read(len(MAGIC))
    except (OSError, ValueError, AttributeError):
        return False
    return isinstance(head, bytes) and head == MAGIC
