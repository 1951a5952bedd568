"""Fixed-width bytecode records.

Every compiled instruction is exactly seven bytes::

    OPCODE (1) | SLOT (2, big-endian) | TARGET (4, big-endian)

TARGET is a byte offset from the start of the code section and is only
meaningful for GOTO, which jumps when the slot's value is non-zero.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

CLEAR = 0x00
DEC = 0x40
INC = 0x80
GOTO = 0xB0

OPCODE_NAMES = {CLEAR: 'CLEAR', DEC: 'DEC', INC: 'INC', GOTO: 'GOTO'}

RECORD = struct.Struct('>BHI')
RECORD_SIZE = RECORD.size  # 7

MAX_SLOTS = 0xFFFF + 1
MAX_TARGET = 0xFFFFFFFF


@dataclass(frozen=True)
class Record:
    opcode: int
    slot: int
    target: int = 0

    def encode(self) -> bytes:
        return RECORD.pack(self.opcode, self.slot, self.target)

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> 'Record':
        opcode, slot, target = RECORD.unpack_from(data, offset)
        return cls(opcode, slot, target)

    @property
    def name(self) -> str:
        return OPCODE_NAMES.get(self.opcode, f'0x{self.opcode:02X}')


def iter_records(code: bytes) -> Iterator[Tuple[int, Record]]:
    """Yield `(offset, record)` for every record in a code section."""
    for offset in range(0, len(code) - len(code) % RECORD_SIZE, RECORD_SIZE):
        yield offset, Record.decode(code, offset)


def disassemble(code: bytes, symbols: Optional[Mapping[int, str]] = None) -> str:
    """Render a code section one record per line."""
    symbols = symbols or {}
    lines = []
    for offset, record in iter_records(code):
        var = symbols.get(record.slot, f'#{record.slot}')
        line = f"{offset:08d}  {record.name:<5} {var}"
        if record.opcode == GOTO:
            line += f" -> {record.target:08d}"
        lines.append(line)
    return '\n'.join(lines)
