from typing import Dict, Iterable, List, Mapping, Optional

from .ast import Program


def assign_slots(names: Iterable[str]) -> Dict[str, int]:
    """Give each distinct name a dense slot in order of first appearance."""
    slots: Dict[str, int] = {}
    for name in names:
        if name not in slots:
            slots[name] = len(slots)
    return slots


class Environment:
    """Variable table of a single run, stored by slot."""
    def __init__(self, names: Iterable[str], initial: Optional[Mapping[str, int]] = None):
        self.slots = assign_slots(names)
        self.values: List[int] = [0] * len(self.slots)
        if initial:
            for name, value in initial.items():
                name = name.lower()
                if name not in self.slots:
                    self.slots[name] = len(self.values)
                    self.values.append(0)
                self.values[self.slots[name]] = int(value)

    @classmethod
    def for_program(cls, program: Program, initial: Optional[Mapping[str, int]] = None) -> 'Environment':
        return cls(program.variables(), initial)

    def slot(self, name: str) -> int:
        return self.slots[name]

    def get(self, slot: int) -> int:
        return self.values[slot]

    def set(self, slot: int, value: int):
        self.values[slot] = value

    def as_dict(self) -> Dict[str, int]:
        return {name: self.values[slot] for name, slot in self.slots.items()}


def format_table(values: Mapping[str, int]) -> str:
    """Render a variable table as `name = value` lines."""
    return '\n'.join(f"{name} = {value}" for name, value in values.items())
