"""Teams: ein einzelner Studierender oder ein bestätigtes Paar.

Ein Team besitzt seine Studierenden nicht. Es hält nur Positionen in einem
Kader (``roster``), aus dem es gebildet wurde, und wird für jede Rechnung
frisch abgeleitet.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from models.student import Student


class TeamKind(str, Enum):
    SINGLE = "single"
    FULL = "full"


@dataclass(frozen=True)
class Team:
    roster: Sequence[Student] = field(repr=False, compare=False)
    indices: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.indices) not in (1, 2):
            raise ValueError(f"Ein Team hat 1 oder 2 Mitglieder, nicht {len(self.indices)}")
        if len(set(self.indices)) != len(self.indices):
            raise ValueError("Ein Team kann nicht zweimal denselben Studierenden enthalten")

    @classmethod
    def single(cls, roster: Sequence[Student], idx: int) -> "Team":
        return cls(roster, (idx,))

    @classmethod
    def full(cls, roster: Sequence[Student], first: int, second: int) -> "Team":
        return cls(roster, (first, second))

    @property
    def kind(self) -> TeamKind:
        return TeamKind.SINGLE if len(self.indices) == 1 else TeamKind.FULL

    @property
    def students(self) -> tuple[Student, ...]:
        return tuple(self.roster[i] for i in self.indices)

    @property
    def member_names(self) -> list[str]:
        return [s.name for s in self.students]

    @property
    def name(self) -> str:
        return " & ".join(self.member_names)

    def members(self) -> int:
        return len(self.indices)

    def contains(self, student: Student) -> bool:
        # Identität über den Namen
        return student.name in self.member_names

    def all_students(self, predicate: Callable[[Student], bool]) -> bool:
        return all(predicate(s) for s in self.students)

    def __str__(self) -> str:
        return self.name
