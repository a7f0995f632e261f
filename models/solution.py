"""Ergebnis-Modelle des Testat-Solvers (Pydantic v2)."""

from collections import Counter
from typing import Optional

from pydantic import BaseModel

from models.timeslot import Timeslot


class Testat(BaseModel):
    """Ein geplantes Testat: ein Team, ein Tutor, ein Slot."""

    __test__ = False

    timeslot: Timeslot
    tutor: str                 # Name des Tutors
    team: list[str]            # Namen der Teammitglieder (1 oder 2)
    team_value: float = 0.0    # Bewertung des Slots durch das Team
    tutor_value: float = 0.0   # Bewertung des Slots durch den Tutor

    @property
    def team_name(self) -> str:
        return " & ".join(self.team)

    @property
    def preference(self) -> float:
        return self.team_value + self.tutor_value


class Solution(BaseModel):
    """Vollständige Lösung: jedes Team kommt in genau einem Testat vor."""

    testats: list[Testat]
    solver_status: str
    solve_time_seconds: float = 0.0
    objective_value: Optional[float] = None   # erreichte Gesamtpräferenz
    num_variables: int = 0
    num_constraints: int = 0

    @property
    def total_preference(self) -> float:
        return sum(t.preference for t in self.testats)

    def get_tutor_testats(self, tutor: str) -> list[Testat]:
        """Alle Testate eines Tutors."""
        return [t for t in self.testats if t.tutor == tutor]

    def get_testat_for(self, student: str) -> Optional[Testat]:
        """Das Testat, in dem ein Studierender geprüft wird (oder None)."""
        return next((t for t in self.testats if student in t.team), None)

    def tutor_load(self) -> dict[str, int]:
        """Anzahl Testate je Tutor."""
        return dict(Counter(t.tutor for t in self.testats))
