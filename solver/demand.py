"""Nachfrage und Angebot pro Zeitslot.

Nachfrage: Jedes Team verteilt eine Einheit pro Mitglied proportional zu
seinen Bewertungen auf alle für das Team möglichen Slots.
Angebot: Jeder Tutor verteilt seine erwarteten Testate proportional zu
seinen Bewertungen auf seine Slots.

Beide Größen sind gleich normiert und daher pro Slot direkt vergleichbar.
"""

from typing import Sequence

from pydantic import BaseModel

from models.rating import weight
from models.team import Team, TeamKind
from models.timeslot import Timeslot
from models.tutor import Tutor
from solver.errors import PreconditionError


class SlotBalance(BaseModel):
    """Nachfrage/Angebot eines einzelnen Slots."""

    timeslot: Timeslot
    demand: float
    supply: float

    @property
    def pressure(self) -> float:
        """Nachfrage je Einheit Angebot (inf ohne Angebot, 0 ohne Nachfrage)."""
        if self.supply <= 0:
            return float("inf") if self.demand > 0 else 0.0
        return self.demand / self.supply

    @property
    def shortfall(self) -> float:
        return max(0.0, self.demand - self.supply)


def team_rating_values(team: Team) -> dict[Timeslot, float]:
    """Bewertung eines Teams je Slot.

    Einzel-Team: Gewicht des Studierenden. Paar: Mittelwert beider Gewichte,
    aber nur auf Slots, die *beide* bewertet haben.
    """
    if team.kind is TeamKind.SINGLE:
        (student,) = team.students
        return {
            slot: weight(rating)
            for slot, rating in student.slot_assignment.ratings.items()
        }

    first, second = team.students
    a, b = first.slot_assignment, second.slot_assignment
    return {
        slot: 0.5 * (weight(a.rating_for(slot)) + weight(b.rating_for(slot)))
        for slot in a.intersect(b)
    }


def compute_demand(slot: Timeslot, teams: Sequence[Team]) -> float:
    demand = 0.0
    for team in teams:
        values = team_rating_values(team)
        value = values.get(slot)
        if value is None:
            continue
        alternatives = sum(values.values())
        demand += value * team.members() / alternatives
    return demand


def compute_supply(slot: Timeslot, tutors: Sequence[Tutor]) -> float:
    supply = 0.0
    for tutor in tutors:
        value = weight(tutor.slot_assignment.rating_for(slot))
        expected = tutor.expected_testats
        alternatives = tutor.alternatives
        if expected > alternatives:
            raise PreconditionError(
                f"Tutor '{tutor.name}': erwartete Testate ({expected:g}) "
                f"> Alternativen ({alternatives:g})."
            )
        supply += value * expected / alternatives
    return supply


def slot_balance(
    slots: Sequence[Timeslot], teams: Sequence[Team], tutors: Sequence[Tutor]
) -> list[SlotBalance]:
    """Nachfrage/Angebot für jeden übergebenen Slot, in derselben Reihenfolge."""
    return [
        SlotBalance(
            timeslot=slot,
            demand=compute_demand(slot, teams),
            supply=compute_supply(slot, tutors),
        )
        for slot in slots
    ]
