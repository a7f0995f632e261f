"""Slot-Bewertungen und ihre Gewichte (Pydantic v2).

Eine Bewertung ist bewusst weich: ``TOLERABLE`` zählt als halbe Alternative.
Das Gewicht ist die Einheit, mit der Nachfrage und Angebot pro Slot
gerechnet werden.
"""

from collections import Counter
from enum import Enum
from typing import Optional

from pydantic import BaseModel, PrivateAttr, model_validator

from models.timeslot import Timeslot


class SlotRating(str, Enum):
    GOOD = "good"
    TOLERABLE = "tolerable"
    NOT_FITTING = "not_fitting"

    @property
    def is_ok(self) -> bool:
        """True für alles außer ``NOT_FITTING``."""
        return self is not SlotRating.NOT_FITTING


_WEIGHTS = {
    SlotRating.GOOD: 1.0,
    SlotRating.TOLERABLE: 0.5,
    SlotRating.NOT_FITTING: 0.0,
}


def weight(rating: SlotRating) -> float:
    """Numerisches Gewicht einer Bewertung: 1.0 / 0.5 / 0.0."""
    return _WEIGHTS[rating]


class SlotAssignment(BaseModel):
    """Bewertung aller Slots einer Person.

    Gespeichert werden nur die "guten" und "tolerierbaren" Slots; jeder
    andere Slot gilt implizit als ``NOT_FITTING``.
    """

    good: list[Timeslot]
    tolerable: list[Timeslot] = []

    # Slot → Bewertung, einmal pro Instanz aufgebaut
    _ratings: Optional[dict[Timeslot, SlotRating]] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_slots(self):
        if not self.good:
            raise ValueError("Mindestens ein Slot muss als 'good' bewertet sein.")
        listed = self.good + self.tolerable
        if len(set(listed)) != len(listed):
            dupes = sorted(ts for ts, n in Counter(listed).items() if n > 1)
            raise ValueError(
                f"Slots doppelt bewertet (good/tolerable nicht disjunkt): "
                f"{', '.join(str(ts) for ts in dupes)}"
            )
        self._ratings = self._build_ratings()
        return self

    @classmethod
    def from_slots(cls, good, tolerable=()) -> "SlotAssignment":
        """Baut eine Zuordnung aus zwei (disjunkten) Slot-Mengen."""
        return cls(good=list(good), tolerable=list(tolerable))

    def _build_ratings(self) -> dict[Timeslot, SlotRating]:
        ratings = {ts: SlotRating.GOOD for ts in self.good}
        ratings.update({ts: SlotRating.TOLERABLE for ts in self.tolerable})
        return ratings

    @property
    def ratings(self) -> dict[Timeslot, SlotRating]:
        """Slot → Bewertung, nur explizit bewertete Slots."""
        # Ohne Validierung (model_construct) erst beim ersten Zugriff
        if self._ratings is None:
            self._ratings = self._build_ratings()
        return self._ratings

    @property
    def rated_slots(self) -> list[Timeslot]:
        return sorted(self.good + self.tolerable)

    @property
    def alternatives(self) -> float:
        """Summe der Gewichte über alle bewerteten Slots."""
        return sum(weight(r) for r in self.ratings.values())

    def rating_for(self, slot: Timeslot) -> SlotRating:
        return self.ratings.get(slot, SlotRating.NOT_FITTING)

    def intersect(self, other: "SlotAssignment") -> set[Timeslot]:
        """Slots, die von beiden bewertet wurden (nur Schlüssel, nicht Wert)."""
        return set(self.ratings) & set(other.ratings)
