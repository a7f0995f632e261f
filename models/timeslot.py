"""Datenmodell für Wochentag und Zeitslot eines Testats."""

from dataclasses import dataclass
from enum import IntEnum


class WorkDay(IntEnum):
    """Einer der fünf Arbeitstage.

    Der Integer-Wert dient nur als stabiler Sortierschlüssel.
    """

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4

    @property
    def short_name(self) -> str:
        return ["Mo", "Di", "Mi", "Do", "Fr"][self.value]


@dataclass(frozen=True, order=True)
class Timeslot:
    """Ein fester Kalender-Slot: Kombination aus Wochentag und Slot des Tages.

    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    Die Menge aller Slots ist offen; sie ergibt sich aus den Bewertungen.
    """

    day: WorkDay
    # Slot innerhalb des Tages (0-basiert wie in der Weboberfläche)
    slot_of_day: int

    def __post_init__(self) -> None:
        if self.slot_of_day < 0:
            raise ValueError(f"slot_of_day muss >= 0 sein, ist {self.slot_of_day}")
        # Ints aus JSON/YAML in das Enum heben
        object.__setattr__(self, "day", WorkDay(self.day))

    @property
    def slot_id(self) -> str:
        """Eindeutiger String-Bezeichner (z.B. "0_1" für Mo, Slot 1)."""
        return f"{int(self.day)}_{self.slot_of_day}"

    def __repr__(self) -> str:
        return f"Timeslot({self.day.short_name}, {self.slot_of_day})"

    def __str__(self) -> str:
        return f"{self.day.short_name} {self.slot_of_day}."
