"""Testdaten-Generator für den Testat-Planer.

Erzeugt zufällige, aber gültige Instanzen:
  - Partnerwünsche sind immer symmetrisch.
  - Jedes Paar hat mindestens einen gemeinsam als "good" bewerteten Slot.
  - Die Tutoren decken zusammen jeden Slot des Rasters ab.
  - Die erwarteten Testate eines Tutors übersteigen nie seine Alternativen.

Ob die Instanz lösbar ist, hängt vom Seed und den Engpässen ab.
"""

import math
import random
from typing import Optional

from models.instance import Instance
from models.rating import SlotAssignment
from models.student import Student
from models.timeslot import Timeslot, WorkDay
from models.tutor import Tutor

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Ben", "Clara", "David", "Emma", "Felix", "Greta", "Hannes",
    "Ida", "Jonas", "Klara", "Lukas", "Mia", "Noah", "Olga", "Paul",
    "Ronja", "Simon", "Tilda", "Ulrich", "Vera", "Yusuf", "Zoe", "Moritz",
]

_TUTOR_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Koch", "Richter",
]


class FakeInstanceGenerator:
    """Generiert eine vollständige Instanz aus Studierenden und Tutoren."""

    def __init__(
        self,
        seed: Optional[int] = None,
        num_singles: int = 10,
        num_pairs: int = 4,
        num_tutors: int = 4,
        slots_per_day: int = 4,
        capacity_buffer: float = 1.2,
    ) -> None:
        self.rng = random.Random(seed)
        self.num_singles = num_singles
        self.num_pairs = num_pairs
        self.num_tutors = num_tutors
        self.capacity_buffer = capacity_buffer
        self.grid = [
            Timeslot(day, slot)
            for day in WorkDay
            for slot in range(slots_per_day)
        ]
        self._used_names: set[str] = set()

    @property
    def num_teams(self) -> int:
        return self.num_singles + self.num_pairs

    # ─── Namen ────────────────────────────────────────────────────────────────

    def _unique_name(self, pool: list[str]) -> str:
        base = self.rng.choice(pool)
        name, n = base, 1
        while name in self._used_names:
            n += 1
            name = f"{base}{n}"
        self._used_names.add(name)
        return name

    # ─── Bewertungen ──────────────────────────────────────────────────────────

    def _random_assignment(
        self, num_good: int, num_tolerable: int, must_have: Optional[Timeslot] = None
    ) -> SlotAssignment:
        """Zufällige, disjunkte good/tolerable-Mengen aus dem Raster."""
        pool = list(self.grid)
        self.rng.shuffle(pool)
        good = pool[:num_good]
        if must_have is not None and must_have not in good:
            pool.remove(must_have)
            good = [must_have] + pool[:num_good - 1]
        rest = [ts for ts in pool if ts not in good]
        tolerable = rest[:num_tolerable]
        return SlotAssignment(good=sorted(good), tolerable=sorted(tolerable))

    # ─── Studierende ──────────────────────────────────────────────────────────

    def _generate_students(self) -> list[Student]:
        students: list[Student] = []
        for _ in range(self.num_singles):
            students.append(Student(
                name=self._unique_name(_FIRST_NAMES),
                slot_assignment=self._random_assignment(
                    self.rng.randint(1, 3), self.rng.randint(0, 3)
                ),
            ))

        for _ in range(self.num_pairs):
            first = self._unique_name(_FIRST_NAMES)
            second = self._unique_name(_FIRST_NAMES)
            shared = self.rng.choice(self.grid)
            students.append(Student(
                name=first,
                partner=second,
                slot_assignment=self._random_assignment(
                    self.rng.randint(1, 3), self.rng.randint(0, 2), must_have=shared
                ),
            ))
            students.append(Student(
                name=second,
                partner=first,
                slot_assignment=self._random_assignment(
                    self.rng.randint(1, 3), self.rng.randint(0, 2), must_have=shared
                ),
            ))

        self.rng.shuffle(students)
        return students

    # ─── Tutoren ──────────────────────────────────────────────────────────────

    def _generate_tutors(self) -> list[Tutor]:
        if self.num_tutors == 0:
            return []

        # Raster reihum verteilen, damit jeder Slot von einem Tutor abgedeckt ist
        covered: list[list[Timeslot]] = [[] for _ in range(self.num_tutors)]
        for i, ts in enumerate(self.grid):
            covered[i % self.num_tutors].append(ts)

        wanted = math.ceil(self.num_teams * self.capacity_buffer / self.num_tutors)
        tutors: list[Tutor] = []
        for own in covered:
            if not own:
                own = [self.rng.choice(self.grid)]
            extra = [ts for ts in self.grid if ts not in own]
            self.rng.shuffle(extra)
            tolerable = extra[:self.rng.randint(0, 3)]
            assignment = SlotAssignment(good=sorted(own), tolerable=sorted(tolerable))
            scale_factor = float(min(wanted, math.floor(assignment.alternatives)))
            tutors.append(Tutor(
                name=self._unique_name(_TUTOR_NAMES),
                slot_assignment=assignment,
                scale_factor=max(scale_factor, 1.0),
            ))
        return tutors

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(self) -> Instance:
        """Erzeugt eine vollständige, gültige Instanz."""
        students = self._generate_students()
        tutors = self._generate_tutors()
        return Instance(students=students, tutors=tutors)
