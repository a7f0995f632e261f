"""Datenmodell für einen Tutor (Pydantic v2)."""

import math

from pydantic import BaseModel, Field, model_validator

from models.rating import SlotAssignment

# Testate pro voller Stelle (scale_factor 1.0)
TESTATS_PER_STELLE = 1


class Tutor(BaseModel):
    """Repräsentiert einen Tutor mit Slot-Bewertung und Stellenanteil."""

    name: str = Field(min_length=1)
    slot_assignment: SlotAssignment
    scale_factor: float = Field(gt=0)

    @property
    def expected_testats(self) -> float:
        return self.scale_factor * TESTATS_PER_STELLE

    @property
    def alternatives(self) -> float:
        return self.slot_assignment.alternatives

    @property
    def capacity(self) -> int:
        """Ganze Testate, die dem Tutor höchstens zugeteilt werden."""
        # Toleranz gegen Rundungsfehler bei z.B. 0.1 * 30
        return math.floor(self.expected_testats + 1e-9)

    @model_validator(mode="after")
    def _check_capacity(self):
        if self.expected_testats > self.alternatives:
            raise ValueError(
                f"Tutor '{self.name}': erwartete Testate ({self.expected_testats:g}) "
                f"> bewertete Alternativen ({self.alternatives:g})."
            )
        return self
