"""Datenmodell für einen Studierenden (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.rating import SlotAssignment


class Student(BaseModel):
    """Repräsentiert einen Studierenden mit Slot-Bewertung und Partnerwunsch.

    Der Partner wird nur über den Namen referenziert und erst gegen den
    vollständigen Kader aufgelöst (siehe ``Instance`` und ``form_teams``).
    """

    name: str = Field(min_length=1)   # eindeutiger Bezeichner
    slot_assignment: SlotAssignment
    partner: Optional[str] = None     # Name des Wunschpartners

    @model_validator(mode="after")
    def _check_partner(self):
        if self.partner is not None and self.partner == self.name:
            raise ValueError(f"Student '{self.name}' nennt sich selbst als Partner.")
        return self
