"""Instance: Vollständige Eingabe eines Planungslaufs + Machbarkeits-Check (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, model_validator

from models.student import Student
from models.timeslot import Timeslot
from models.tutor import Tutor


class FeasibilityReport(BaseModel):
    """Ergebnis des Machbarkeits-Checks."""

    is_feasible: bool
    errors: list[str]      # Kritische Probleme (Lösung unmöglich)
    warnings: list[str]    # Hinweise (Lösung schwierig aber möglich)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_feasible:
            status = "[bold green]✓ LÖSBAR[/bold green]"
        else:
            status = "[bold red]✗ NICHT LÖSBAR[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler (kritisch):[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Machbarkeits-Check", border_style="cyan"))


class Instance(BaseModel):
    """Eingabe eines Planungslaufs: Studierende und Tutoren mit Bewertungen."""

    students: list[Student]
    tutors: list[Tutor]

    @model_validator(mode="after")
    def _check_roster(self):
        names = [s.name for s in self.students]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Studentennamen nicht eindeutig: {dupes}")
        tutor_names = [t.name for t in self.tutors]
        dupes = sorted({n for n in tutor_names if tutor_names.count(n) > 1})
        if dupes:
            raise ValueError(f"Tutorennamen nicht eindeutig: {dupes}")

        by_name = {s.name: s for s in self.students}
        for s in self.students:
            if s.partner is None:
                continue
            partner = by_name.get(s.partner)
            if partner is None:
                raise ValueError(f"Student '{s.name}' hat unbekannten Partner '{s.partner}'.")
            if partner.partner != s.name:
                raise ValueError(
                    f"Partnerwunsch nicht symmetrisch: '{s.name}' → '{partner.name}', "
                    f"aber '{partner.name}' → '{partner.partner}'."
                )
        return self

    # ─── Abfragen ───

    def slots(self) -> list[Timeslot]:
        """Alle Slots, die mindestens eine Person nicht als NOT_FITTING bewertet.

        Sortiert, damit nachfolgende Rechnungen reproduzierbar sind.
        """
        found: set[Timeslot] = set()
        for person in [*self.students, *self.tutors]:
            found.update(person.slot_assignment.ratings)
        return sorted(found)

    def get_student(self, name: str) -> Optional[Student]:
        return next((s for s in self.students if s.name == name), None)

    def get_tutor(self, name: str) -> Optional[Tutor]:
        return next((t for t in self.tutors if t.name == name), None)

    def summary(self) -> str:
        """Kurze Übersicht über die Instanz."""
        num_paired = sum(1 for s in self.students if s.partner is not None)
        total_expected = sum(t.expected_testats for t in self.tutors)
        total_capacity = sum(t.capacity for t in self.tutors)
        num_teams = len(self.students) - num_paired // 2
        lines = [
            f"Studierende: {len(self.students)} ({num_paired // 2} Paare)",
            f"Teams: {num_teams}",
            f"Tutoren: {len(self.tutors)}",
            f"Erwartete Testate: {total_expected:g} (ganzzahlig: {total_capacity})",
            f"Bewertete Slots: {len(self.slots())}",
        ]
        return "\n".join(lines)

    # ─── Machbarkeits-Check ───

    def validate_feasibility(self) -> FeasibilityReport:
        """Prüft ob die Instanz grundsätzlich lösbar ist.

        Prüfungen:
        1. Gesamtkapazität der Tutoren ≥ Anzahl Teams
        2. Paare mit mindestens einem gemeinsam bewerteten Slot
        3. Jedes Team hat einen Slot, den auch ein Tutor mit Kapazität akzeptiert
        4. Slots, deren Nachfrage das Angebot übersteigt (nur Warnung)
        """
        from solver.demand import slot_balance, team_rating_values
        from solver.teams import form_teams

        errors: list[str] = []
        warnings: list[str] = []

        teams = form_teams(self.students)

        # ── 1. Gesamtbilanz ──────────────────────────────────────────────
        total_capacity = sum(t.capacity for t in self.tutors)
        if total_capacity < len(teams):
            errors.append(
                f"Gesamtbilanz: Tutorenkapazität ({total_capacity} Testate) < "
                f"Anzahl Teams ({len(teams)})."
            )
        for tutor in self.tutors:
            if tutor.capacity == 0:
                warnings.append(
                    f"Tutor '{tutor.name}': scale_factor {tutor.scale_factor:g} ergibt "
                    f"keine ganzen Testate – wird nicht eingeplant."
                )

        # ── 2./3. Teams ohne mögliche Slots ──────────────────────────────
        tutor_slots: set[Timeslot] = set()
        for tutor in self.tutors:
            if tutor.capacity > 0:
                tutor_slots.update(tutor.slot_assignment.ratings)

        for team in teams:
            values = team_rating_values(team)
            if not values:
                errors.append(f"Team '{team.name}': kein gemeinsam bewerteter Slot.")
            elif not tutor_slots.intersection(values):
                errors.append(
                    f"Team '{team.name}': kein Tutor bietet einen der "
                    f"{len(values)} möglichen Slots an."
                )

        # ── 4. Engpass-Slots ─────────────────────────────────────────────
        for balance in slot_balance(self.slots(), teams, self.tutors):
            if balance.demand > 0 and balance.shortfall > 0:
                warnings.append(
                    f"Slot {balance.timeslot}: Nachfrage {balance.demand:.2f} > "
                    f"Angebot {balance.supply:.2f}."
                )

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )
