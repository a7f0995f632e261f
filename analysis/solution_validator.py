"""Post-Solve Validierung einer fertigen Testat-Verteilung.

Prüft die Lösung auf Constraint-Verletzungen als Sicherheitsnetz
unabhängig vom Solver.
"""

from collections import Counter, defaultdict
from typing import Literal

from pydantic import BaseModel

from models.instance import Instance
from models.solution import Solution
from solver.demand import team_rating_values
from solver.teams import form_teams


class ValidationViolation(BaseModel):
    """Eine einzelne Constraint-Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "tutor_double_booking"
    description: str
    entity: str          # Team- oder Tutorname


class ValidationReport(BaseModel):
    """Ergebnis der Post-Solve Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Lösung-Validierung", border_style="cyan"))

        if not self.violations:
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Constraint", width=26)
        table.add_column("Entität", width=16)
        table.add_column("Beschreibung")
        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class SolutionValidator:
    """Prüft eine fertige Solution gegen ihre Instance."""

    def __init__(self, allow_concurrent_sessions: bool = False) -> None:
        self.allow_concurrent_sessions = allow_concurrent_sessions

    def validate(self, solution: Solution, instance: Instance) -> ValidationReport:
        """Führt alle Validierungschecks durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        violations.extend(self._check_team_coverage(solution, instance))
        violations.extend(self._check_student_double_booking(solution))
        violations.extend(self._check_acceptability(solution, instance))
        violations.extend(self._check_tutor_capacity(solution, instance))
        if not self.allow_concurrent_sessions:
            violations.extend(self._check_tutor_double_booking(solution))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_team_coverage(
        self, solution: Solution, instance: Instance
    ) -> list[ValidationViolation]:
        """Jedes Team genau einmal, keine unbekannten Teams."""
        violations: list[ValidationViolation] = []
        expected = {tuple(t.member_names) for t in form_teams(instance.students)}
        counts = Counter(tuple(t.team) for t in solution.testats)

        for team in sorted(expected):
            n = counts.get(team, 0)
            if n != 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="team_coverage",
                    entity=" & ".join(team),
                    description=f"Team kommt {n}× statt genau 1× vor.",
                ))
        for team in sorted(set(counts) - expected):
            violations.append(ValidationViolation(
                severity="error",
                constraint="unknown_team",
                entity=" & ".join(team),
                description="Team existiert in der Instanz nicht.",
            ))
        return violations

    def _check_student_double_booking(self, solution: Solution) -> list[ValidationViolation]:
        """Kein Studierender in zwei Testaten."""
        seen: dict[str, list[str]] = defaultdict(list)
        for t in solution.testats:
            for name in t.team:
                seen[name].append(f"{t.timeslot}/{t.tutor}")
        return [
            ValidationViolation(
                severity="error",
                constraint="student_double_booking",
                entity=name,
                description=f"In mehreren Testaten: {', '.join(places)}.",
            )
            for name, places in seen.items()
            if len(places) > 1
        ]

    def _check_acceptability(
        self, solution: Solution, instance: Instance
    ) -> list[ValidationViolation]:
        """Slot muss für Team (bei Paaren: beide) und Tutor akzeptabel sein."""
        violations: list[ValidationViolation] = []
        values_by_team = {
            tuple(team.member_names): team_rating_values(team)
            for team in form_teams(instance.students)
        }

        for t in solution.testats:
            tutor = instance.get_tutor(t.tutor)
            if tutor is None:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="unknown_tutor",
                    entity=t.tutor,
                    description="Tutor existiert in der Instanz nicht.",
                ))
            elif not tutor.slot_assignment.rating_for(t.timeslot).is_ok:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="tutor_slot_not_fitting",
                    entity=t.tutor,
                    description=f"Slot {t.timeslot} ist für den Tutor NOT_FITTING.",
                ))

            values = values_by_team.get(tuple(t.team))
            if values is not None and t.timeslot not in values:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="team_slot_not_fitting",
                    entity=t.team_name,
                    description=f"Slot {t.timeslot} ist für das Team nicht möglich.",
                ))
        return violations

    def _check_tutor_capacity(
        self, solution: Solution, instance: Instance
    ) -> list[ValidationViolation]:
        """Anzahl Testate je Tutor ≤ Kapazität; Unterauslastung nur als Warnung."""
        violations: list[ValidationViolation] = []
        load = solution.tutor_load()
        for tutor in instance.tutors:
            n = load.get(tutor.name, 0)
            if n > tutor.capacity:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="tutor_capacity",
                    entity=tutor.name,
                    description=f"{n} Testate bei Kapazität {tutor.capacity}.",
                ))
            elif n < tutor.capacity:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="tutor_underused",
                    entity=tutor.name,
                    description=f"Nur {n} von {tutor.capacity} möglichen Testaten.",
                ))
        return violations

    def _check_tutor_double_booking(self, solution: Solution) -> list[ValidationViolation]:
        """Ein Tutor prüft pro Slot höchstens ein Team."""
        seen: dict[tuple, list[str]] = defaultdict(list)
        for t in solution.testats:
            seen[(t.tutor, t.timeslot)].append(t.team_name)
        return [
            ValidationViolation(
                severity="error",
                constraint="tutor_double_booking",
                entity=tutor,
                description=f"Slot {slot}: gleichzeitig {', '.join(teams)}.",
            )
            for (tutor, slot), teams in seen.items()
            if len(teams) > 1
        ]
