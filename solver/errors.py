"""Fehlerklassen des Testat-Solvers.

``PreconditionError`` steht für verletzte Datenverträge des Aufrufers,
``InfeasibleError`` und ``NotConvergedError`` sind erwartbare Ergebnisse,
die einem Menschen angezeigt werden müssen.
"""

from typing import Optional


class TestatError(Exception):
    """Basisklasse aller Fehler des Testat-Solvers."""

    # Kein Pytest-Testfall, trotz des Namens
    __test__ = False


class PreconditionError(TestatError, ValueError):
    """Eingabedaten verletzen eine Vorbedingung (z.B. asymmetrischer Partnerwunsch)."""


class InfeasibleError(TestatError):
    """Mindestens ein Team lässt sich nicht einplanen."""

    def __init__(self, unplaced_teams: list[str], reasons: Optional[dict[str, str]] = None) -> None:
        self.unplaced_teams = list(unplaced_teams)
        self.reasons = dict(reasons or {})
        details = "; ".join(
            f"{name}: {self.reasons[name]}" if name in self.reasons else name
            for name in self.unplaced_teams
        )
        super().__init__(
            f"Keine zulässige Testat-Verteilung – {len(self.unplaced_teams)} Team(s) "
            f"nicht einplanbar: {details}"
        )


class NotConvergedError(TestatError):
    """Zeitlimit erreicht, bevor eine bewiesene Antwort vorlag."""

    def __init__(self, status: str, time_limit: float) -> None:
        self.status = status
        self.time_limit = time_limit
        super().__init__(
            f"Solver nach {time_limit:g}s ohne bewiesenes Ergebnis abgebrochen (Status: {status})"
        )


class SolverError(TestatError):
    """Unerwarteter Solver-Status (z.B. MODEL_INVALID)."""
