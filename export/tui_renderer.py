"""Renderer für die Terminal-Anzeige von Testat-Plänen.

Liefert nur Tabellenzeilen; die Ausgabe (Rich) übernimmt main.py.
"""

from typing import TYPE_CHECKING

from models.timeslot import WorkDay

if TYPE_CHECKING:
    from models.solution import Solution
    from solver.demand import SlotBalance


def render_tutor_rows(tutor: str, solution: "Solution") -> list[list[str]]:
    """Gibt Tabellenzeilen für den Wochenplan eines Tutors zurück.

    Jede Zeile: [slot_of_day, Mo, Di, Mi, Do, Fr]. Zeilen reichen bis zum
    letzten belegten Slot des Tutors.
    """
    testats = solution.get_tutor_testats(tutor)
    if not testats:
        return []

    by_slot: dict = {}
    for t in testats:
        by_slot.setdefault((t.timeslot.day, t.timeslot.slot_of_day), []).append(t.team_name)

    last_slot = max(t.timeslot.slot_of_day for t in testats)
    rows: list[list[str]] = []
    for slot_of_day in range(last_slot + 1):
        cells = [str(slot_of_day)]
        for day in WorkDay:
            teams = by_slot.get((day, slot_of_day))
            cells.append("\n".join(teams) if teams else "—")
        rows.append(cells)
    return rows


def render_solution_rows(solution: "Solution") -> list[list[str]]:
    """Eine Zeile pro Testat: [Slot, Tutor, Team, Bewertung Team/Tutor]."""
    return [
        [
            str(t.timeslot),
            t.tutor,
            t.team_name,
            f"{t.team_value:g} / {t.tutor_value:g}",
        ]
        for t in solution.testats
    ]


def render_balance_rows(balances: list["SlotBalance"]) -> list[list[str]]:
    """Eine Zeile pro Slot: [Slot, Nachfrage, Angebot, Druck]; Engpässe markiert."""
    rows: list[list[str]] = []
    for b in balances:
        pressure = "∞" if b.pressure == float("inf") else f"{b.pressure:.2f}"
        marker = "  [red]Engpass[/red]" if b.shortfall > 0 else ""
        rows.append([
            str(b.timeslot),
            f"{b.demand:.2f}",
            f"{b.supply:.2f}",
            pressure + marker,
        ])
    return rows
