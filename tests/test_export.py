"""Tests für die Tabellen-Renderer der Terminal-Anzeige."""

from models.solution import Solution, Testat
from models.timeslot import Timeslot, WorkDay
from export.tui_renderer import render_balance_rows, render_solution_rows, render_tutor_rows
from solver.demand import SlotBalance


MO0 = Timeslot(WorkDay.MONDAY, 0)
DI2 = Timeslot(WorkDay.TUESDAY, 2)


def make_solution() -> Solution:
    return Solution(
        testats=[
            Testat(timeslot=MO0, tutor="tom", team=["anna"], team_value=1.0, tutor_value=0.5),
            Testat(timeslot=DI2, tutor="tom", team=["ben", "clara"], team_value=0.75,
                   tutor_value=1.0),
            Testat(timeslot=DI2, tutor="tina", team=["david"], team_value=1.0, tutor_value=1.0),
        ],
        solver_status="OPTIMAL",
    )


class TestTutorRows:
    def test_grid_shape(self):
        """Zeilen bis zum letzten belegten Slot, Spalten Slot + Mo–Fr."""
        rows = render_tutor_rows("tom", make_solution())
        assert len(rows) == 3
        assert all(len(r) == 6 for r in rows)

    def test_cells(self):
        rows = render_tutor_rows("tom", make_solution())
        assert rows[0][0] == "0"
        assert rows[0][1] == "anna"
        assert rows[2][2] == "ben & clara"
        assert rows[1][1] == "—"

    def test_unknown_tutor(self):
        assert render_tutor_rows("niemand", make_solution()) == []


class TestSolutionRows:
    def test_one_row_per_testat(self):
        rows = render_solution_rows(make_solution())
        assert len(rows) == 3
        assert rows[0] == ["Mo 0.", "tom", "anna", "1 / 0.5"]
        assert rows[1][2] == "ben & clara"


class TestBalanceRows:
    def test_shortfall_marked(self):
        rows = render_balance_rows([
            SlotBalance(timeslot=MO0, demand=2.0, supply=1.0),
            SlotBalance(timeslot=DI2, demand=0.5, supply=1.0),
        ])
        assert rows[0][:3] == ["Mo 0.", "2.00", "1.00"]
        assert "Engpass" in rows[0][3]
        assert "Engpass" not in rows[1][3]

    def test_infinite_pressure(self):
        (row,) = render_balance_rows([SlotBalance(timeslot=MO0, demand=1.0, supply=0.0)])
        assert row[3].startswith("∞")
