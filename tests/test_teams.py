"""Tests für die Teambildung aus Partnerwünschen."""

import pytest

from models.rating import SlotAssignment
from models.student import Student
from models.team import Team, TeamKind
from models.timeslot import Timeslot, WorkDay
from solver.errors import PreconditionError
from solver.teams import form_teams


MO1 = Timeslot(WorkDay.MONDAY, 1)


def _student(name, partner=None) -> Student:
    return Student(
        name=name,
        slot_assignment=SlotAssignment.from_slots([MO1]),
        partner=partner,
    )


# ─── TEAM ─────────────────────────────────────────────────────────────────────

class TestTeam:
    def test_single(self):
        roster = (_student("anna"),)
        team = Team.single(roster, 0)
        assert team.kind is TeamKind.SINGLE
        assert team.members() == 1
        assert team.name == "anna"

    def test_full(self):
        roster = (_student("anna", "ben"), _student("ben", "anna"))
        team = Team.full(roster, 0, 1)
        assert team.kind is TeamKind.FULL
        assert team.members() == 2
        assert team.member_names == ["anna", "ben"]
        assert str(team) == "anna & ben"

    def test_contains_by_name(self):
        roster = (_student("anna", "ben"), _student("ben", "anna"))
        team = Team.full(roster, 0, 1)
        # Andere Instanz, gleicher Name
        assert team.contains(_student("ben"))
        assert not team.contains(_student("clara"))

    def test_all_students(self):
        roster = (_student("anna", "ben"), _student("ben", "anna"))
        team = Team.full(roster, 0, 1)
        assert team.all_students(lambda s: s.partner is not None)
        assert not team.all_students(lambda s: s.name == "anna")

    def test_invalid_sizes(self):
        roster = (_student("anna"),)
        with pytest.raises(ValueError):
            Team(roster, ())
        with pytest.raises(ValueError):
            Team(roster, (0, 0))


# ─── FORM_TEAMS ───────────────────────────────────────────────────────────────

class TestFormTeams:
    def test_singles_keep_input_order(self):
        students = [_student("clara"), _student("anna"), _student("ben")]
        teams = form_teams(students)
        assert [t.name for t in teams] == ["clara", "anna", "ben"]
        assert all(t.kind is TeamKind.SINGLE for t in teams)

    def test_pair_emitted_once(self):
        """Ein Paar erscheint genau einmal, an der Position des ersten Mitglieds."""
        students = [
            _student("anna", "ben"),
            _student("clara"),
            _student("ben", "anna"),
        ]
        teams = form_teams(students)
        assert [t.name for t in teams] == ["anna & ben", "clara"]

    def test_team_count(self):
        """|Teams| = |Studierende| - |gepaarte Studierende| / 2."""
        students = [
            _student("anna", "ben"),
            _student("ben", "anna"),
            _student("clara", "david"),
            _student("david", "clara"),
            _student("emma"),
        ]
        teams = form_teams(students)
        assert len(teams) == 5 - 4 // 2

    def test_every_student_exactly_once(self):
        students = [
            _student("anna", "ben"),
            _student("clara"),
            _student("ben", "anna"),
            _student("david"),
        ]
        teams = form_teams(students)
        names = [n for t in teams for n in t.member_names]
        assert sorted(names) == ["anna", "ben", "clara", "david"]

    def test_full_team_is_symmetric(self):
        students = [_student("anna", "ben"), _student("ben", "anna")]
        (team,) = form_teams(students)
        first, second = team.students
        assert first.partner == second.name
        assert second.partner == first.name

    def test_unknown_partner(self):
        with pytest.raises(PreconditionError, match="unbekannten Partner"):
            form_teams([_student("anna", "ben")])

    def test_asymmetric_partner_none(self):
        """A → B, aber B → ∅."""
        with pytest.raises(PreconditionError, match="symmetrisch"):
            form_teams([_student("anna", "ben"), _student("ben")])

    def test_asymmetric_partner_other(self):
        """A → B, aber B → C."""
        students = [
            _student("anna", "ben"),
            _student("ben", "clara"),
            _student("clara", "ben"),
        ]
        with pytest.raises(PreconditionError, match="symmetrisch"):
            form_teams(students)

    def test_duplicate_names(self):
        with pytest.raises(PreconditionError, match="nicht eindeutig"):
            form_teams([_student("anna"), _student("anna")])

    def test_self_partner_bypassing_validation(self):
        """Auch ohne Pydantic-Validierung wird ein Selbst-Partner abgewiesen."""
        s = Student.model_construct(
            name="anna",
            slot_assignment=SlotAssignment.from_slots([MO1]),
            partner="anna",
        )
        with pytest.raises(PreconditionError, match="selbst"):
            form_teams([s])

    def test_precondition_is_value_error(self):
        with pytest.raises(ValueError):
            form_teams([_student("anna", "ben")])

    def test_empty(self):
        assert form_teams([]) == []
