from models.timeslot import Timeslot, WorkDay
from models.rating import SlotAssignment, SlotRating, weight
from models.student import Student
from models.tutor import TESTATS_PER_STELLE, Tutor
from models.team import Team, TeamKind
from models.instance import FeasibilityReport, Instance
from models.solution import Solution, Testat

__all__ = [
    "Timeslot",
    "WorkDay",
    "SlotAssignment",
    "SlotRating",
    "weight",
    "Student",
    "TESTATS_PER_STELLE",
    "Tutor",
    "Team",
    "TeamKind",
    "FeasibilityReport",
    "Instance",
    "Solution",
    "Testat",
]
