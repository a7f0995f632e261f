"""Solver-Modul (CP-SAT via Google OR-Tools)."""

from .errors import (
    InfeasibleError,
    NotConvergedError,
    PreconditionError,
    SolverError,
    TestatError,
)
from .teams import form_teams
from .demand import SlotBalance, compute_demand, compute_supply, slot_balance, team_rating_values
from .scheduler import TestatSolver, solve

__all__ = [
    "InfeasibleError",
    "NotConvergedError",
    "PreconditionError",
    "SolverError",
    "TestatError",
    "form_teams",
    "SlotBalance",
    "compute_demand",
    "compute_supply",
    "slot_balance",
    "team_rating_values",
    "TestatSolver",
    "solve",
]
