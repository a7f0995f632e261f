"""Teambildung aus Partnerwünschen."""

import logging
from typing import Sequence

from models.student import Student
from models.team import Team
from solver.errors import PreconditionError

logger = logging.getLogger(__name__)


def form_teams(students: Sequence[Student]) -> list[Team]:
    """Gruppiert Studierende zu Einzel- und Zweier-Teams.

    Die Reihenfolge der Teams folgt dem ersten Auftreten eines Mitglieds in
    ``students``. Unbekannte oder einseitige Partnerwünsche sind
    Vertragsverletzungen des Aufrufers und führen zu ``PreconditionError``.
    """
    roster = tuple(students)
    index: dict[str, int] = {}
    for i, s in enumerate(roster):
        if s.name in index:
            raise PreconditionError(f"Studentenname '{s.name}' ist nicht eindeutig.")
        index[s.name] = i

    teams: list[Team] = []
    paired: set[int] = set()
    for i, s in enumerate(roster):
        if s.partner is None:
            teams.append(Team.single(roster, i))
            continue
        # Bereits zusammen mit dem Partner eingeteilt
        if i in paired:
            continue

        j = index.get(s.partner)
        if j is None:
            raise PreconditionError(
                f"Student '{s.name}' hat unbekannten Partner '{s.partner}'."
            )
        if j == i:
            raise PreconditionError(f"Student '{s.name}' nennt sich selbst als Partner.")
        partner = roster[j]
        if partner.partner != s.name:
            raise PreconditionError(
                f"Partnerwunsch nicht symmetrisch: '{s.name}' → '{partner.name}', "
                f"aber '{partner.name}' → '{partner.partner}'."
            )
        teams.append(Team.full(roster, i, j))
        paired.update((i, j))

    logger.debug(
        f"{len(teams)} Teams gebildet ({len(paired) // 2} Paare, "
        f"{len(teams) - len(paired) // 2} Einzel)"
    )
    return teams
