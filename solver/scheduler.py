"""CP-SAT Testat-Solver (Google OR-Tools).

Architektur:
  - Eine Entscheidungsvariable pro zulässigem Tripel:
      assign[team, tutor, slot] – Team wird von Tutor im Slot geprüft
    Zulässig heißt: das Team bewertet den Slot (bei Paaren: beide) und der
    Tutor bewertet ihn nicht als NOT_FITTING.
  - Harte Constraints: jedes Team höchstens einmal, Tutor-Kapazität,
    höchstens ein Team pro (Tutor, Slot).
  - Zielfunktion (lexikographisch über Skalierung):
      1. möglichst viele Teams einplanen
      2. Summe der Bewertungen von Team und Tutor maximieren
      3. Tie-Break: wenig umkämpfte Slots (Nachfrage/Angebot) bevorzugen
  - Bleibt im bewiesenen Optimum ein Team übrig, ist die Instanz unlösbar
    und genau dieses Team wird gemeldet.
"""

import os
import time
import logging
from typing import Optional

from ortools.sat.python import cp_model

from config.schema import SolverConfig
from models.instance import Instance
from models.rating import weight
from models.solution import Solution, Testat
from models.team import Team
from models.timeslot import Timeslot
from solver.demand import SlotBalance, slot_balance, team_rating_values
from solver.errors import InfeasibleError, NotConvergedError, SolverError
from solver.teams import form_teams

logger = logging.getLogger(__name__)

# Höchster Präferenzwert eines Tripels in Viertel-Einheiten (Team 1.0 + Tutor 1.0)
MAX_PREFERENCE_QUARTERS = 8
# Auflösung des Nachfrage/Angebot-Tie-Breaks
GUIDANCE_STEPS = 10


# ─── Progress-Callback ────────────────────────────────────────────────────────

class SolveProgressCallback(cp_model.CpSolverSolutionCallback):
    """Protokolliert jede verbesserte Lösung während der Suche."""

    def __init__(self) -> None:
        super().__init__()
        self._solution_count = 0
        self._start_time = time.time()

    def on_solution_callback(self) -> None:
        self._solution_count += 1
        elapsed = time.time() - self._start_time
        logger.debug(
            f"  Lösung #{self._solution_count} | "
            f"Zeit: {elapsed:.2f}s | "
            f"Obj: {self.objective_value:.0f}"
        )

    @property
    def solution_count(self) -> int:
        return self._solution_count


# ─── Haupt-Solver ─────────────────────────────────────────────────────────────

class TestatSolver:
    """CP-SAT basierter Testat-Solver.

    Verwendung:
        solver = TestatSolver(instance)
        solution = solver.solve()
    """

    __test__ = False

    def __init__(self, instance: Instance, config: Optional[SolverConfig] = None) -> None:
        self.instance = instance
        self.config = config or SolverConfig()
        self._model = cp_model.CpModel()

        self.teams: list[Team] = []
        self.balance: dict[Timeslot, SlotBalance] = {}

        # (team_idx, tutor_idx, slot) -> BoolVar
        self._assign: dict[tuple[int, int, Timeslot], cp_model.IntVar] = {}
        # Bewertungen je Team (Slot -> Wert), Index wie self.teams
        self._team_values: list[dict[Timeslot, float]] = []

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def solve(self) -> Solution:
        """Löst die Testat-Verteilung.

        Raises:
            InfeasibleError: mindestens ein Team ist bewiesenermaßen nicht einplanbar
            NotConvergedError: Zeitlimit erreicht ohne bewiesenes Ergebnis
            SolverError: unerwarteter Solver-Status
        """
        t0 = time.time()

        # Modell bei jedem Aufruf neu aufbauen
        self._model = cp_model.CpModel()
        self._assign = {}

        self.teams = form_teams(self.instance.students)
        self._team_values = [team_rating_values(team) for team in self.teams]
        self._build_balance()
        self._create_variables()
        self._add_constraints()
        self._add_objective()

        num_vars = len(self._model.proto.variables)
        num_cons = len(self._model.proto.constraints)
        logger.info(
            f"Modell: {len(self.teams)} Teams, {len(self.instance.tutors)} Tutoren, "
            f"{len(self.balance)} Slots | {num_vars} Variablen, {num_cons} Constraints"
        )

        cp_solver = cp_model.CpSolver()
        cp_solver.parameters.max_time_in_seconds = self.config.time_limit_seconds
        cp_solver.parameters.num_workers = self.config.num_workers or os.cpu_count() or 4
        cp_solver.parameters.random_seed = self.config.random_seed
        cp_solver.parameters.log_search_progress = self.config.log_search_progress

        callback = SolveProgressCallback()
        status = cp_solver.solve(self._model, callback)

        elapsed = time.time() - t0
        status_name = cp_solver.status_name(status)

        logger.info(
            f"Solver beendet: {status_name} | "
            f"Zeit: {elapsed:.2f}s | "
            f"Lösungen: {callback.solution_count}"
        )

        if status == cp_model.MODEL_INVALID:
            raise SolverError(f"CP-SAT-Modell ungültig: {self._model.validate()}")
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            # Ohne harte Gleichheitsconstraints ist "niemand eingeplant"
            # immer zulässig; INFEASIBLE wäre ein Modellfehler.
            if status == cp_model.INFEASIBLE:
                raise SolverError("CP-SAT meldet INFEASIBLE für ein stets lösbares Modell")
            raise NotConvergedError(status_name, self.config.time_limit_seconds)

        placed = {
            t_idx for (t_idx, _, _), var in self._assign.items()
            if cp_solver.value(var) == 1
        }
        unplaced = [i for i in range(len(self.teams)) if i not in placed]
        if unplaced:
            if status != cp_model.OPTIMAL:
                raise NotConvergedError(status_name, self.config.time_limit_seconds)
            reasons = self._diagnose_infeasible(unplaced)
            raise InfeasibleError([self.teams[i].name for i in unplaced], reasons)

        if status != cp_model.OPTIMAL:
            logger.warning(
                f"Alle Teams eingeplant, Präferenz-Optimum aber nicht bewiesen "
                f"(Status: {status_name}, Zeitlimit {self.config.time_limit_seconds:g}s)"
            )

        return self._extract_solution(cp_solver, elapsed, status_name, num_vars, num_cons)

    # ─── Nachfrage / Angebot ──────────────────────────────────────────────────

    def _build_balance(self) -> None:
        """Nachfrage/Angebot für jeden bewerteten Slot."""
        slots = self.instance.slots()
        self.balance = {
            b.timeslot: b for b in slot_balance(slots, self.teams, self.instance.tutors)
        }
        contested = sorted(
            (b for b in self.balance.values() if b.shortfall > 0),
            key=lambda b: -b.shortfall,
        )
        for b in contested[:5]:
            logger.debug(
                f"  Engpass {b.timeslot}: Nachfrage {b.demand:.2f} / Angebot {b.supply:.2f}"
            )

    # ─── Variablen erstellen ──────────────────────────────────────────────────

    def _create_variables(self) -> None:
        """assign[team, tutor, slot] nur für zulässige Tripel."""
        for t_idx, values in enumerate(self._team_values):
            for slot in sorted(values):
                for k, tutor in enumerate(self.instance.tutors):
                    if tutor.capacity == 0:
                        continue
                    if not tutor.slot_assignment.rating_for(slot).is_ok:
                        continue
                    self._assign[(t_idx, k, slot)] = self._model.new_bool_var(
                        f"assign_t{t_idx}_k{k}_{slot.slot_id}"
                    )

    # ─── Constraints ──────────────────────────────────────────────────────────

    def _add_constraints(self) -> None:
        """Fügt alle harten Constraints zum Modell hinzu."""
        self._c1_team_at_most_once()
        self._c2_tutor_capacity()
        if not self.config.allow_concurrent_sessions:
            self._c3_single_occupancy()

    def _c1_team_at_most_once(self) -> None:
        """Jedes Team höchstens einmal (Nicht-Einplanen wird in der Zielfunktion bestraft)."""
        by_team: dict[int, list] = {}
        for (t_idx, _, _), var in self._assign.items():
            by_team.setdefault(t_idx, []).append(var)
        for vars_ in by_team.values():
            self._model.add_at_most_one(vars_)

    def _c2_tutor_capacity(self) -> None:
        """Summe der Testate eines Tutors ≤ ganzzahlige Kapazität."""
        by_tutor: dict[int, list] = {}
        for (_, k, _), var in self._assign.items():
            by_tutor.setdefault(k, []).append(var)
        for k, vars_ in by_tutor.items():
            capacity = self.instance.tutors[k].capacity
            if len(vars_) > capacity:
                self._model.add(sum(vars_) <= capacity)

    def _c3_single_occupancy(self) -> None:
        """Höchstens ein Team pro (Tutor, Slot)."""
        by_tutor_slot: dict[tuple[int, Timeslot], list] = {}
        for (_, k, slot), var in self._assign.items():
            by_tutor_slot.setdefault((k, slot), []).append(var)
        for vars_ in by_tutor_slot.values():
            if len(vars_) > 1:
                self._model.add_at_most_one(vars_)

    # ─── Zielfunktion ─────────────────────────────────────────────────────────

    def _preference_quarters(self, t_idx: int, k: int, slot: Timeslot) -> int:
        team_value = self._team_values[t_idx][slot]
        tutor_value = weight(self.instance.tutors[k].slot_assignment.rating_for(slot))
        return round(4 * (team_value + tutor_value))

    def _guidance_penalty(self, slot: Timeslot) -> int:
        """0 für entspannte Slots, bis GUIDANCE_STEPS für stark umkämpfte."""
        pressure = self.balance[slot].pressure
        if pressure == float("inf"):
            return GUIDANCE_STEPS
        return round(GUIDANCE_STEPS * pressure / (1.0 + pressure))

    def _add_objective(self) -> None:
        """Maximiert eingeplante Teams, dann Präferenz, dann Entlastung.

        Die Koeffizienten sind so skaliert, dass jede Stufe alle folgenden
        dominiert.
        """
        n = max(len(self.teams), 1)
        preference_unit = n * GUIDANCE_STEPS + 1
        placement_bonus = n * MAX_PREFERENCE_QUARTERS * preference_unit + 1

        terms = []
        for (t_idx, k, slot), var in self._assign.items():
            coef = placement_bonus + self._preference_quarters(t_idx, k, slot) * preference_unit
            if self.config.use_guidance:
                coef -= self._guidance_penalty(slot)
            terms.append(coef * var)
        # Ohne Variablen bleibt das Modell ohne Zielfunktion
        if terms:
            self._model.maximize(sum(terms))

    # ─── Lösung extrahieren ───────────────────────────────────────────────────

    def _extract_solution(
        self,
        cp_solver: cp_model.CpSolver,
        elapsed: float,
        status_name: str,
        num_vars: int,
        num_cons: int,
    ) -> Solution:
        """Extrahiert die Testate aus dem gelösten Modell."""
        testats: list[Testat] = []
        for (t_idx, k, slot), var in self._assign.items():
            if cp_solver.value(var) != 1:
                continue
            tutor = self.instance.tutors[k]
            testats.append(Testat(
                timeslot=slot,
                tutor=tutor.name,
                team=self.teams[t_idx].member_names,
                team_value=self._team_values[t_idx][slot],
                tutor_value=weight(tutor.slot_assignment.rating_for(slot)),
            ))

        testats.sort(key=lambda t: (t.timeslot, t.tutor, t.team))
        return Solution(
            testats=testats,
            solver_status=status_name,
            solve_time_seconds=elapsed,
            objective_value=sum(t.preference for t in testats),
            num_variables=num_vars,
            num_constraints=num_cons,
        )

    # ─── Diagnose ─────────────────────────────────────────────────────────────

    def _diagnose_infeasible(self, unplaced: list[int]) -> dict[str, str]:
        """Begründet für jedes nicht eingeplante Team, warum es keinen Platz fand."""
        with_candidates = {t_idx for (t_idx, _, _) in self._assign}
        reasons: dict[str, str] = {}

        logger.error(
            f"INFEASIBLE – {len(unplaced)} von {len(self.teams)} Teams nicht einplanbar"
        )
        for t_idx in unplaced:
            team = self.teams[t_idx]
            values = self._team_values[t_idx]
            if not values:
                reason = "kein gemeinsam bewerteter Slot"
            elif t_idx not in with_candidates:
                reason = f"kein Tutor mit Kapazität akzeptiert einen der {len(values)} Slots"
            else:
                demand = sum(self.balance[s].demand for s in values if s in self.balance)
                supply = sum(self.balance[s].supply for s in values if s in self.balance)
                reason = (
                    f"Tutorenkapazität auf allen möglichen Slots ausgeschöpft "
                    f"(Nachfrage {demand:.2f} / Angebot {supply:.2f})"
                )
            reasons[team.name] = reason
            logger.error(f"  Team '{team.name}': {reason}")

        total_capacity = sum(t.capacity for t in self.instance.tutors)
        logger.error(
            f"Gesamtkapazität: {total_capacity} Testate | Teams: {len(self.teams)}"
        )
        return reasons


def solve(instance: Instance, config: Optional[SolverConfig] = None) -> Solution:
    """Kurzform für ``TestatSolver(instance, config).solve()``."""
    return TestatSolver(instance, config).solve()
