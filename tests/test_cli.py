"""Tests für die Kommandozeile (click)."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from data.fake_data import FakeInstanceGenerator
from data.instance_loader import save_instance
from main import cli
from models.instance import Instance
from models.rating import SlotAssignment
from models.student import Student
from models.timeslot import Timeslot, WorkDay
from models.tutor import Tutor


MO1 = Timeslot(WorkDay.MONDAY, 1)
DI1 = Timeslot(WorkDay.TUESDAY, 1)
FR3 = Timeslot(WorkDay.FRIDAY, 3)


def _instance(student_slots) -> Instance:
    return Instance(
        students=[
            Student(name=name, slot_assignment=SlotAssignment.from_slots(good))
            for name, good in student_slots.items()
        ],
        tutors=[
            Tutor(name="tom", slot_assignment=SlotAssignment.from_slots([MO1, DI1]),
                  scale_factor=2.0),
        ],
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_args(tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "testat.yaml")]


@pytest.fixture
def feasible_file(tmp_path: Path) -> Path:
    return save_instance(_instance({"anna": [MO1], "ben": [DI1]}), tmp_path / "ok.json")


@pytest.fixture
def infeasible_file(tmp_path: Path) -> Path:
    return save_instance(_instance({"anna": [MO1], "ben": [FR3]}), tmp_path / "bad.json")


class TestCli:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "solve" in result.output

    def test_generate(self, runner, config_args, tmp_path):
        out = tmp_path / "gen.json"
        result = runner.invoke(cli, [*config_args, "generate", "--seed", "3", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.exists()
        raw = json.loads(out.read_text(encoding="utf-8"))
        assert len(raw["tutors"]) == 4

    def test_validate_feasible(self, runner, config_args, feasible_file):
        result = runner.invoke(cli, [*config_args, "validate", str(feasible_file)])
        assert result.exit_code == 0, result.output
        assert "LÖSBAR" in result.output

    def test_validate_infeasible(self, runner, config_args, infeasible_file):
        result = runner.invoke(cli, [*config_args, "validate", str(infeasible_file)])
        assert result.exit_code == 1

    def test_validate_missing_file(self, runner, config_args, tmp_path):
        result = runner.invoke(cli, [*config_args, "validate", str(tmp_path / "fehlt.json")])
        assert result.exit_code == 1
        assert "nicht gefunden" in result.output

    def test_balance(self, runner, config_args, feasible_file):
        result = runner.invoke(cli, [*config_args, "balance", str(feasible_file)])
        assert result.exit_code == 0, result.output
        assert "Nachfrage" in result.output

    def test_solve(self, runner, config_args, feasible_file, tmp_path):
        out = tmp_path / "solution.json"
        result = runner.invoke(
            cli, [*config_args, "solve", str(feasible_file), "--out", str(out)]
        )
        assert result.exit_code == 0, result.output
        raw = json.loads(out.read_text(encoding="utf-8"))
        assert raw["solver_status"] == "OPTIMAL"
        assert sorted(t["team"][0] for t in raw["testats"]) == ["anna", "ben"]

    def test_solve_by_tutor(self, runner, config_args, feasible_file):
        result = runner.invoke(cli, [*config_args, "solve", str(feasible_file), "--by-tutor"])
        assert result.exit_code == 0, result.output
        assert "Tutor tom" in result.output

    def test_solve_infeasible_exit_code(self, runner, config_args, infeasible_file):
        result = runner.invoke(cli, [*config_args, "solve", str(infeasible_file)])
        assert result.exit_code == 2
        assert "ben" in result.output

    def test_solve_not_converged_exit_code(self, runner, config_args, tmp_path):
        instance = FakeInstanceGenerator(
            seed=1, num_singles=200, num_pairs=50, num_tutors=30
        ).generate()
        path = save_instance(instance, tmp_path / "gross.json")
        result = runner.invoke(
            cli, [*config_args, "solve", str(path), "--time-limit", "1e-6"]
        )
        assert result.exit_code == 2
        assert "UNKNOWN" in result.output

    def test_config_init_and_show(self, runner, config_args, tmp_path):
        result = runner.invoke(cli, [*config_args, "config", "init"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "testat.yaml").exists()

        again = runner.invoke(cli, [*config_args, "config", "init"])
        assert again.exit_code == 1

        forced = runner.invoke(cli, [*config_args, "config", "init", "--force"])
        assert forced.exit_code == 0

        show = runner.invoke(cli, [*config_args, "config", "show"])
        assert show.exit_code == 0
        assert "time_limit_seconds" in show.output

    def test_invalid_config_file(self, runner, tmp_path, feasible_file):
        path = tmp_path / "kaputt.yaml"
        path.write_text("log_level: LAUT\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(path), "validate", str(feasible_file)])
        assert result.exit_code == 1
