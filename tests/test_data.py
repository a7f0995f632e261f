"""Tests für Instanz-Dateien und den Testdaten-Generator."""

import json
from pathlib import Path

import pytest

from data.fake_data import FakeInstanceGenerator
from data.instance_loader import InstanceLoadError, load_instance, save_instance
from models.instance import Instance
from models.rating import SlotAssignment
from models.student import Student
from models.timeslot import Timeslot, WorkDay
from models.tutor import Tutor
from solver.teams import form_teams


MO1 = Timeslot(WorkDay.MONDAY, 1)
DI1 = Timeslot(WorkDay.TUESDAY, 1)


def make_instance() -> Instance:
    return Instance(
        students=[
            Student(name="anna", slot_assignment=SlotAssignment.from_slots([MO1], [DI1]),
                    partner="ben"),
            Student(name="ben", slot_assignment=SlotAssignment.from_slots([MO1]),
                    partner="anna"),
        ],
        tutors=[
            Tutor(name="tom", slot_assignment=SlotAssignment.from_slots([MO1, DI1]),
                  scale_factor=1.5),
        ],
    )


# ─── LADEN / SPEICHERN ────────────────────────────────────────────────────────

class TestInstanceLoader:
    @pytest.mark.parametrize("suffix", [".json", ".yaml"])
    def test_roundtrip(self, tmp_path: Path, suffix: str):
        instance = make_instance()
        path = save_instance(instance, tmp_path / f"instance{suffix}")
        assert load_instance(path) == instance

    def test_json_format(self, tmp_path: Path):
        path = save_instance(make_instance(), tmp_path / "instance.json")
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["students"][0]["slot_assignment"]["good"] == [{"day": 0, "slot_of_day": 1}]
        assert raw["tutors"][0]["scale_factor"] == 1.5

    def test_handwritten_yaml(self, tmp_path: Path):
        path = tmp_path / "instance.yml"
        path.write_text(
            "students:\n"
            "  - name: anna\n"
            "    slot_assignment:\n"
            "      good: [{day: 0, slot_of_day: 1}]\n"
            "tutors:\n"
            "  - name: tom\n"
            "    scale_factor: 1\n"
            "    slot_assignment:\n"
            "      good: [{day: 0, slot_of_day: 1}]\n",
            encoding="utf-8",
        )
        instance = load_instance(path)
        assert instance.slots() == [MO1]
        assert instance.tutors[0].capacity == 1

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_instance(tmp_path / "fehlt.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "kaputt.json"
        path.write_text("{nicht json", encoding="utf-8")
        with pytest.raises(InstanceLoadError):
            load_instance(path)

    def test_asymmetric_partner_rejected(self, tmp_path: Path):
        raw = json.loads(make_instance().model_dump_json())
        raw["students"][1]["partner"] = None
        path = tmp_path / "asym.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        with pytest.raises(InstanceLoadError, match="symmetrisch"):
            load_instance(path)

    def test_tutor_overbooked_rejected(self, tmp_path: Path):
        raw = json.loads(make_instance().model_dump_json())
        raw["tutors"][0]["scale_factor"] = 5.0
        path = tmp_path / "tutor.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        with pytest.raises(InstanceLoadError):
            load_instance(path)


# ─── FAKE-DATEN ───────────────────────────────────────────────────────────────

class TestFakeInstanceGenerator:
    def test_generates_valid_instance(self):
        gen = FakeInstanceGenerator(seed=1, num_singles=6, num_pairs=3, num_tutors=3)
        instance = gen.generate()
        assert len(instance.students) == 6 + 2 * 3
        assert len(instance.tutors) == 3
        assert len(form_teams(instance.students)) == gen.num_teams

    def test_seed_reproducible(self):
        first = FakeInstanceGenerator(seed=7).generate()
        second = FakeInstanceGenerator(seed=7).generate()
        assert first == second

    def test_pairs_share_slot(self):
        instance = FakeInstanceGenerator(seed=3, num_pairs=5).generate()
        for team in form_teams(instance.students):
            if team.members() == 2:
                a, b = team.students
                assert a.slot_assignment.intersect(b.slot_assignment)

    def test_tutors_cover_grid(self):
        gen = FakeInstanceGenerator(seed=2, num_tutors=3, slots_per_day=2)
        instance = gen.generate()
        covered = set()
        for tutor in instance.tutors:
            covered.update(tutor.slot_assignment.good)
        assert covered == set(gen.grid)

    def test_tutor_capacity_at_least_one(self):
        instance = FakeInstanceGenerator(seed=5).generate()
        assert all(t.capacity >= 1 for t in instance.tutors)

    def test_no_tutors(self):
        instance = FakeInstanceGenerator(seed=1, num_tutors=0).generate()
        assert instance.tutors == []
