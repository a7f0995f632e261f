"""Laden und Speichern von Instanzen (JSON oder YAML).

Gehört zur Host-Seite: der Solver selbst liest und schreibt keine Dateien.

Format (YAML-Beispiel):

    students:
      - name: anna
        partner: ben
        slot_assignment:
          good: [{day: 0, slot_of_day: 1}]
          tolerable: [{day: 1, slot_of_day: 2}]
    tutors:
      - name: tom
        scale_factor: 1.0
        slot_assignment:
          good: [{day: 0, slot_of_day: 1}]
"""

import json
from pathlib import Path

from pydantic import ValidationError
from ruamel.yaml import YAML

from models.instance import Instance


class InstanceLoadError(Exception):
    """Fehler beim Laden einer Instanz."""


_YAML_SUFFIXES = {".yaml", ".yml"}


def load_instance(path: Path) -> Instance:
    """Lädt eine Instanz aus einer JSON- oder YAML-Datei.

    Raises:
        FileNotFoundError: Datei existiert nicht.
        InstanceLoadError: Datei ist kein gültiges JSON/YAML oder verletzt
            die Vorbedingungen der Instanz.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Instanz-Datei nicht gefunden: {path}")

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            yaml = YAML(typ="safe")
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.load(f)
            return Instance.model_validate(raw or {})
        with open(path, "r", encoding="utf-8") as f:
            return Instance.model_validate_json(f.read())
    except ValidationError as e:
        raise InstanceLoadError(f"Instanz ungültig: {path}\n{e}") from e
    except Exception as e:
        raise InstanceLoadError(f"Instanz nicht lesbar: {path}\n{e}") from e


def save_instance(instance: Instance, path: Path) -> Path:
    """Speichert eine Instanz als JSON oder YAML (nach Dateiendung)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in _YAML_SUFFIXES:
        yaml = YAML()
        yaml.default_flow_style = False
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(json.loads(instance.model_dump_json()), f)
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(instance.model_dump_json(indent=2))
    return path
