"""Testat-Planer — Haupt-CLI.

Die Kommandozeile spielt die Rolle der Host-Anwendung: sie liest Instanzen
aus Dateien, ruft den Solver auf und stellt das Ergebnis dar.

Verwendung:
  python main.py generate -o instance.json    Testdaten erzeugen
  python main.py validate instance.json       Machbarkeits-Check
  python main.py balance instance.json        Nachfrage/Angebot je Slot
  python main.py solve instance.json          Testate verteilen
  python main.py config init                  Konfiguration anlegen
  python main.py config show                  Konfiguration anzeigen

Exit-Codes:
  0  Erfolg
  1  Datei nicht lesbar / Instanz ungültig / Check fehlgeschlagen
  2  Instanz unlösbar oder Solver ohne Ergebnis
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DEFAULT_INSTANCE_JSON = Path("output/instance.json")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_instance_or_abort(path: Path):
    """Lädt eine Instanz oder bricht mit Fehlermeldung ab."""
    from data.instance_loader import InstanceLoadError, load_instance

    try:
        return load_instance(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except InstanceLoadError as e:
        console.print(f"[red bold]Instanz ungültig:[/red bold]\n{e}")
        sys.exit(1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Konfiguration.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Testat-Planer: verteilt Teams auf Tutoren und Zeitslots."""
    from config.manager import ConfigManager

    mgr = ConfigManager(config_path)
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    _setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = {"manager": mgr, "config": config}


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@cli.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--singles", default=10, help="Anzahl Studierende ohne Partner.")
@click.option("--pairs", default=4, help="Anzahl Paare.")
@click.option("--tutors", default=4, help="Anzahl Tutoren.")
@click.option("--output", "-o", default=str(DEFAULT_INSTANCE_JSON),
              help="Ausgabepfad (.json oder .yaml).")
def cmd_generate(seed: int, singles: int, pairs: int, tutors: int, output: str):
    """Erzeugt eine zufällige, gültige Instanz."""
    from data.fake_data import FakeInstanceGenerator
    from data.instance_loader import save_instance

    gen = FakeInstanceGenerator(
        seed=seed, num_singles=singles, num_pairs=pairs, num_tutors=tutors,
    )
    instance = gen.generate()
    path = save_instance(instance, Path(output))
    console.print(f"\n[dim]{instance.summary()}[/dim]")
    console.print(f"[green]✓[/green] Instanz gespeichert: {path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@cli.command("validate")
@click.argument("instance_path", type=click.Path(path_type=Path))
def cmd_validate(instance_path: Path):
    """Führt einen Machbarkeits-Check auf einer Instanz durch."""
    instance = _load_instance_or_abort(instance_path)
    console.print(f"\n{instance.summary()}\n")
    report = instance.validate_feasibility()
    report.print_rich()
    sys.exit(0 if report.is_feasible else 1)


# ─── BALANCE ──────────────────────────────────────────────────────────────────

@cli.command("balance")
@click.argument("instance_path", type=click.Path(path_type=Path))
def cmd_balance(instance_path: Path):
    """Zeigt Nachfrage und Angebot für jeden bewerteten Slot."""
    from export.tui_renderer import render_balance_rows
    from solver.demand import slot_balance
    from solver.teams import form_teams

    instance = _load_instance_or_abort(instance_path)
    teams = form_teams(instance.students)
    balances = slot_balance(instance.slots(), teams, instance.tutors)

    table = Table(title="Nachfrage / Angebot", box=box.ROUNDED)
    table.add_column("Slot")
    table.add_column("Nachfrage", justify="right")
    table.add_column("Angebot", justify="right")
    table.add_column("Druck", justify="right")
    for row in render_balance_rows(balances):
        table.add_row(*row)
    console.print(table)


# ─── SOLVE ────────────────────────────────────────────────────────────────────

@cli.command("solve")
@click.argument("instance_path", type=click.Path(path_type=Path))
@click.option("--time-limit", type=float, default=None, help="Zeitlimit in Sekunden.")
@click.option("--workers", type=int, default=None, help="CPU-Kerne (0 = alle).")
@click.option("--concurrent", is_flag=True, default=False,
              help="Mehrere Testate pro Tutor und Slot erlauben.")
@click.option("--by-tutor", is_flag=True, default=False,
              help="Wochenplan je Tutor statt Liste anzeigen.")
@click.option("--out", default=None, help="Lösung als JSON speichern.")
@click.pass_context
def cmd_solve(
    ctx: click.Context,
    instance_path: Path,
    time_limit: Optional[float],
    workers: Optional[int],
    concurrent: bool,
    by_tutor: bool,
    out: Optional[str],
):
    """Verteilt alle Teams auf Tutoren und Slots."""
    from analysis.solution_validator import SolutionValidator
    from export.tui_renderer import render_solution_rows, render_tutor_rows
    from solver.errors import InfeasibleError, NotConvergedError
    from solver.scheduler import TestatSolver

    instance = _load_instance_or_abort(instance_path)

    solver_config = ctx.obj["config"].solver
    updates = {}
    if time_limit is not None:
        updates["time_limit_seconds"] = time_limit
    if workers is not None:
        updates["num_workers"] = workers
    if concurrent:
        updates["allow_concurrent_sessions"] = True
    solver_config = solver_config.model_copy(update=updates)

    console.print("[bold]Testate werden verteilt...[/bold]")
    try:
        solution = TestatSolver(instance, solver_config).solve()
    except InfeasibleError as e:
        console.print(Panel(
            "\n".join(
                f"[red]• {name}[/red]: {e.reasons.get(name, '')}"
                for name in e.unplaced_teams
            ),
            title="✗ Nicht lösbar",
            border_style="red",
        ))
        sys.exit(2)
    except NotConvergedError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(2)

    console.print(
        f"\n[bold]Status:[/bold] {solution.solver_status} | "
        f"Testate: {len(solution.testats)} | "
        f"Präferenz: {solution.total_preference:g} | "
        f"Zeit: {solution.solve_time_seconds:.2f}s"
    )

    if by_tutor:
        for tutor in instance.tutors:
            rows = render_tutor_rows(tutor.name, solution)
            if not rows:
                continue
            table = Table(title=f"Tutor {tutor.name}", box=box.ROUNDED, show_lines=True)
            table.add_column("Slot")
            for day in ["Mo", "Di", "Mi", "Do", "Fr"]:
                table.add_column(day)
            for row in rows:
                table.add_row(*row)
            console.print(table)
    else:
        table = Table(title="Testate", box=box.ROUNDED)
        table.add_column("Slot")
        table.add_column("Tutor")
        table.add_column("Team")
        table.add_column("Bewertung (Team / Tutor)")
        for row in render_solution_rows(solution):
            table.add_row(*row)
        console.print(table)

    report = SolutionValidator(
        allow_concurrent_sessions=solver_config.allow_concurrent_sessions
    ).validate(solution, instance)
    report.print_rich()

    if out:
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(solution.model_dump_json(indent=2))
        console.print(f"[green]✓[/green] Lösung gespeichert: {out_path}")

    sys.exit(0 if report.is_valid else 1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@cli.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktive Konfiguration an."""
    mgr = ctx.obj["manager"]
    config = ctx.obj["config"]
    source = str(mgr.path) if mgr.exists() else "Defaults"

    table = Table(title=f"Solver ({source})", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    for k, v in config.solver.model_dump().items():
        table.add_row(k, str(v))
    console.print(table)
    console.print(f"[bold]Log-Level:[/bold] {config.log_level}")


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Bestehende Datei überschreiben.")
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Legt eine Konfigurationsdatei mit Standardwerten an."""
    from config.defaults import default_config

    mgr = ctx.obj["manager"]
    if mgr.exists() and not force:
        console.print(
            f"[yellow]Konfiguration existiert bereits: {mgr.path}[/yellow]\n"
            "Mit [bold]--force[/bold] überschreiben."
        )
        sys.exit(1)
    path = mgr.save(default_config())
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {path}")


def main():
    cli()


if __name__ == "__main__":
    main()
